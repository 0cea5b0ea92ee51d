from statcalc.parsing import detect_pairs_convention, parse_columns, parse_pairs


def test_pairs_us_comma_separates_x_and_y():
    paired = parse_pairs("1,2\n2,4\n3,5")
    assert paired.x_values == (1.0, 2.0, 3.0)
    assert paired.y_values == (2.0, 4.0, 5.0)
    assert [p.index for p in paired.data_points] == [0, 1, 2]
    assert paired.invalid_lines == ()


def test_pairs_with_semicolon_rows_and_decimals():
    paired = parse_pairs("1.5, 2.5; 3.5, 4.5")
    assert paired.x_values == (1.5, 3.5)
    assert paired.y_values == (2.5, 4.5)


def test_pairs_whitespace_rows_with_decimal_commas():
    assert detect_pairs_convention("1,5 2,3\n3,1 4,2") == "european"
    paired = parse_pairs("1,5 2,3\n3,1 4,2")
    assert paired.x_values == (1.5, 3.1)
    assert paired.y_values == (2.3, 4.2)


def test_pairs_locale_hint():
    paired = parse_pairs("1,5 2\n2,5 3", locale="es")
    assert paired.x_values == (1.5, 2.5)
    assert paired.y_values == (2.0, 3.0)


def test_pairs_extra_tokens_ignored_and_bad_lines_kept():
    paired = parse_pairs("1, 2, 99\n  oops  \n5\n3, 4")
    assert paired.count == 2
    assert paired.x_values == (1.0, 3.0)
    assert paired.invalid_lines == ("oops", "5")


def test_pairs_blank_input():
    assert parse_pairs("").count == 0
    assert parse_pairs(None).invalid_lines == ()


def test_columns_truncate_to_shorter():
    paired = parse_columns("1 2 3 4", "10 20 30")
    assert paired.count == 3
    assert paired.x_values == (1.0, 2.0, 3.0)
    assert paired.x_source_count == 4
    assert paired.y_source_count == 3
    assert paired.truncated


def test_columns_keep_invalid_tokens_per_side():
    paired = parse_columns("1 x 3", "4 5 y")
    assert paired.invalid_x_tokens == ("x",)
    assert paired.invalid_y_tokens == ("y",)
    assert paired.count == 2
    assert not paired.truncated
