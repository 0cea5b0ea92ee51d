import pytest

from statcalc.models import UNAVAILABLE
from statcalc.numeric import join_plain, ordinal, plain, round_half_away, round_or_unavailable
from statcalc.steps import STEP_TEMPLATES, StepRecorder, describe, render_steps


@pytest.mark.parametrize(
    "value, decimals, expected",
    [
        (2.675, 2, 2.68),
        (-0.125, 2, -0.13),
        (0.125, 2, 0.13),
        (0.5, 0, 1.0),
        (-2.5, 0, -3.0),
        (1.23456789, 4, 1.2346),
    ],
)
def test_round_half_away(value, decimals, expected):
    assert round_half_away(value, decimals) == expected


def test_round_normalizes_negative_zero():
    assert str(round_half_away(-0.0001, 2)) == "0.0"


def test_round_or_unavailable():
    assert round_or_unavailable(UNAVAILABLE, 2) is UNAVAILABLE
    assert round_or_unavailable(1.005, 2) == 1.01


def test_plain():
    assert plain(18.0) == "18"
    assert plain(2.5) == "2.5"
    assert plain(-0.00001) == "0"
    assert plain(1 / 3, 2) == "0.33"
    assert plain(UNAVAILABLE) == "--"
    assert join_plain([1.0, 2.25], 2) == "1, 2.25"


@pytest.mark.parametrize(
    "n, expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"),
     (13, "13th"), (21, "21st"), (22, "22nd"), (101, "101st"), (111, "111th")],
)
def test_ordinal(n, expected):
    assert ordinal(n) == expected


def test_recorder_numbers_steps_without_gaps():
    rec = StepRecorder()
    rec.add("sum_values", "1 + 2", "3", n=2)
    rec.add("divide_by_count", "3 / 2", "1.5", n=2)
    steps = rec.freeze()
    assert [s.step_number for s in steps] == [1, 2]
    assert steps[0].description == "Add all 2 values"
    assert steps[1].params == {"n": 2}


def test_describe_unknown_key():
    with pytest.raises(KeyError):
        describe("no_such_step", {})


def test_render_steps_partial_templates():
    rec = StepRecorder()
    rec.add("sum_values", "1 + 2", "3", n=2)
    rec.add("divide_by_count", "3 / 2", "1.5", n=2)
    rendered = render_steps(rec.freeze(), {"sum_values": "Summe der {n} Werte"})
    assert rendered[0].description == "Summe der 2 Werte"
    assert rendered[1].description == STEP_TEMPLATES["divide_by_count"].format(n=2)
    assert rendered[0].expression == "1 + 2"
