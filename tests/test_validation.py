import pytest

from statcalc.schema import (
    FIELDS,
    CentralTendencyInputs,
    CorrelationInputs,
    DispersionInputs,
    ProbabilityInputs,
    SampleSizeInputs,
    ZScoreInputs,
)
from statcalc.validation import (
    validate_central_tendency,
    validate_correlation,
    validate_dispersion,
    validate_probability,
    validate_sample_size,
    validate_z_score,
)


def test_central_tendency_valid_with_parsed_series():
    outcome = validate_central_tendency(CentralTendencyInputs(data_input="1, 2, 2, 3"))
    assert outcome.valid
    assert outcome.parsed.values == (1.0, 2.0, 2.0, 3.0)
    assert outcome.errors == ()


def test_invalid_tokens_block_and_drop_parsed():
    outcome = validate_central_tendency(CentralTendencyInputs(data_input="1, two, 3"))
    assert not outcome.valid
    assert outcome.parsed is None
    assert outcome.errors[0].field == FIELDS.data_input
    assert outcome.errors[0].code == "invalid_tokens"
    assert "two" in outcome.errors[0].message


def test_empty_data_is_an_error():
    outcome = validate_central_tendency(CentralTendencyInputs(data_input="   "))
    assert "empty_series" in outcome.codes()


@pytest.mark.parametrize("precision", [-1, 11, 2.5, "x", None, True])
def test_bad_precision(precision):
    outcome = validate_dispersion(DispersionInputs(data_input="1 2 3", decimal_precision=precision))
    assert not outcome.valid
    assert outcome.error_fields() == (FIELDS.decimal_precision,)


def test_single_value_and_no_mode_warnings():
    single = validate_central_tendency(CentralTendencyInputs(data_input="5"))
    assert single.valid
    assert [w.code for w in single.warnings] == ["single_value"]

    distinct = validate_central_tendency(CentralTendencyInputs(data_input="1 2 3"))
    assert [w.code for w in distinct.warnings] == ["no_mode"]

    uniform = validate_central_tendency(CentralTendencyInputs(data_input="1 1 2 2"))
    assert [w.code for w in uniform.warnings] == ["no_mode"]
    assert uniform.warnings[0].message == "All values appear equally often, so the data set has no mode."

    repeated = validate_central_tendency(CentralTendencyInputs(data_input="1 1 2"))
    assert repeated.warnings == ()


def test_non_positive_values_warn_for_geometric_mean():
    outcome = validate_central_tendency(
        CentralTendencyInputs(data_input="0 2 2", mean_type="geometric")
    )
    assert outcome.valid
    assert "non_positive_values" in outcome.codes()


def test_weighted_mean_weight_rules():
    missing = validate_central_tendency(CentralTendencyInputs(data_input="1 2", mean_type="weighted"))
    assert [e.code for e in missing.errors] == ["weights_required"]

    mismatch = validate_central_tendency(
        CentralTendencyInputs(data_input="1 2 3", mean_type="weighted", weights_input="1 2")
    )
    assert mismatch.errors[0].code == "weight_count_mismatch"
    assert mismatch.errors[0].params == {"weights": 2, "values": 3}

    negative = validate_central_tendency(
        CentralTendencyInputs(data_input="1 2", mean_type="weighted", weights_input="1 -1")
    )
    assert negative.errors[0].code == "negative_weights"

    zeros = validate_central_tendency(
        CentralTendencyInputs(data_input="1 2", mean_type="weighted", weights_input="0 0")
    )
    assert zeros.errors[0].code == "zero_weight_sum"

    ok = validate_central_tendency(
        CentralTendencyInputs(data_input="1 2", mean_type="weighted", weights_input="1 3")
    )
    assert ok.valid
    assert ok.parsed_weights.values == (1.0, 3.0)


def test_unknown_options_are_errors():
    assert not validate_central_tendency(CentralTendencyInputs(data_input="1", mean_type="cubic")).valid
    assert not validate_dispersion(DispersionInputs(data_input="1", calculation_type="both")).valid


def test_option_and_number_errors_name_the_field():
    outcome = validate_central_tendency(CentralTendencyInputs(data_input="1 2", mean_type="cubic"))
    assert [e.code for e in outcome.errors] == ["unknown_option"]
    assert outcome.errors[0].field == FIELDS.mean_type
    assert outcome.errors[0].message == (
        "Unknown mean_type 'cubic'. Expected one of: arithmetic, geometric, harmonic, weighted."
    )

    missing = validate_z_score(ZScoreInputs(mean=0, standard_deviation=1))
    assert missing.codes() == ("required",)
    assert missing.errors[0].message == "Please enter a valid number for value."

    text = validate_sample_size(SampleSizeInputs(margin_of_error="five"))
    assert text.codes() == ("not_a_number",)
    assert text.errors[0].params == {"field_name": FIELDS.margin_of_error}


def test_dispersion_warnings():
    single = validate_dispersion(DispersionInputs(data_input="4"))
    assert single.valid
    assert [w.code for w in single.warnings] == ["single_value"]

    small = validate_dispersion(DispersionInputs(data_input="1 2 3"))
    assert [w.code for w in small.warnings] == ["small_sample"]
    assert small.warnings[0].params == {"n": 3}


def test_correlation_pairs_errors_and_warnings():
    bad = validate_correlation(CorrelationInputs(pairs_input="1,2\nfoo\n3,4"))
    assert not bad.valid
    assert bad.errors[0].code == "invalid_pairs"
    assert bad.errors[0].field == FIELDS.pairs_input

    too_few = validate_correlation(CorrelationInputs(pairs_input="1,2"))
    assert "too_few_points" in too_few.codes()

    small = validate_correlation(CorrelationInputs(pairs_input="1,2\n2,4\n3,5"))
    assert small.valid
    assert [w.code for w in small.warnings] == ["small_sample"]


def test_correlation_columns_mismatch_is_warning():
    outcome = validate_correlation(
        CorrelationInputs(input_method="columns", x_data_input="1 2 3 4 5 6", y_data_input="2 4 6 8 10")
    )
    assert outcome.valid
    mismatch = outcome.warnings[0]
    assert mismatch.code == "column_length_mismatch"
    assert mismatch.field == FIELDS.y_data_input
    assert mismatch.params == {"x_count": 6, "y_count": 5, "used": 5}


def test_correlation_empty_column_is_error():
    outcome = validate_correlation(
        CorrelationInputs(input_method="columns", x_data_input="1 2 3", y_data_input="")
    )
    assert not outcome.valid
    assert FIELDS.y_data_input in outcome.error_fields()
    assert "empty_column" in outcome.codes()


def test_correlation_constant_series_warn():
    outcome = validate_correlation(
        CorrelationInputs(input_method="columns", x_data_input="1 1 1 1 1", y_data_input="1 2 3 4 5")
    )
    assert outcome.valid
    assert [w.code for w in outcome.warnings] == ["constant_x"]
    assert outcome.warnings[0].field == FIELDS.x_data_input


def test_probability_single_event_rules():
    exceeds = validate_probability(ProbabilityInputs(favorable_outcomes=7, total_outcomes=6))
    assert exceeds.errors[0].code == "favorable_exceeds_total"

    zero_total = validate_probability(ProbabilityInputs(favorable_outcomes=0, total_outcomes=0))
    assert zero_total.error_fields() == (FIELDS.total_outcomes,)

    impossible = validate_probability(ProbabilityInputs(favorable_outcomes=0, total_outcomes=6))
    assert impossible.valid
    assert [w.code for w in impossible.warnings] == ["impossible_event"]

    certain = validate_probability(ProbabilityInputs(favorable_outcomes=6, total_outcomes=6))
    assert [w.code for w in certain.warnings] == ["certain_event"]

    missing = validate_probability(ProbabilityInputs(total_outcomes=6))
    assert missing.errors[0].code == "required"


def test_probability_ranges_and_dependent_rules():
    out_of_range = validate_probability(ProbabilityInputs(mode="and", probability_a=1.2, probability_b=0.5))
    assert out_of_range.error_fields() == (FIELDS.probability_a,)

    dependent_and = validate_probability(
        ProbabilityInputs(mode="and", probability_a=0.5, probability_b=0.5, relationship="dependent")
    )
    assert dependent_and.error_fields() == (FIELDS.probability_b_given_a,)

    too_big = validate_probability(
        ProbabilityInputs(
            mode="or",
            probability_a=0.3,
            probability_b=0.5,
            relationship="dependent",
            probability_a_and_b=0.4,
        )
    )
    assert too_big.errors[0].code == "intersection_exceeds_marginal"


def test_conditional_rules():
    zero = validate_probability(
        ProbabilityInputs(mode="conditional", probability_b=0.0, probability_a_and_b=0.0)
    )
    assert zero.errors[0].code == "zero_divisor"

    clamp = validate_probability(
        ProbabilityInputs(mode="conditional", probability_b=0.2, probability_a_and_b=0.3)
    )
    assert clamp.valid
    assert [w.code for w in clamp.warnings] == ["intersection_exceeds_condition"]


def test_z_score_rules():
    ok = validate_z_score(ZScoreInputs(value=85, mean=70, standard_deviation=10))
    assert ok.valid

    zero_sd = validate_z_score(ZScoreInputs(value=85, mean=70, standard_deviation=0))
    assert zero_sd.errors[0].code == "non_positive_sd"

    missing = validate_z_score(ZScoreInputs(mode="value", mean=70, standard_deviation=10))
    assert missing.error_fields() == (FIELDS.z_score,)

    not_number = validate_z_score(ZScoreInputs(value="abc", mean=70, standard_deviation=10))
    assert not_number.errors[0].code == "not_a_number"


def test_sample_size_rules():
    assert validate_sample_size(SampleSizeInputs()).valid

    wide = validate_sample_size(SampleSizeInputs(margin_of_error=60))
    assert wide.errors[0].code == "margin_out_of_range"

    loose = validate_sample_size(SampleSizeInputs(margin_of_error=15))
    assert loose.valid
    assert [w.code for w in loose.warnings] == ["large_margin"]

    tiny = validate_sample_size(SampleSizeInputs(population_size=5))
    assert [w.code for w in tiny.warnings] == ["small_population"]

    custom = validate_sample_size(SampleSizeInputs(confidence_level="custom", custom_confidence_level=40))
    assert custom.errors[0].code == "confidence_out_of_range"

    proportion = validate_sample_size(SampleSizeInputs(expected_proportion=120))
    assert proportion.error_fields() == (FIELDS.expected_proportion,)
