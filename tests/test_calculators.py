import math

from statcalc import (
    CentralTendencyInputs,
    CorrelationInputs,
    DispersionInputs,
    ProbabilityInputs,
    SampleSizeInputs,
    ValidationOutcome,
    ZScoreInputs,
    calculate_central_tendency,
    calculate_correlation,
    calculate_dispersion,
    calculate_probability,
    calculate_sample_size,
    calculate_z_score,
)
from statcalc.schema import FIELDS


def test_invalid_input_returns_outcome():
    outcome = calculate_dispersion(DispersionInputs(data_input="1, abc"))
    assert isinstance(outcome, ValidationOutcome)
    assert not outcome.valid
    assert "invalid_tokens" in outcome.codes()
    assert outcome.parsed is None


def test_validation_warnings_come_first():
    result = calculate_dispersion(DispersionInputs(data_input="2 4 6"))
    assert result.standard_deviation == 2.0
    assert result.warnings[0].code == "small_sample"
    assert result.warnings[0].params == {"n": 3}


def test_weighted_mean():
    result = calculate_central_tendency(
        CentralTendencyInputs(data_input="1 2 3", mean_type="weighted", weights_input="3 2 1")
    )
    assert result.mean == 1.6667
    assert result.arithmetic_mean == 2.0


def test_european_central_tendency():
    result = calculate_central_tendency(
        CentralTendencyInputs(data_input="1,5; 2,5; 3,5", locale="de-DE")
    )
    assert result.mean == 2.5
    assert result.median.value == 2.5


def test_columns_correlation_truncates():
    result = calculate_correlation(
        CorrelationInputs(input_method="columns", x_data_input="1 2 3 4 5 6", y_data_input="2 4 5 4 5")
    )
    assert result.count == 5
    assert result.correlation_coefficient == 0.7746
    assert result.warnings[0].code == "column_length_mismatch"
    assert result.warnings[0].params["used"] == 5


def test_constant_series_warns_and_reports_zero():
    result = calculate_correlation(CorrelationInputs(pairs_input="1,2\n1,3\n1,5"))
    assert result.correlation_coefficient == 0.0
    assert [w.code for w in result.warnings] == ["small_sample", "constant_x"]
    assert all(w.field == FIELDS.pairs_input for w in result.warnings)


def test_probability_calculator():
    result = calculate_probability(ProbabilityInputs(mode="or", probability_a=0.5, probability_b=0.5))
    assert result.probability == 0.75
    bad = calculate_probability(ProbabilityInputs(favorable_outcomes=7, total_outcomes=6))
    assert isinstance(bad, ValidationOutcome)
    assert "favorable_exceeds_total" in bad.codes()


def test_z_score_calculator():
    result = calculate_z_score(ZScoreInputs(value=85, mean=70, standard_deviation=10))
    assert result.z_score == 1.5
    assert math.isclose(result.percentile, 93.3193)
    bad = calculate_z_score(ZScoreInputs(value=1, mean=0, standard_deviation=0))
    assert bad.error_fields() == (FIELDS.standard_deviation,)


def test_sample_size_calculator():
    result = calculate_sample_size(SampleSizeInputs(margin_of_error=15))
    assert [w.code for w in result.warnings] == ["large_margin"]
    assert result.sample_size == 43
    bad = calculate_sample_size(SampleSizeInputs(margin_of_error=0))
    assert bad.codes() == ("non_positive_margin",)


def test_conditional_clamp_reports_one_warning():
    result = calculate_probability(
        ProbabilityInputs(mode="conditional", probability_b=0.2, probability_a_and_b=0.3)
    )
    assert result.probability == 1.0
    assert [w.code for w in result.warnings] == ["intersection_exceeds_condition"]


def test_independent_engine_warning_is_kept():
    result = calculate_probability(
        ProbabilityInputs(
            mode="or",
            probability_a=0.6,
            probability_b=0.7,
            relationship="dependent",
            probability_a_and_b=0.2,
        )
    )
    assert [w.code for w in result.warnings] == ["result_clamped"]


def test_bad_options_and_missing_numbers_return_outcomes():
    cases = [
        calculate_central_tendency(CentralTendencyInputs("1 2", mean_type="cubic")),
        calculate_dispersion(DispersionInputs(data_input="1 2", calculation_type="both")),
        calculate_correlation(CorrelationInputs(input_method="rows", pairs_input="1,2\n2,3")),
        calculate_probability(ProbabilityInputs(mode="and", probability_a=0.5)),
        calculate_probability(ProbabilityInputs(mode="either")),
        calculate_z_score(ZScoreInputs(mean=0, standard_deviation=1)),
        calculate_sample_size(SampleSizeInputs(confidence_level="80")),
        calculate_sample_size(SampleSizeInputs(margin_of_error=None)),
    ]
    for outcome in cases:
        assert isinstance(outcome, ValidationOutcome)
        assert not outcome.valid


def test_sample_size_default_request():
    result = calculate_sample_size(SampleSizeInputs())
    assert result.sample_size == 385
    assert result.warnings == ()
    assert len(result.table) == 15
