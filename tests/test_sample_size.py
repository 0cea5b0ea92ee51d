import math

import pytest

from statcalc.models import UNAVAILABLE
from statcalc.schema import SampleSizeInputs
from statcalc.stats.sample_size import (
    FINITE_FORMULA,
    INFINITE_FORMULA,
    calculate,
    sample_size,
    sample_size_table,
    z_for_confidence,
)


def test_default_survey():
    result = calculate(SampleSizeInputs())
    assert result.sample_size == 385
    assert result.infinite_sample_size == 385
    assert not result.finite_correction_applied
    assert result.z_score == 1.96
    assert result.confidence_level == 95.0
    assert (result.expected_yes, result.expected_no) == (193, 192)
    assert result.sampling_fraction is UNAVAILABLE
    assert result.formula == INFINITE_FORMULA
    assert result.formula_with_values == "n = 1.96² × 0.5 × 0.5 / 0.05²"
    assert [s.key for s in result.steps] == ["identify_values", "infinite_population", "round_up"]


@pytest.mark.parametrize(
    "level, margin, expected",
    [("90", 5.0, 271), ("95", 5.0, 385), ("99", 5.0, 664), ("95", 1.0, 9604)],
)
def test_presets(level, margin, expected):
    result = calculate(SampleSizeInputs(confidence_level=level, margin_of_error=margin))
    assert result.sample_size == expected


def test_finite_population_correction():
    result = calculate(SampleSizeInputs(population_size=1000))
    assert result.sample_size == 278
    assert result.infinite_sample_size == 385
    assert result.finite_correction_applied
    assert result.sampling_fraction == 27.8
    assert result.formula == FINITE_FORMULA
    assert result.steps[2].key == "finite_correction"
    assert result.steps[2].description == "Apply the finite population correction (N = 1000)"


def test_correction_never_exceeds_infinite():
    n0, n = sample_size(1.96, 5.0, 50.0, 200)
    assert n < n0
    assert n < 200


def test_extreme_proportion_needs_nobody():
    n0, n = sample_size(1.96, 5.0, 0.0)
    assert n0 == 0 and n == 0


def test_table_shape():
    table = sample_size_table()
    assert len(table) == 15
    first = table[0]
    assert (first.confidence_level, first.margin_of_error, first.sample_size) == ("90", 1.0, 6766)
    row = next(r for r in table if r.confidence_level == "95" and r.margin_of_error == 5.0)
    assert row.sample_size == 385


def test_custom_confidence():
    assert z_for_confidence("custom", 95) == 1.96
    assert math.isclose(z_for_confidence("custom", 80), 1.282)
    result = calculate(SampleSizeInputs(confidence_level="custom", custom_confidence_level=95))
    assert result.sample_size == 385
    assert result.confidence_level == 95.0


def test_bad_confidence_raises():
    with pytest.raises(ValueError):
        z_for_confidence("80")
    with pytest.raises(ValueError):
        z_for_confidence("custom", 100)
    with pytest.raises(ValueError):
        sample_size(1.96, 0.0)
