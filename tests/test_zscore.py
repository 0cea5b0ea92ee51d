import math

import pytest

from statcalc.stats.zscore import (
    interpret,
    normal_cdf,
    p_values,
    value_from_z,
    z_score_of,
    z_score_summary,
)


def test_z_from_value():
    result = z_score_summary("z_score", mean=70, sd=10, value=85)
    assert result.z_score == 1.5
    assert result.percentile == 93.3193
    assert result.p_value_left == 0.9332
    assert result.p_value_right == 0.0668
    assert result.p_value_two_tailed == 0.1336
    assert result.confidence_level == 86.6386
    assert result.distance_from_mean == 1.5
    assert result.interpretation == "above"


def test_value_from_z():
    result = z_score_summary("value", mean=100, sd=15, z=-2)
    assert result.value == 70.0
    assert result.interpretation == "below"
    assert result.formula == "x = μ + z × σ"


@pytest.mark.parametrize("x, mu, sigma", [(85, 70, 10), (-3.2, 1.1, 0.4), (0, 0, 1)])
def test_round_trip(x, mu, sigma):
    z = z_score_of(x, mu, sigma)
    assert math.isclose(value_from_z(z, mu, sigma), x, abs_tol=1e-9)


def test_cdf_and_p_values():
    assert normal_cdf(0) == 0.5
    tails = p_values(1.96)
    assert math.isclose(tails["two_tailed"], 0.05, abs_tol=1e-3)
    assert math.isclose(tails["left"] + tails["right"], 1.0)


def test_interpretation_at_mean():
    assert interpret(0.00005) == "at"


def test_non_positive_sd_raises():
    with pytest.raises(ValueError):
        z_score_summary("z_score", mean=0, sd=0, value=1)
    with pytest.raises(ValueError):
        z_score_of(1, 0, -1)


def test_missing_mode_input_raises():
    with pytest.raises(ValueError):
        z_score_summary("value", mean=0, sd=1)
