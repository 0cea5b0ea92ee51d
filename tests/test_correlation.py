import math

import pytest

from statcalc.models import UNAVAILABLE, DataPoint
from statcalc.stats.correlation import (
    classify_strength,
    correlate,
    critical_t,
    pearson,
    significance,
)


def _points(pairs):
    return [DataPoint(x=float(x), y=float(y), index=i) for i, (x, y) in enumerate(pairs)]


SCENARIO = _points([(1, 2), (2, 4), (3, 5), (4, 4), (5, 5)])


def test_reference_scenario():
    result = correlate(SCENARIO)
    assert result.correlation_coefficient == 0.7746
    assert result.r_squared == 0.6
    assert result.strength == "strong"
    assert result.direction == "positive"
    assert result.covariance == 1.5
    assert result.regression.slope == 0.6
    assert result.regression.intercept == 2.2
    assert result.regression.equation == "y = 0.6x + 2.2"
    assert result.x_std_dev == 1.5811
    assert result.y_std_dev == 1.2247

    sig = result.significance
    assert sig.t_statistic == 2.1213
    assert sig.degrees_of_freedom == 3
    assert sig.p_value_label == ">0.05"
    assert not sig.is_significant
    assert 0.05 < sig.p_value < 0.2


def test_sums_and_deviation_table():
    result = correlate(SCENARIO)
    assert result.sum_x == 15.0
    assert result.sum_y == 20.0
    assert result.sum_xy == 66.0
    assert result.sum_x_squared == 55.0
    assert result.sum_y_squared == 86.0
    assert [d.product for d in result.deviations] == [4.0, 0.0, 0.0, 0.0, 2.0]
    assert [s.step_number for s in result.steps] == list(range(1, len(result.steps) + 1))


def test_perfect_fit_is_degenerate_significance():
    result = correlate(_points([(1, 2), (2, 4), (3, 6)]))
    assert result.correlation_coefficient == 1.0
    assert result.strength == "perfect"
    assert result.significance.t_statistic is UNAVAILABLE
    assert result.significance.p_value_label == "<0.001"
    assert result.significance.is_significant


def test_zero_variance_defines_r_as_zero():
    result = correlate(_points([(2, 1), (2, 3), (2, 5)]))
    assert result.correlation_coefficient == 0.0
    assert result.direction == "none"
    assert result.strength == "negligible"
    assert [w.code for w in result.warnings] == ["zero_variance"]
    assert result.regression.slope == 0.0
    assert result.regression.equation == "y = 3"


def test_two_points_have_no_significance():
    result = correlate(_points([(1, 1), (2, 3)]))
    assert result.significance is UNAVAILABLE


def test_equation_signs():
    down = correlate(_points([(0, 5), (1, 3), (2, 1)]))
    assert down.regression.equation == "y = -2x + 5"
    assert down.direction == "negative"
    below = correlate(_points([(0, -1), (1, 1)]))
    assert below.regression.equation == "y = 2x - 1"


@pytest.mark.parametrize(
    "r, expected",
    [
        (0.99995, ("perfect", "positive")),
        (-0.75, ("strong", "negative")),
        (0.5, ("moderate", "positive")),
        (-0.25, ("weak", "negative")),
        (0.1, ("negligible", "positive")),
        (0.00005, ("negligible", "none")),
    ],
)
def test_classify_strength(r, expected):
    assert classify_strength(r) == expected


def test_critical_t_interpolation_and_clamping():
    assert critical_t(3, 0.05) == 3.182
    assert math.isclose(critical_t(12, 0.05), 2.228 - 0.4 * (2.228 - 2.131))
    assert critical_t(500, 0.01) == 2.617
    assert critical_t(0, 0.001) == 636.619
    with pytest.raises(ValueError):
        critical_t(5, 0.1)


def test_significance_buckets():
    strong = significance(0.99, 10)
    assert strong.p_value_label == "<0.001"
    assert significance(0.8, 10).p_value_label == "<0.01"
    assert significance(0.7, 10).p_value_label == "<0.05"


def test_pearson_guards():
    with pytest.raises(ValueError):
        pearson([1], [2])
    with pytest.raises(ValueError):
        pearson([1, 2, 3], [1, 2])


def test_echoed_points_are_rounded():
    result = correlate(_points([(1.23456, 2.0), (2.5, 3.98765), (3.0, 5.0)]), precision=2)
    assert [(pt.x, pt.y) for pt in result.data_points] == [(1.23, 2.0), (2.5, 3.99), (3.0, 5.0)]
    assert [(d.x, d.y) for d in result.deviations] == [(1.23, 2.0), (2.5, 3.99), (3.0, 5.0)]
    assert [pt.index for pt in result.data_points] == [0, 1, 2]
