"""Pearson correlation, least-squares line and significance of r.

Significance is bucketed against a table of two-tailed critical t values so
the reported label matches a printed t table; the exact p-value from the
Student t distribution is reported next to it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

import numpy as np
from scipy.stats import t as student_t

from ..config import DEFAULT_PRECISION
from ..models import UNAVAILABLE, DataPoint, Issue, MaybeFloat, _Unavailable
from ..numeric import plain, round_half_away, round_or_unavailable
from ..schema import FIELDS
from ..steps import CalculationStep, StepRecorder

logger = logging.getLogger(__name__)

CORRELATION_FORMULA = "r = Σ[(xᵢ - x̄)(yᵢ - ȳ)] / √[Σ(xᵢ - x̄)² × Σ(yᵢ - ȳ)²]"

# Two-tailed critical t values by significance level and degrees of freedom.
CRITICAL_T_DF: Tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 15, 20, 30, 60, 120)
CRITICAL_T: Dict[float, Tuple[float, ...]] = {
    0.05: (12.706, 4.303, 3.182, 2.776, 2.571, 2.447, 2.365, 2.306, 2.262, 2.228,
           2.131, 2.086, 2.042, 2.0, 1.98),
    0.01: (63.657, 9.925, 5.841, 4.604, 4.032, 3.707, 3.499, 3.355, 3.25, 3.169,
           2.947, 2.845, 2.75, 2.66, 2.617),
    0.001: (636.619, 31.599, 12.924, 8.61, 6.869, 5.959, 5.408, 5.041, 4.781, 4.587,
            4.073, 3.85, 3.646, 3.46, 3.373),
}

# (lower bound on |r|, label), checked in order.
STRENGTH_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (0.9999, "perfect"),
    (0.7, "strong"),
    (0.4, "moderate"),
    (0.2, "weak"),
)
DIRECTION_EPSILON = 1e-4


@dataclass(frozen=True)
class PearsonComponents:
    r: float
    x_mean: float
    y_mean: float
    sum_xy_dev: float
    sum_x_dev_squared: float
    sum_y_dev_squared: float
    zero_variance: bool


@dataclass(frozen=True)
class RegressionLine:
    slope: float
    intercept: float
    equation: str


@dataclass(frozen=True)
class SignificanceResult:
    """Two-tailed test of ``r != 0``.

    ``t_statistic`` is ``UNAVAILABLE`` for a perfect fit (``r² >= 1``).
    """

    t_statistic: MaybeFloat
    degrees_of_freedom: int
    p_value_label: str
    is_significant: bool
    p_value: float


@dataclass(frozen=True)
class PointDeviation:
    x: float
    y: float
    x_deviation: float
    y_deviation: float
    product: float
    x_deviation_squared: float
    y_deviation_squared: float


@dataclass(frozen=True)
class CorrelationResult:
    correlation_coefficient: float
    r_squared: float
    strength: str
    direction: str
    covariance: float
    regression: RegressionLine
    significance: Union[SignificanceResult, _Unavailable]
    count: int
    x_mean: float
    y_mean: float
    x_std_dev: float
    y_std_dev: float
    sum_x: float
    sum_y: float
    sum_xy: float
    sum_x_squared: float
    sum_y_squared: float
    formula: str
    data_points: Tuple[DataPoint, ...]
    deviations: Tuple[PointDeviation, ...]
    steps: Tuple[CalculationStep, ...]
    warnings: Tuple[Issue, ...] = ()


def pearson(x: Sequence[float], y: Sequence[float]) -> PearsonComponents:
    """Compute Pearson's r from deviation sums.

    Returns:
        PearsonComponents: ``r`` is ``0`` and ``zero_variance`` is set when
        either series is constant.

    Raises:
        ValueError: If the series differ in length or have fewer than two
            points.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise ValueError(f"x and y must have equal length, got {x_arr.size} and {y_arr.size}.")
    if x_arr.size < 2:
        raise ValueError(f"Correlation requires at least 2 points, got {x_arr.size}.")

    x_mean = float(np.mean(x_arr))
    y_mean = float(np.mean(y_arr))
    dx = x_arr - x_mean
    dy = y_arr - y_mean
    sxy = float(np.sum(dx * dy))
    sxx = float(np.sum(dx**2))
    syy = float(np.sum(dy**2))

    denominator = math.sqrt(sxx * syy)
    zero_variance = denominator == 0
    r = 0.0 if zero_variance else sxy / denominator
    # Guard against |r| drifting past 1 through rounding error.
    r = max(-1.0, min(1.0, r))
    return PearsonComponents(r, x_mean, y_mean, sxy, sxx, syy, zero_variance)


def classify_strength(r: float) -> Tuple[str, str]:
    """Return ``(strength, direction)`` for a correlation coefficient."""
    magnitude = abs(r)
    strength = "negligible"
    for bound, label in STRENGTH_THRESHOLDS:
        if magnitude >= bound:
            strength = label
            break
    if magnitude < DIRECTION_EPSILON:
        direction = "none"
    else:
        direction = "positive" if r > 0 else "negative"
    return strength, direction


def critical_t(df: float, alpha: float) -> float:
    """Look up a two-tailed critical t value.

    Values between tabulated degrees of freedom are interpolated linearly;
    ``df`` below 1 or above 120 uses the nearest tabulated row.

    Raises:
        ValueError: If ``alpha`` is not one of 0.05, 0.01 or 0.001.
    """
    if alpha not in CRITICAL_T:
        raise ValueError(f"No critical t table for alpha={alpha!r}.")
    return float(np.interp(df, CRITICAL_T_DF, CRITICAL_T[alpha]))


def significance(r: float, n: int) -> Union[SignificanceResult, _Unavailable]:
    """Test ``r`` for significance with ``t = r·√[(n-2)/(1-r²)]``.

    Returns:
        SignificanceResult | UNAVAILABLE: ``UNAVAILABLE`` when ``n < 3``.
    """
    if n < 3:
        return UNAVAILABLE
    df = n - 2
    r_squared = r * r
    if r_squared >= 1:
        return SignificanceResult(
            t_statistic=UNAVAILABLE,
            degrees_of_freedom=df,
            p_value_label="<0.001",
            is_significant=True,
            p_value=0.0,
        )

    t_stat = r * math.sqrt(df / (1.0 - r_squared))
    abs_t = abs(t_stat)
    if abs_t >= critical_t(df, 0.001):
        label = "<0.001"
    elif abs_t >= critical_t(df, 0.01):
        label = "<0.01"
    elif abs_t >= critical_t(df, 0.05):
        label = "<0.05"
    else:
        label = ">0.05"
    p_value = float(2.0 * student_t.sf(abs_t, df))
    return SignificanceResult(
        t_statistic=t_stat,
        degrees_of_freedom=df,
        p_value_label=label,
        is_significant=label != ">0.05",
        p_value=p_value,
    )


def regression_line(components: PearsonComponents, precision: int = DEFAULT_PRECISION) -> RegressionLine:
    """Least-squares line ``y = slope·x + intercept``.

    A constant x series gives a horizontal line through ``ȳ``.
    """
    if components.sum_x_dev_squared == 0:
        intercept = round_half_away(components.y_mean, precision)
        return RegressionLine(slope=0.0, intercept=intercept, equation=f"y = {plain(intercept, precision)}")

    slope = components.sum_xy_dev / components.sum_x_dev_squared
    intercept = components.y_mean - slope * components.x_mean
    sign = "+" if intercept >= 0 else "-"
    return RegressionLine(
        slope=round_half_away(slope, precision),
        intercept=round_half_away(intercept, precision),
        equation=f"y = {plain(slope, precision)}x {sign} {plain(abs(intercept), precision)}",
    )


def correlate(
    points: Sequence[DataPoint],
    precision: int = DEFAULT_PRECISION,
    warning_field: str = FIELDS.pairs_input,
) -> CorrelationResult:
    """Correlate paired data and fit a regression line.

    Args:
        points (Sequence[DataPoint]): At least two points.
        precision (int, optional): Decimal places of reported values.
        warning_field (str, optional): Field key attached to the zero-variance
            warning.

    Returns:
        CorrelationResult: Rounded statistics, per-point deviation table and
        steps.

    Raises:
        ValueError: If fewer than two points are given.

    References:
        Pearson product-moment correlation; Student's t test for r.
    """
    points = tuple(points)
    x = np.asarray([pt.x for pt in points], dtype=float)
    y = np.asarray([pt.y for pt in points], dtype=float)
    comp = pearson(x, y)
    p = int(precision)
    n = int(x.size)

    warnings = []
    if comp.zero_variance:
        logger.debug("Zero variance in x or y; r defined as 0")
        warnings.append(
            Issue(
                field=warning_field,
                code="zero_variance",
                message="One of the series has no variance, so r is reported as 0.",
            )
        )

    r = comp.r
    strength, direction = classify_strength(r)
    line = regression_line(comp, p)
    sig = significance(r, n)
    covariance = comp.sum_xy_dev / (n - 1)
    x_sd = math.sqrt(comp.sum_x_dev_squared / (n - 1))
    y_sd = math.sqrt(comp.sum_y_dev_squared / (n - 1))

    dx = x - comp.x_mean
    dy = y - comp.y_mean
    deviations = tuple(
        PointDeviation(
            x=round_half_away(float(xi), p),
            y=round_half_away(float(yi), p),
            x_deviation=round_half_away(float(a), p),
            y_deviation=round_half_away(float(b), p),
            product=round_half_away(float(a * b), p),
            x_deviation_squared=round_half_away(float(a * a), p),
            y_deviation_squared=round_half_away(float(b * b), p),
        )
        for xi, yi, a, b in zip(x, y, dx, dy)
    )

    rec = StepRecorder()
    rec.add(
        "compute_means",
        f"x̄ = {plain(float(np.sum(x)), p)} / {n}, ȳ = {plain(float(np.sum(y)), p)} / {n}",
        f"x̄ = {plain(comp.x_mean, p)}, ȳ = {plain(comp.y_mean, p)}",
    )
    rec.add(
        "compute_deviation_sums",
        "Σ(xᵢ - x̄)(yᵢ - ȳ), Σ(xᵢ - x̄)², Σ(yᵢ - ȳ)²",
        f"{plain(comp.sum_xy_dev, p)}, {plain(comp.sum_x_dev_squared, p)}, "
        f"{plain(comp.sum_y_dev_squared, p)}",
    )
    rec.add(
        "compute_r",
        f"{plain(comp.sum_xy_dev, p)} / √({plain(comp.sum_x_dev_squared, p)} × "
        f"{plain(comp.sum_y_dev_squared, p)})",
        plain(r, p),
    )
    rec.add("compute_r_squared", f"{plain(r, p)}²", plain(r * r, p))
    rec.add(
        "regression_slope",
        f"{plain(comp.sum_xy_dev, p)} / {plain(comp.sum_x_dev_squared, p)}",
        plain(line.slope, p),
    )
    rec.add(
        "regression_intercept",
        f"{plain(comp.y_mean, p)} - {plain(line.slope, p)} × {plain(comp.x_mean, p)}",
        line.equation,
    )
    if sig is not UNAVAILABLE:
        rec.add(
            "t_statistic",
            f"{plain(r, p)} × √({sig.degrees_of_freedom} / (1 - {plain(r * r, p)}))",
            plain(sig.t_statistic, p),
            df=sig.degrees_of_freedom,
        )
        rec.add(
            "compare_critical_values",
            f"t₀.₀₅ = {plain(critical_t(sig.degrees_of_freedom, 0.05), 3)}",
            f"p {sig.p_value_label}",
        )

    if sig is not UNAVAILABLE:
        sig = SignificanceResult(
            t_statistic=round_or_unavailable(sig.t_statistic, p),
            degrees_of_freedom=sig.degrees_of_freedom,
            p_value_label=sig.p_value_label,
            is_significant=sig.is_significant,
            p_value=round_half_away(sig.p_value, p),
        )

    return CorrelationResult(
        correlation_coefficient=round_half_away(r, p),
        r_squared=round_half_away(r * r, p),
        strength=strength,
        direction=direction,
        covariance=round_half_away(covariance, p),
        regression=line,
        significance=sig,
        count=n,
        x_mean=round_half_away(comp.x_mean, p),
        y_mean=round_half_away(comp.y_mean, p),
        x_std_dev=round_half_away(x_sd, p),
        y_std_dev=round_half_away(y_sd, p),
        sum_x=round_half_away(float(np.sum(x)), p),
        sum_y=round_half_away(float(np.sum(y)), p),
        sum_xy=round_half_away(float(np.sum(x * y)), p),
        sum_x_squared=round_half_away(float(np.sum(x**2)), p),
        sum_y_squared=round_half_away(float(np.sum(y**2)), p),
        formula=CORRELATION_FORMULA,
        data_points=tuple(
            DataPoint(x=round_half_away(pt.x, p), y=round_half_away(pt.y, p), index=pt.index)
            for pt in points
        ),
        deviations=deviations,
        steps=rec.freeze(),
        warnings=tuple(warnings),
    )
