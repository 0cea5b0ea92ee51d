"""Variance, standard deviation and related spread measures."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..config import DEFAULT_PRECISION
from ..models import UNAVAILABLE, Issue, MaybeFloat
from ..numeric import plain, round_all, round_half_away, round_or_unavailable
from ..schema import CALCULATION_TYPES
from ..steps import CalculationStep, StepRecorder

logger = logging.getLogger(__name__)

SD_FORMULAS = {
    "sample": "s = √[Σ(xᵢ - x̄)² / (n - 1)]",
    "population": "σ = √[Σ(xᵢ - μ)² / N]",
}


@dataclass(frozen=True)
class Deviation:
    value: float
    deviation: float
    squared_deviation: float


@dataclass(frozen=True)
class DispersionResult:
    """Rounded spread of a series.

    ``standard_error`` is only defined for samples; ``coefficient_of_variation``
    (percent) is undefined when the mean is 0.
    """

    calculation_type: str
    standard_deviation: float
    variance: float
    mean: float
    count: int
    total: float
    sum_of_squares: float
    range: float
    minimum: float
    maximum: float
    standard_error: MaybeFloat
    coefficient_of_variation: MaybeFloat
    divisor: int
    formula: str
    values: Tuple[float, ...]
    deviations: Tuple[Deviation, ...]
    steps: Tuple[CalculationStep, ...]
    warnings: Tuple[Issue, ...] = ()


def variance(values: Sequence[float], calculation_type: str = "sample") -> float:
    """Return the population (``/ n``) or sample (``/ (n - 1)``) variance.

    A sample of fewer than two values has variance ``0``.

    Raises:
        ValueError: If ``values`` is empty or ``calculation_type`` is unknown.
    """
    if calculation_type not in CALCULATION_TYPES:
        raise ValueError(
            f"Unknown calculation type {calculation_type!r}; expected one of {CALCULATION_TYPES}."
        )
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError("Cannot compute the variance of an empty series.")
    if calculation_type == "sample":
        return float(np.var(arr, ddof=1)) if arr.size >= 2 else 0.0
    return float(np.var(arr, ddof=0))


def dispersion(
    values: Sequence[float],
    calculation_type: str = "sample",
    precision: int = DEFAULT_PRECISION,
) -> DispersionResult:
    """Compute the spread of a series with a full deviation table.

    Args:
        values (Sequence[float]): Non-empty finite series.
        calculation_type (str, optional): ``"sample"`` or ``"population"``.
        precision (int, optional): Decimal places of reported values.

    Returns:
        DispersionResult: Rounded values and derivation steps.

    Raises:
        ValueError: If ``values`` is empty or ``calculation_type`` is unknown.

    References:
        Bessel's correction for the sample variance.
    """
    var = variance(values, calculation_type)
    arr = np.asarray(values, dtype=float)
    p = int(precision)
    n = int(arr.size)

    mean = float(np.mean(arr))
    deviations = arr - mean
    squared = deviations**2
    sum_of_squares = float(np.sum(squared))
    sd = math.sqrt(var)
    divisor = n - 1 if calculation_type == "sample" else n

    standard_error: MaybeFloat = UNAVAILABLE
    if calculation_type == "sample":
        standard_error = sd / math.sqrt(n)
    coefficient: MaybeFloat = UNAVAILABLE
    if mean != 0:
        coefficient = sd / abs(mean) * 100.0
    else:
        logger.debug("Coefficient of variation unavailable: mean is 0")

    rec = StepRecorder()
    rec.add(
        "count_values",
        f"n = {n}, Σxᵢ = {plain(float(np.sum(arr)), p)}",
        plain(float(np.sum(arr)), p),
    )
    rec.add("compute_mean", f"{plain(float(np.sum(arr)), p)} / {n}", plain(mean, p))
    rec.add(
        "squared_deviations",
        " + ".join(f"({plain(v, p)} - {plain(mean, p)})²" for v in arr),
        plain(sum_of_squares, p),
    )
    if calculation_type == "sample":
        label = f"n - 1 = {divisor}"
    else:
        label = f"N = {divisor}"
    if divisor > 0:
        expression = f"{plain(sum_of_squares, p)} / {divisor}"
    else:
        expression = "n < 2, variance = 0"
    rec.add(
        "divide_by_divisor",
        expression,
        plain(var, p),
        divisor_label=label,
        calculation_type=calculation_type,
    )
    rec.add("square_root", f"√{plain(var, p)}", plain(sd, p))
    if standard_error is not UNAVAILABLE:
        rec.add("standard_error", f"{plain(sd, p)} / √{n}", plain(standard_error, p))
    if coefficient is not UNAVAILABLE:
        rec.add(
            "coefficient_of_variation",
            f"({plain(sd, p)} / {plain(abs(mean), p)}) × 100",
            f"{plain(coefficient, p)}%",
        )

    return DispersionResult(
        calculation_type=calculation_type,
        standard_deviation=round_half_away(sd, p),
        variance=round_half_away(var, p),
        mean=round_half_away(mean, p),
        count=n,
        total=round_half_away(float(np.sum(arr)), p),
        sum_of_squares=round_half_away(sum_of_squares, p),
        range=round_half_away(float(np.max(arr) - np.min(arr)), p),
        minimum=round_half_away(float(np.min(arr)), p),
        maximum=round_half_away(float(np.max(arr)), p),
        standard_error=round_or_unavailable(standard_error, p),
        coefficient_of_variation=round_or_unavailable(coefficient, p),
        divisor=divisor,
        formula=SD_FORMULAS[calculation_type],
        values=tuple(round_all(arr, p)),
        deviations=tuple(
            Deviation(
                value=round_half_away(float(v), p),
                deviation=round_half_away(float(d), p),
                squared_deviation=round_half_away(float(s), p),
            )
            for v, d, s in zip(arr, deviations, squared)
        ),
        steps=rec.freeze(),
    )
