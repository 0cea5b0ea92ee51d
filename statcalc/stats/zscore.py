"""Z-score <-> raw value conversion with normal-distribution tail areas."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from scipy.stats import norm

from ..config import DEFAULT_PRECISION
from ..models import Issue
from ..numeric import plain, round_half_away
from ..schema import Z_SCORE_MODES, ZScoreInputs
from ..steps import CalculationStep, StepRecorder

logger = logging.getLogger(__name__)

AT_MEAN_EPSILON = 1e-4

Z_FORMULAS = {
    "z_score": "z = (x - μ) / σ",
    "value": "x = μ + z × σ",
}


@dataclass(frozen=True)
class ZScoreResult:
    """Rounded z-score summary.

    Attributes:
        percentile: ``Φ(z) × 100``.
        p_value_left: ``Φ(z)``.
        p_value_right: ``1 - Φ(z)``.
        p_value_two_tailed: ``2 × (1 - Φ(|z|))``.
        confidence_level: ``1 - p_value_two_tailed`` as a percentage.
        distance_from_mean: ``|z|``, in standard deviations.
        interpretation: ``below``, ``at`` or ``above`` the mean.
    """

    mode: str
    z_score: float
    value: float
    mean: float
    standard_deviation: float
    percentile: float
    p_value_left: float
    p_value_right: float
    p_value_two_tailed: float
    confidence_level: float
    distance_from_mean: float
    interpretation: str
    formula: str
    steps: Tuple[CalculationStep, ...]
    warnings: Tuple[Issue, ...] = ()


def _check_sd(sd: float) -> None:
    if not sd > 0:
        raise ValueError(f"Standard deviation must be > 0, got {sd!r}.")


def normal_cdf(z: float) -> float:
    """Standard normal cumulative distribution function Φ(z)."""
    return float(norm.cdf(z))


def z_score_of(value: float, mean: float, sd: float) -> float:
    _check_sd(sd)
    return (float(value) - float(mean)) / float(sd)


def value_from_z(z: float, mean: float, sd: float) -> float:
    _check_sd(sd)
    return float(mean) + float(z) * float(sd)


def p_values(z: float) -> Dict[str, float]:
    """Return the left-, right- and two-tailed p-values of ``z``."""
    return {
        "left": float(norm.cdf(z)),
        "right": float(norm.sf(z)),
        "two_tailed": float(2.0 * norm.sf(abs(z))),
    }


def interpret(z: float) -> str:
    if abs(z) <= AT_MEAN_EPSILON:
        return "at"
    return "above" if z > 0 else "below"


def z_score_summary(
    mode: str,
    mean: float,
    sd: float,
    value: Optional[float] = None,
    z: Optional[float] = None,
    precision: int = DEFAULT_PRECISION,
) -> ZScoreResult:
    """Convert between a raw value and its z-score and report tail areas.

    Args:
        mode (str): ``"z_score"`` to compute z from ``value``, or
            ``"value"`` to compute the value from ``z``.
        mean (float): Distribution mean μ.
        sd (float): Distribution standard deviation σ (> 0).
        value (float, optional): Raw value x, required in ``z_score`` mode.
        z (float, optional): Z-score, required in ``value`` mode.
        precision (int, optional): Decimal places of reported values.

    Returns:
        ZScoreResult: Rounded values and steps.

    Raises:
        ValueError: If ``sd <= 0``, the mode is unknown, or the input for the
            mode is missing.
    """
    if mode not in Z_SCORE_MODES:
        raise ValueError(f"Unknown z-score mode {mode!r}; expected one of {Z_SCORE_MODES}.")
    _check_sd(sd)
    p = int(precision)
    rec = StepRecorder()

    if mode == "z_score":
        if value is None:
            raise ValueError("A raw value is required to compute a z-score.")
        rec.add("identify_values", f"x = {plain(value, p)}, μ = {plain(mean, p)}, σ = {plain(sd, p)}")
        rec.add("apply_formula", Z_FORMULAS[mode])
        z = z_score_of(value, mean, sd)
        rec.add(
            "compute_result",
            f"({plain(value, p)} - {plain(mean, p)}) / {plain(sd, p)}",
            plain(z, p),
        )
    else:
        if z is None:
            raise ValueError("A z-score is required to compute a raw value.")
        rec.add("identify_values", f"z = {plain(z, p)}, μ = {plain(mean, p)}, σ = {plain(sd, p)}")
        rec.add("apply_formula", Z_FORMULAS[mode])
        value = value_from_z(z, mean, sd)
        rec.add(
            "compute_result",
            f"{plain(mean, p)} + {plain(z, p)} × {plain(sd, p)}",
            plain(value, p),
        )

    tails = p_values(z)
    percentile = tails["left"] * 100.0
    rec.add("percentile", f"Φ({plain(z, p)}) × 100", f"{plain(percentile, p)}%")
    rec.add(
        "p_values",
        f"left = {plain(tails['left'], p)}, right = {plain(tails['right'], p)}",
        plain(tails["two_tailed"], p),
    )

    return ZScoreResult(
        mode=mode,
        z_score=round_half_away(z, p),
        value=round_half_away(value, p),
        mean=round_half_away(mean, p),
        standard_deviation=round_half_away(sd, p),
        percentile=round_half_away(percentile, p),
        p_value_left=round_half_away(tails["left"], p),
        p_value_right=round_half_away(tails["right"], p),
        p_value_two_tailed=round_half_away(tails["two_tailed"], p),
        confidence_level=round_half_away((1.0 - tails["two_tailed"]) * 100.0, p),
        distance_from_mean=round_half_away(abs(z), p),
        interpretation=interpret(z),
        formula=Z_FORMULAS[mode],
        steps=rec.freeze(),
    )


def summarize_inputs(inputs: ZScoreInputs) -> ZScoreResult:
    """Run :func:`z_score_summary` on validated calculator inputs."""
    return z_score_summary(
        mode=inputs.mode,
        mean=float(inputs.mean),
        sd=float(inputs.standard_deviation),
        value=None if inputs.value is None else float(inputs.value),
        z=None if inputs.z_score is None else float(inputs.z_score),
        precision=inputs.decimal_precision,
    )
