"""Survey sample size for estimating a proportion (Cochran's formula)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from scipy.stats import norm

from ..models import UNAVAILABLE, Issue, MaybeFloat
from ..numeric import plain, round_half_away
from ..schema import CONFIDENCE_PRESETS, SampleSizeInputs
from ..steps import CalculationStep, StepRecorder

logger = logging.getLogger(__name__)

Z_PRESETS = {"90": 1.645, "95": 1.96, "99": 2.576}
TABLE_CONFIDENCE_LEVELS: Tuple[str, ...] = ("90", "95", "99")
TABLE_MARGINS: Tuple[float, ...] = (1.0, 2.0, 3.0, 5.0, 10.0)

INFINITE_FORMULA = "n = Z² × p × (1-p) / E²"
FINITE_FORMULA = "n = (Z² × p × (1-p) / E²) × N / (Z² × p × (1-p) / E² + N - 1)"


@dataclass(frozen=True)
class SampleSizeTableRow:
    confidence_level: str
    margin_of_error: float
    sample_size: int


@dataclass(frozen=True)
class SampleSizeResult:
    """Required respondents and the quantities that produced them.

    ``sampling_fraction`` (percent of the population surveyed) is only
    defined when a population size is given.
    """

    sample_size: int
    infinite_sample_size: int
    finite_correction_applied: bool
    confidence_level: float
    z_score: float
    margin_of_error: float
    expected_proportion: float
    population_size: Optional[float]
    expected_yes: int
    expected_no: int
    sampling_fraction: MaybeFloat
    formula: str
    formula_with_values: str
    table: Tuple[SampleSizeTableRow, ...]
    steps: Tuple[CalculationStep, ...]
    warnings: Tuple[Issue, ...] = ()


def _round_up(n: float) -> int:
    # Snap float noise first so 9604.000000000002 stays 9604.
    return int(math.ceil(round_half_away(n, 9)))


def z_for_confidence(preset: str, custom_level: Optional[float] = None) -> float:
    """Return the two-sided critical z for a confidence level.

    Args:
        preset (str): ``"90"``, ``"95"``, ``"99"`` or ``"custom"``.
        custom_level (float | None, optional): Percent, used with ``custom``.

    Returns:
        float: Tabulated z for presets; the normal quantile rounded to three
        decimals for a custom level.

    Raises:
        ValueError: For an unknown preset or a custom level outside (0, 100).
    """
    if preset in Z_PRESETS:
        return Z_PRESETS[preset]
    if preset != "custom":
        raise ValueError(f"Unknown confidence level {preset!r}; expected one of {CONFIDENCE_PRESETS}.")
    if custom_level is None or not 0 < float(custom_level) < 100:
        raise ValueError(f"Custom confidence level must be in (0, 100), got {custom_level!r}.")
    alpha = (1.0 - float(custom_level) / 100.0) / 2.0
    return round_half_away(float(norm.isf(alpha)), 3)


def sample_size(
    z: float,
    margin_of_error: float,
    expected_proportion: float = 50.0,
    population_size: Optional[float] = None,
) -> Tuple[float, float]:
    """Return ``(infinite_n, final_n)`` before rounding up.

    Args:
        z (float): Critical z value.
        margin_of_error (float): Percent, > 0.
        expected_proportion (float, optional): Percent in [0, 100].
        population_size (float | None, optional): Finite population N.

    Raises:
        ValueError: If the margin is not positive or the population is not
            positive.
    """
    if not margin_of_error > 0:
        raise ValueError(f"Margin of error must be > 0, got {margin_of_error!r}.")
    p = float(expected_proportion) / 100.0
    e = float(margin_of_error) / 100.0
    n0 = z * z * p * (1.0 - p) / (e * e)
    if population_size is None:
        return n0, n0
    if not population_size > 0:
        raise ValueError(f"Population size must be > 0, got {population_size!r}.")
    return n0, n0 * population_size / (n0 + population_size - 1.0)


def sample_size_table(
    expected_proportion: float = 50.0, population_size: Optional[float] = None
) -> Tuple[SampleSizeTableRow, ...]:
    """Required sizes for each common confidence level and margin."""
    rows = []
    for level in TABLE_CONFIDENCE_LEVELS:
        for margin in TABLE_MARGINS:
            _, n = sample_size(Z_PRESETS[level], margin, expected_proportion, population_size)
            rows.append(SampleSizeTableRow(level, margin, _round_up(n)))
    return tuple(rows)


def calculate(inputs: SampleSizeInputs) -> SampleSizeResult:
    """Compute the sample size for validated inputs."""
    z = z_for_confidence(inputs.confidence_level, inputs.custom_confidence_level)
    level = (
        float(inputs.custom_confidence_level)
        if inputs.confidence_level == "custom"
        else float(inputs.confidence_level)
    )
    population = None if inputs.population_size is None else float(inputs.population_size)
    margin = float(inputs.margin_of_error)
    proportion = float(inputs.expected_proportion)
    p = proportion / 100.0
    e = margin / 100.0

    n0, n = sample_size(z, margin, proportion, population)
    final = _round_up(n)
    expected_yes = int(round_half_away(final * p, 0))

    rec = StepRecorder()
    rec.add("identify_values", f"Z = {plain(z, 3)}, p = {plain(p, 4)}, E = {plain(e, 4)}")
    rec.add(
        "infinite_population",
        f"{plain(z, 3)}² × {plain(p, 4)} × {plain(1 - p, 4)} / {plain(e, 4)}²",
        plain(n0, 4),
    )
    sampling_fraction: MaybeFloat = UNAVAILABLE
    if population is not None:
        rec.add(
            "finite_correction",
            f"{plain(n0, 4)} × {plain(population, 0)} / ({plain(n0, 4)} + {plain(population, 0)} - 1)",
            plain(n, 4),
            population=plain(population, 0),
        )
        sampling_fraction = round_half_away(final / population * 100.0, 2)
    rec.add("round_up", f"⌈{plain(n, 4)}⌉", str(final))

    if population is None:
        formula = INFINITE_FORMULA
        with_values = f"n = {plain(z, 3)}² × {plain(p, 4)} × {plain(1 - p, 4)} / {plain(e, 4)}²"
    else:
        formula = FINITE_FORMULA
        core = f"{plain(z, 3)}² × {plain(p, 4)} × {plain(1 - p, 4)} / {plain(e, 4)}²"
        with_values = (
            f"n = ({core}) × {plain(population, 0)} / ({core} + {plain(population, 0)} - 1)"
        )
    logger.debug("Sample size %d (infinite %.4f, z=%.3f)", final, n0, z)

    return SampleSizeResult(
        sample_size=final,
        infinite_sample_size=_round_up(n0),
        finite_correction_applied=population is not None,
        confidence_level=level,
        z_score=round_half_away(z, 3),
        margin_of_error=margin,
        expected_proportion=proportion,
        population_size=population,
        expected_yes=expected_yes,
        expected_no=final - expected_yes,
        sampling_fraction=sampling_fraction,
        formula=formula,
        formula_with_values=with_values,
        table=sample_size_table(proportion, population),
        steps=rec.freeze(),
    )
