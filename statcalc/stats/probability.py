"""Single-event, AND, OR and conditional probability with derived forms."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Tuple

from ..config import FRACTION_MAX_DENOMINATOR, ODDS_MAX_DENOMINATOR
from ..models import Issue
from ..numeric import plain, round_half_away
from ..schema import FIELDS, PROBABILITY_MODES, RELATIONSHIPS, ProbabilityInputs
from ..steps import CalculationStep, StepRecorder

logger = logging.getLogger(__name__)

FORMULAS = {
    ("single", "independent"): "P(A) = favorable outcomes / total outcomes",
    ("and", "independent"): "P(A ∩ B) = P(A) × P(B)",
    ("and", "dependent"): "P(A ∩ B) = P(A) × P(B|A)",
    ("or", "independent"): "P(A ∪ B) = P(A) + P(B) - P(A) × P(B)",
    ("or", "dependent"): "P(A ∪ B) = P(A) + P(B) - P(A ∩ B)",
    ("conditional", "independent"): "P(A|B) = P(A ∩ B) / P(B)",
}
RESULT_LABELS = {
    "single": "P(A)",
    "and": "P(A ∩ B)",
    "or": "P(A ∪ B)",
    "conditional": "P(A|B)",
}


@dataclass(frozen=True)
class ProbabilityResult:
    """Probability with its complement and alternative representations.

    Attributes:
        probability: Decimal probability in ``[0, 1]``.
        percentage: ``probability × 100`` at ``precision - 2`` decimals.
        odds_for: ``"a:b"`` ratio of favorable to unfavorable.
        odds_against: ``"b:a"``.
        fraction_numerator: Numerator of the closest fraction (denominator
            at most 1000).
        was_clamped: The raw result fell outside ``[0, 1]``.
    """

    mode: str
    relationship: str
    probability: float
    percentage: float
    complement: float
    complement_percentage: float
    odds_for: str
    odds_against: str
    fraction_numerator: int
    fraction_denominator: int
    formula: str
    was_clamped: bool
    steps: Tuple[CalculationStep, ...]
    warnings: Tuple[Issue, ...] = ()


def or_probability(
    p_a: float, p_b: float, p_a_and_b: Optional[float] = None
) -> Tuple[float, bool]:
    """Return ``(P(A ∪ B), was_clamped)``.

    The intersection defaults to ``P(A)·P(B)`` (independent events).
    """
    intersection = p_a * p_b if p_a_and_b is None else p_a_and_b
    raw = p_a + p_b - intersection
    clamped = min(1.0, max(0.0, raw))
    return clamped, clamped != raw


def conditional_probability(p_a_and_b: float, p_b: float) -> Tuple[float, bool]:
    """Return ``(P(A|B), was_clamped)``.

    Raises:
        ValueError: If ``P(B)`` is 0.
    """
    if p_b == 0:
        raise ValueError("P(B) must be non-zero for a conditional probability.")
    raw = p_a_and_b / p_b
    clamped = min(1.0, max(0.0, raw))
    return clamped, clamped != raw


def odds(probability: float, max_denominator: int = ODDS_MAX_DENOMINATOR) -> Tuple[str, str]:
    """Express a probability as ``(odds_for, odds_against)`` small-integer ratios.

    Examples:
        >>> odds(0.75)
        ('3:1', '1:3')
        >>> odds(0.25)
        ('1:3', '3:1')
    """
    if probability <= 0:
        return "0:1", "1:0"
    if probability >= 1:
        return "1:0", "0:1"
    ratio = probability / (1.0 - probability)
    if ratio >= 1:
        approx = Fraction(ratio).limit_denominator(max_denominator)
        for_num, for_den = approx.numerator, approx.denominator
    else:
        approx = Fraction(1.0 / ratio).limit_denominator(max_denominator)
        for_num, for_den = approx.denominator, approx.numerator
    return f"{for_num}:{for_den}", f"{for_den}:{for_num}"


def to_fraction(probability: float, max_denominator: int = FRACTION_MAX_DENOMINATOR) -> Fraction:
    """Return the closest fraction with a denominator of at most ``max_denominator``."""
    return Fraction(probability).limit_denominator(max_denominator)


def _percent_decimals(precision: int) -> int:
    return max(0, int(precision) - 2)


def evaluate_probability(inputs: ProbabilityInputs) -> ProbabilityResult:
    """Compute the probability requested by ``inputs.mode``.

    Args:
        inputs (ProbabilityInputs): Already validated inputs.

    Returns:
        ProbabilityResult: Rounded probability, derived forms and steps. A
        clamped result carries a ``result_clamped`` warning.

    Raises:
        ValueError: If the mode or relationship is unknown, a required value
            is missing, or ``P(B)`` is 0 in conditional mode.
    """
    mode = inputs.mode
    relationship = inputs.relationship if mode in ("and", "or") else "independent"
    if mode not in PROBABILITY_MODES:
        raise ValueError(f"Unknown probability mode {mode!r}.")
    if relationship not in RELATIONSHIPS:
        raise ValueError(f"Unknown relationship {relationship!r}.")

    p = int(inputs.decimal_precision)
    rec = StepRecorder()
    formula = FORMULAS[(mode, relationship)]
    label = RESULT_LABELS[mode]
    clamped = False

    def required(value: Optional[float], name: str) -> float:
        if value is None:
            raise ValueError(f"{name} is required in {mode} mode.")
        return float(value)

    if mode == "single":
        favorable = required(inputs.favorable_outcomes, "favorable_outcomes")
        total = required(inputs.total_outcomes, "total_outcomes")
        if total <= 0:
            raise ValueError(f"total_outcomes must be > 0, got {total}.")
        rec.add("identify_values", f"favorable = {plain(favorable, p)}, total = {plain(total, p)}")
        rec.add("apply_formula", formula)
        probability = favorable / total
        rec.add("compute_result", f"{plain(favorable, p)} / {plain(total, p)}", plain(probability, p))
    elif mode == "and":
        p_a = required(inputs.probability_a, "probability_a")
        p_b = required(inputs.probability_b, "probability_b")
        rec.add("identify_values", f"P(A) = {plain(p_a, p)}, P(B) = {plain(p_b, p)}")
        if relationship == "independent":
            rec.add("apply_formula", formula)
            probability = p_a * p_b
            rec.add("compute_result", f"{plain(p_a, p)} × {plain(p_b, p)}", plain(probability, p))
        else:
            p_b_given_a = required(inputs.probability_b_given_a, "probability_b_given_a")
            rec.add("apply_formula", f"{formula}, P(B|A) = {plain(p_b_given_a, p)}")
            probability = p_a * p_b_given_a
            rec.add(
                "compute_result",
                f"{plain(p_a, p)} × {plain(p_b_given_a, p)}",
                plain(probability, p),
            )
    elif mode == "or":
        p_a = required(inputs.probability_a, "probability_a")
        p_b = required(inputs.probability_b, "probability_b")
        rec.add("identify_values", f"P(A) = {plain(p_a, p)}, P(B) = {plain(p_b, p)}")
        if relationship == "independent":
            intersection = p_a * p_b
            rec.add("apply_formula", formula)
        else:
            intersection = required(inputs.probability_a_and_b, "probability_a_and_b")
            rec.add("apply_formula", f"{formula}, P(A ∩ B) = {plain(intersection, p)}")
        probability, clamped = or_probability(p_a, p_b, intersection)
        rec.add(
            "compute_result",
            f"{plain(p_a, p)} + {plain(p_b, p)} - {plain(intersection, p)}",
            plain(probability, p),
        )
    else:
        p_b = required(inputs.probability_b, "probability_b")
        p_a_and_b = required(inputs.probability_a_and_b, "probability_a_and_b")
        rec.add("identify_values", f"P(A ∩ B) = {plain(p_a_and_b, p)}, P(B) = {plain(p_b, p)}")
        rec.add("apply_formula", formula)
        probability, clamped = conditional_probability(p_a_and_b, p_b)
        rec.add(
            "compute_result",
            f"{plain(p_a_and_b, p)} / {plain(p_b, p)}",
            plain(probability, p),
        )

    warnings: List[Issue] = []
    if clamped:
        bound = "1 (100%)" if probability >= 1 else "0 (0%)"
        logger.debug("%s clamped to %s", label, bound)
        warnings.append(
            Issue(
                field=FIELDS.probability_a_and_b if mode == "conditional" else FIELDS.mode,
                code="result_clamped",
                message=f"Result clamped to {bound}",
                params={"bound": bound},
            )
        )

    percent_places = _percent_decimals(p)
    percentage = round_half_away(probability * 100.0, percent_places)
    complement = 1.0 - probability
    rec.add("convert_to_percent", f"{plain(probability, p)} × 100", f"{plain(percentage, percent_places)}%")
    rec.add("complement", f"1 - {plain(probability, p)}", plain(complement, p))
    odds_for, odds_against = odds(probability)
    rec.add("odds", f"{label} : (1 - {label})", odds_for)
    fraction = to_fraction(probability)

    return ProbabilityResult(
        mode=mode,
        relationship=relationship,
        probability=round_half_away(probability, p),
        percentage=percentage,
        complement=round_half_away(complement, p),
        complement_percentage=round_half_away(complement * 100.0, percent_places),
        odds_for=odds_for,
        odds_against=odds_against,
        fraction_numerator=fraction.numerator,
        fraction_denominator=fraction.denominator,
        formula=formula,
        was_clamped=clamped,
        steps=rec.freeze(),
        warnings=tuple(warnings),
    )
