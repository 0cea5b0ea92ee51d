"""Structured derivation steps and their default English wording.

Engines record steps as ``(key, params, expression, result)`` records. The
``description`` attached to each step is the English template for ``key``
filled with ``params``; a presentation layer can swap in its own wording with
:func:`render_steps` without re-running any computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

STEP_TEMPLATES: Dict[str, str] = {
    # Means
    "sum_values": "Add all {n} values",
    "divide_by_count": "Divide the sum by the number of values ({n})",
    "arithmetic_formula": "Arithmetic mean formula",
    "geometric_unavailable": "Geometric mean needs every value to be positive",
    "sum_logarithms": "Add the natural logarithms of the {n} values",
    "exponentiate_mean_log": "Divide by {n} and exponentiate (equivalent to the {n}th root of the product)",
    "geometric_formula": "Geometric mean formula",
    "harmonic_unavailable": "Harmonic mean needs every value to be positive and non-zero",
    "sum_reciprocals": "Add the reciprocals of the values",
    "divide_count_by_reciprocal_sum": "Divide the number of values ({n}) by the sum of reciprocals",
    "harmonic_formula": "Harmonic mean formula",
    "weighted_unavailable": "Weighted mean needs weights with a positive sum",
    "multiply_by_weights": "Multiply each value by its weight and add the products",
    "sum_weights": "Add the weights",
    "divide_by_weight_sum": "Divide the weighted sum by the sum of weights",
    "weighted_formula": "Weighted mean formula",
    # Median
    "sort_values": "Sort the values in ascending order",
    "find_middle_position": "Locate the middle position",
    "middle_value": "The median is the middle value",
    "average_middle_values": "Average the two middle values",
    "median_formula": "Median formula",
    # Mode
    "count_frequencies": "Count how often each value appears",
    "find_highest_frequency": "Find the highest frequency",
    "identify_modes": "Identify the value(s) with the highest frequency ({mode_type})",
    "mode_formula": "Mode definition",
    # Quartiles
    "split_halves": "Split the sorted values into a lower and an upper half",
    "lower_quartile": "Q1 is the median of the lower half",
    "upper_quartile": "Q3 is the median of the upper half",
    "interquartile_range": "Subtract Q1 from Q3",
    # Dispersion
    "count_values": "Count the values and add them up",
    "compute_mean": "Compute the mean",
    "squared_deviations": "Add the squared deviations from the mean",
    "divide_by_divisor": "Divide by {divisor_label} to get the {calculation_type} variance",
    "square_root": "Take the square root to get the standard deviation",
    "standard_error": "Divide the standard deviation by √n for the standard error",
    "coefficient_of_variation": "Divide the standard deviation by |mean| and multiply by 100",
    # Correlation
    "compute_means": "Compute the means of x and y",
    "compute_deviation_sums": "Add the deviation products and squared deviations",
    "compute_r": "Divide the co-deviation sum by the root of the squared-deviation sums",
    "compute_r_squared": "Square r for the coefficient of determination",
    "regression_slope": "Compute the regression slope",
    "regression_intercept": "Compute the regression intercept",
    "t_statistic": "Compute the t statistic with {df} degrees of freedom",
    "compare_critical_values": "Compare |t| with the two-tailed critical values",
    # Probability, z-score, sample size
    "identify_values": "Identify the given values",
    "apply_formula": "Apply the formula",
    "compute_result": "Compute the result",
    "convert_to_percent": "Convert to a percentage",
    "complement": "Compute the complement",
    "odds": "Express as odds",
    "percentile": "Look up the standard normal CDF for the percentile",
    "p_values": "Derive the one- and two-tailed p-values",
    "infinite_population": "Apply Cochran's formula for an infinite population",
    "finite_correction": "Apply the finite population correction (N = {population})",
    "round_up": "Round up to the next whole respondent",
}


@dataclass(frozen=True)
class CalculationStep:
    """One line of a derivation trail.

    Attributes:
        step_number: 1-based position, gapless within its trail.
        key: Template key naming what the step does.
        description: Human-readable description (English by default).
        expression: The formula or arithmetic being shown.
        result: Outcome of the step, if any.
        params: Values used to fill the description template.
    """

    step_number: int
    key: str
    description: str
    expression: str
    result: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict, compare=False)


class StepRecorder:
    """Collect steps with monotonic numbering."""

    def __init__(self) -> None:
        self._steps: List[CalculationStep] = []

    def add(
        self, key: str, expression: str, result: Optional[str] = None, **params: Any
    ) -> None:
        self._steps.append(
            CalculationStep(
                step_number=len(self._steps) + 1,
                key=key,
                description=describe(key, params),
                expression=expression,
                result=result,
                params=dict(params),
            )
        )

    def freeze(self) -> Tuple[CalculationStep, ...]:
        return tuple(self._steps)


def describe(key: str, params: Mapping[str, Any], templates: Optional[Mapping[str, str]] = None) -> str:
    table = STEP_TEMPLATES if templates is None else templates
    template = table.get(key)
    if template is None:
        raise KeyError(f"No step template for key '{key}'.")
    return template.format(**params)


def render_steps(
    steps: Tuple[CalculationStep, ...], templates: Mapping[str, str]
) -> Tuple[CalculationStep, ...]:
    """Return ``steps`` with descriptions re-rendered from ``templates``.

    Keys missing from ``templates`` keep their existing description, so a
    partial translation degrades to English rather than failing.
    """
    rendered = []
    for step in steps:
        if step.key in templates:
            step = replace(step, description=templates[step.key].format(**step.params))
        rendered.append(step)
    return tuple(rendered)
