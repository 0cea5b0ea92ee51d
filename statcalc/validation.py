"""Rule sets that gate every calculator.

Each ``validate_*`` function parses the raw text fields first, then
classifies problems as errors (computation is blocked) or warnings
(computation proceeds and the caveat is surfaced). Issues carry the field key
of the offending input and a stable ``code`` so callers can localize them.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Any, List, Optional, Sequence

from .config import MAX_PRECISION, MIN_PRECISION, SMALL_SAMPLE_THRESHOLD
from .models import Issue, NumericSeries, PairedSeries, ValidationOutcome
from .numeric import round_half_away
from .parsing import parse_columns, parse_numeric_list, parse_pairs
from .schema import (
    CALCULATION_TYPES,
    CONFIDENCE_PRESETS,
    FIELDS,
    INPUT_METHODS,
    MEAN_TYPES,
    PROBABILITY_MODES,
    RELATIONSHIPS,
    Z_SCORE_MODES,
    CentralTendencyInputs,
    CorrelationInputs,
    DispersionInputs,
    ProbabilityInputs,
    SampleSizeInputs,
    ZScoreInputs,
)

logger = logging.getLogger(__name__)

_PREVIEW_COUNT = 3


def _issue(field: str, code: str, message: str, **params: Any) -> Issue:
    return Issue(field=field, code=code, message=message.format(**params), params=params)


def _preview(tokens: Sequence[str]) -> str:
    shown = ", ".join(tokens[:_PREVIEW_COUNT])
    return shown + ("..." if len(tokens) > _PREVIEW_COUNT else "")


def _outcome(
    errors: List[Issue],
    warnings: List[Issue],
    parsed=None,
    parsed_weights: Optional[NumericSeries] = None,
) -> ValidationOutcome:
    if errors:
        logger.debug("Validation failed with codes %s", [e.code for e in errors])
        return ValidationOutcome(valid=False, errors=tuple(errors), warnings=tuple(warnings))
    return ValidationOutcome(
        valid=True,
        warnings=tuple(warnings),
        parsed=parsed,
        parsed_weights=parsed_weights,
    )


def _as_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        x = float(value)
    except (TypeError, ValueError):
        return None
    return x if math.isfinite(x) else None


def is_valid_precision(precision: Any) -> bool:
    x = _as_number(precision)
    return x is not None and x == int(x) and MIN_PRECISION <= x <= MAX_PRECISION


def _check_precision(precision: Any, errors: List[Issue]) -> None:
    if not is_valid_precision(precision):
        errors.append(
            _issue(
                FIELDS.decimal_precision,
                "invalid_precision",
                "Precision must be a whole number between {min} and {max}.",
                min=MIN_PRECISION,
                max=MAX_PRECISION,
                value=precision,
            )
        )


def _check_option(value: Any, allowed: Sequence[str], field: str, errors: List[Issue]) -> bool:
    if value in allowed:
        return True
    errors.append(
        _issue(
            field,
            "unknown_option",
            "Unknown {field_name} '{value}'. Expected one of: {allowed}.",
            field_name=field,
            value=value,
            allowed=", ".join(allowed),
        )
    )
    return False


def _check_series(series: NumericSeries, field: str, errors: List[Issue]) -> None:
    if series.invalid_tokens:
        errors.append(
            _issue(
                field,
                "invalid_tokens",
                "Invalid values: {tokens}",
                tokens=_preview(series.invalid_tokens),
                count=len(series.invalid_tokens),
            )
        )
    if series.count == 0:
        errors.append(_issue(field, "empty_series", "Please enter at least one number."))


def _frequencies_at_precision(values: Sequence[float], precision: Any) -> Counter:
    if is_valid_precision(precision):
        values = [round_half_away(v, int(precision)) for v in values]
    return Counter(values)


# ---------------------------------------------------------------------------
# Series calculators
# ---------------------------------------------------------------------------


def validate_central_tendency(inputs: CentralTendencyInputs) -> ValidationOutcome:
    """Validate mean / median / mode inputs.

    Args:
        inputs (CentralTendencyInputs): Raw form values.

    Returns:
        ValidationOutcome: ``parsed`` holds the data series and, for the
        weighted mean, ``parsed_weights`` holds the weights.
    """
    errors: List[Issue] = []
    warnings: List[Issue] = []

    series = parse_numeric_list(inputs.data_input, inputs.locale)
    _check_series(series, FIELDS.data_input, errors)
    known_type = _check_option(inputs.mean_type, MEAN_TYPES, FIELDS.mean_type, errors)
    _check_precision(inputs.decimal_precision, errors)

    weights: Optional[NumericSeries] = None
    if known_type and inputs.mean_type == "weighted":
        weights = parse_numeric_list(inputs.weights_input, inputs.locale)
        if weights.count == 0 and not weights.invalid_tokens:
            errors.append(
                _issue(
                    FIELDS.weights_input,
                    "weights_required",
                    "Please enter one weight per data value.",
                )
            )
        elif weights.invalid_tokens:
            errors.append(
                _issue(
                    FIELDS.weights_input,
                    "invalid_weight_tokens",
                    "Invalid weights: {tokens}",
                    tokens=_preview(weights.invalid_tokens),
                    count=len(weights.invalid_tokens),
                )
            )
        elif series.count and weights.count != series.count:
            errors.append(
                _issue(
                    FIELDS.weights_input,
                    "weight_count_mismatch",
                    "Number of weights ({weights}) must match number of data values ({values}).",
                    weights=weights.count,
                    values=series.count,
                )
            )
        elif any(w < 0 for w in weights.values):
            errors.append(
                _issue(FIELDS.weights_input, "negative_weights", "Weights cannot be negative.")
            )
        elif all(w == 0 for w in weights.values):
            errors.append(
                _issue(
                    FIELDS.weights_input,
                    "zero_weight_sum",
                    "At least one weight must be greater than zero.",
                )
            )

    if series.count == 1:
        warnings.append(
            _issue(
                FIELDS.data_input,
                "single_value",
                "Only one value provided. All measures of central tendency equal this value.",
            )
        )
    elif series.count > 1:
        # Mirrors the engine: equal frequencies everywhere means no mode.
        frequencies = set(_frequencies_at_precision(series.values, inputs.decimal_precision).values())
        if frequencies == {1}:
            warnings.append(
                _issue(
                    FIELDS.data_input,
                    "no_mode",
                    "All values are different, so the data set has no mode.",
                )
            )
        elif len(frequencies) == 1:
            warnings.append(
                _issue(
                    FIELDS.data_input,
                    "no_mode",
                    "All values appear equally often, so the data set has no mode.",
                )
            )
    if inputs.mean_type in ("geometric", "harmonic") and any(v <= 0 for v in series.values):
        warnings.append(
            _issue(
                FIELDS.mean_type,
                "non_positive_values",
                "The {mean_type} mean is only defined for positive values.",
                mean_type=inputs.mean_type,
            )
        )

    return _outcome(errors, warnings, series, weights)


def validate_dispersion(inputs: DispersionInputs) -> ValidationOutcome:
    """Validate variance / standard deviation inputs."""
    errors: List[Issue] = []
    warnings: List[Issue] = []

    series = parse_numeric_list(inputs.data_input, inputs.locale)
    _check_series(series, FIELDS.data_input, errors)
    _check_option(inputs.calculation_type, CALCULATION_TYPES, FIELDS.calculation_type, errors)
    _check_precision(inputs.decimal_precision, errors)

    if series.count == 1:
        warnings.append(
            _issue(
                FIELDS.data_input,
                "single_value",
                "Only one value provided. The variance and standard deviation are 0.",
            )
        )
    elif 1 < series.count < SMALL_SAMPLE_THRESHOLD and inputs.calculation_type == "sample":
        warnings.append(
            _issue(
                FIELDS.data_input,
                "small_sample",
                "Small sample size (n = {n}). Results may not be reliable.",
                n=series.count,
            )
        )

    return _outcome(errors, warnings, series)


def validate_correlation(inputs: CorrelationInputs) -> ValidationOutcome:
    """Validate paired data for correlation and regression.

    Args:
        inputs (CorrelationInputs): Raw form values in pairs or columns mode.

    Returns:
        ValidationOutcome: ``parsed`` holds a :class:`PairedSeries`.
    """
    errors: List[Issue] = []
    warnings: List[Issue] = []
    _check_precision(inputs.decimal_precision, errors)
    if not _check_option(inputs.input_method, INPUT_METHODS, FIELDS.input_method, errors):
        return _outcome(errors, warnings)

    paired: PairedSeries
    if inputs.input_method == "pairs":
        paired = parse_pairs(inputs.pairs_input, inputs.locale)
        count_field = FIELDS.pairs_input
        if paired.invalid_lines:
            errors.append(
                _issue(
                    FIELDS.pairs_input,
                    "invalid_pairs",
                    "Invalid pairs: {lines}",
                    lines=_preview(paired.invalid_lines),
                    count=len(paired.invalid_lines),
                )
            )
    else:
        paired = parse_columns(inputs.x_data_input, inputs.y_data_input, inputs.locale)
        count_field = FIELDS.x_data_input
        for field_key, tokens, code, label in (
            (FIELDS.x_data_input, paired.invalid_x_tokens, "invalid_x_tokens", "X"),
            (FIELDS.y_data_input, paired.invalid_y_tokens, "invalid_y_tokens", "Y"),
        ):
            if tokens:
                errors.append(
                    _issue(
                        field_key,
                        code,
                        "Invalid {label} values: {tokens}",
                        label=label,
                        tokens=_preview(tokens),
                        count=len(tokens),
                    )
                )
        for field_key, source_count, label in (
            (FIELDS.x_data_input, paired.x_source_count, "X"),
            (FIELDS.y_data_input, paired.y_source_count, "Y"),
        ):
            if source_count == 0:
                errors.append(
                    _issue(field_key, "empty_column", "Please enter the {label} values.", label=label)
                )
        if paired.truncated and paired.x_source_count and paired.y_source_count:
            warnings.append(
                _issue(
                    FIELDS.y_data_input,
                    "column_length_mismatch",
                    "X has {x_count} values, Y has {y_count}. Using {used} paired values.",
                    x_count=paired.x_source_count,
                    y_count=paired.y_source_count,
                    used=paired.count,
                )
            )

    if paired.count < 2:
        errors.append(
            _issue(
                count_field,
                "too_few_points",
                "Correlation requires at least 2 data points (got {n}).",
                n=paired.count,
            )
        )
    else:
        if paired.count < SMALL_SAMPLE_THRESHOLD:
            warnings.append(
                _issue(
                    count_field,
                    "small_sample",
                    "Small sample size (n = {n}). Correlation may not be reliable.",
                    n=paired.count,
                )
            )
        if len(set(paired.x_values)) == 1:
            warnings.append(
                _issue(
                    FIELDS.x_data_input if inputs.input_method == "columns" else count_field,
                    "constant_x",
                    "All X values are identical. Correlation is undefined.",
                )
            )
        if len(set(paired.y_values)) == 1:
            warnings.append(
                _issue(
                    FIELDS.y_data_input if inputs.input_method == "columns" else count_field,
                    "constant_y",
                    "All Y values are identical. Correlation is undefined.",
                )
            )

    return _outcome(errors, warnings, paired)


# ---------------------------------------------------------------------------
# Structured calculators
# ---------------------------------------------------------------------------


def _required_number(value: Any, field: str, errors: List[Issue]) -> Optional[float]:
    x = _as_number(value)
    if x is None:
        code = "required" if value is None else "not_a_number"
        errors.append(
            _issue(field, code, "Please enter a valid number for {field_name}.", field_name=field)
        )
    return x


def _probability(value: Any, field: str, errors: List[Issue]) -> Optional[float]:
    x = _required_number(value, field, errors)
    if x is not None and not 0.0 <= x <= 1.0:
        errors.append(
            _issue(
                field,
                "probability_out_of_range",
                "Probability must be between 0 and 1 (got {value}).",
                value=x,
            )
        )
        return None
    return x


def validate_probability(inputs: ProbabilityInputs) -> ValidationOutcome:
    """Validate probability inputs for the selected mode and relationship.

    Note:
        In conditional mode an intersection larger than ``P(B)`` is only a
        warning; the engine clamps the result to 1.
    """
    errors: List[Issue] = []
    warnings: List[Issue] = []
    _check_precision(inputs.decimal_precision, errors)
    if not _check_option(inputs.mode, PROBABILITY_MODES, FIELDS.mode, errors):
        return _outcome(errors, warnings)

    if inputs.mode == "single":
        favorable = _required_number(inputs.favorable_outcomes, FIELDS.favorable_outcomes, errors)
        total = _required_number(inputs.total_outcomes, FIELDS.total_outcomes, errors)
        if favorable is not None and favorable < 0:
            errors.append(
                _issue(
                    FIELDS.favorable_outcomes,
                    "negative_favorable",
                    "Favorable outcomes cannot be negative.",
                )
            )
            favorable = None
        if total is not None and total <= 0:
            errors.append(
                _issue(
                    FIELDS.total_outcomes,
                    "non_positive_total",
                    "Total outcomes must be greater than zero.",
                )
            )
            total = None
        if favorable is not None and total is not None:
            if favorable > total:
                errors.append(
                    _issue(
                        FIELDS.favorable_outcomes,
                        "favorable_exceeds_total",
                        "Favorable outcomes ({favorable}) cannot exceed total outcomes ({total}).",
                        favorable=favorable,
                        total=total,
                    )
                )
            elif favorable == 0:
                warnings.append(
                    _issue(
                        FIELDS.favorable_outcomes,
                        "impossible_event",
                        "No favorable outcomes: the event is impossible (P = 0).",
                    )
                )
            elif favorable == total:
                warnings.append(
                    _issue(
                        FIELDS.favorable_outcomes,
                        "certain_event",
                        "All outcomes are favorable: the event is certain (P = 1).",
                    )
                )
        return _outcome(errors, warnings)

    if inputs.mode == "conditional":
        if inputs.probability_a is not None:
            _probability(inputs.probability_a, FIELDS.probability_a, errors)
        p_b = _probability(inputs.probability_b, FIELDS.probability_b, errors)
        p_ab = _probability(inputs.probability_a_and_b, FIELDS.probability_a_and_b, errors)
        if p_b == 0:
            errors.append(
                _issue(
                    FIELDS.probability_b,
                    "zero_divisor",
                    "P(B) cannot be zero when computing P(A|B).",
                )
            )
        elif p_b is not None and p_ab is not None and p_ab > p_b:
            warnings.append(
                _issue(
                    FIELDS.probability_a_and_b,
                    "intersection_exceeds_condition",
                    "P(A ∩ B) is greater than P(B); the result is clamped to 1.",
                )
            )
        return _outcome(errors, warnings)

    # AND / OR
    p_a = _probability(inputs.probability_a, FIELDS.probability_a, errors)
    p_b = _probability(inputs.probability_b, FIELDS.probability_b, errors)
    if not _check_option(inputs.relationship, RELATIONSHIPS, FIELDS.relationship, errors):
        return _outcome(errors, warnings)
    if inputs.relationship == "dependent":
        if inputs.mode == "and":
            _probability(inputs.probability_b_given_a, FIELDS.probability_b_given_a, errors)
        else:
            p_ab = _probability(inputs.probability_a_and_b, FIELDS.probability_a_and_b, errors)
            if p_ab is not None and any(p is not None and p_ab > p for p in (p_a, p_b)):
                errors.append(
                    _issue(
                        FIELDS.probability_a_and_b,
                        "intersection_exceeds_marginal",
                        "P(A ∩ B) cannot be greater than P(A) or P(B).",
                    )
                )
    return _outcome(errors, warnings)


def validate_z_score(inputs: ZScoreInputs) -> ValidationOutcome:
    """Validate z-score inputs; the standard deviation must be positive."""
    errors: List[Issue] = []
    _check_precision(inputs.decimal_precision, errors)
    if not _check_option(inputs.mode, Z_SCORE_MODES, FIELDS.mode, errors):
        return _outcome(errors, [])

    if inputs.mode == "z_score":
        _required_number(inputs.value, FIELDS.value, errors)
    else:
        _required_number(inputs.z_score, FIELDS.z_score, errors)
    _required_number(inputs.mean, FIELDS.mean, errors)
    sd = _required_number(inputs.standard_deviation, FIELDS.standard_deviation, errors)
    if sd is not None and sd <= 0:
        errors.append(
            _issue(
                FIELDS.standard_deviation,
                "non_positive_sd",
                "Standard deviation must be greater than zero.",
            )
        )
    return _outcome(errors, [])


def validate_sample_size(inputs: SampleSizeInputs) -> ValidationOutcome:
    """Validate survey sample-size inputs (all percentages, not fractions)."""
    errors: List[Issue] = []
    warnings: List[Issue] = []

    if _check_option(inputs.confidence_level, CONFIDENCE_PRESETS, FIELDS.confidence_level, errors):
        if inputs.confidence_level == "custom":
            level = _required_number(
                inputs.custom_confidence_level, FIELDS.custom_confidence_level, errors
            )
            if level is not None and not 50 <= level <= 99.99:
                errors.append(
                    _issue(
                        FIELDS.custom_confidence_level,
                        "confidence_out_of_range",
                        "Confidence level must be between 50% and 99.99%.",
                    )
                )

    margin = _required_number(inputs.margin_of_error, FIELDS.margin_of_error, errors)
    if margin is not None:
        if margin <= 0:
            errors.append(
                _issue(
                    FIELDS.margin_of_error,
                    "non_positive_margin",
                    "Margin of error must be greater than 0%.",
                )
            )
        elif margin > 50:
            errors.append(
                _issue(
                    FIELDS.margin_of_error,
                    "margin_out_of_range",
                    "Margin of error cannot exceed 50%.",
                )
            )
        elif margin > 10:
            warnings.append(
                _issue(
                    FIELDS.margin_of_error,
                    "large_margin",
                    "A margin of error above 10% gives imprecise estimates.",
                )
            )

    proportion = _required_number(inputs.expected_proportion, FIELDS.expected_proportion, errors)
    if proportion is not None and not 0 <= proportion <= 100:
        errors.append(
            _issue(
                FIELDS.expected_proportion,
                "proportion_out_of_range",
                "Expected proportion must be between 0% and 100%.",
            )
        )

    if inputs.population_size is not None:
        population = _required_number(inputs.population_size, FIELDS.population_size, errors)
        if population is not None and population <= 0:
            errors.append(
                _issue(
                    FIELDS.population_size,
                    "non_positive_population",
                    "Population size must be greater than zero.",
                )
            )
        elif population is not None and population < 10:
            warnings.append(
                _issue(
                    FIELDS.population_size,
                    "small_population",
                    "Very small population. Consider surveying everyone.",
                )
            )

    return _outcome(errors, warnings)
