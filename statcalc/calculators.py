"""One entry point per calculator: validate, then compute.

Each ``calculate_*`` function returns the :class:`ValidationOutcome` when the
inputs have errors, and otherwise the engine result with the validation
warnings placed ahead of any warnings the engine raised itself. An engine
warning is dropped when validation already reported the same cause.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Union

from .models import ValidationOutcome
from .schema import (
    FIELDS,
    CentralTendencyInputs,
    CorrelationInputs,
    DispersionInputs,
    ProbabilityInputs,
    SampleSizeInputs,
    ZScoreInputs,
)
from .stats.central_tendency import CentralTendencyResult, central_tendency
from .stats.correlation import CorrelationResult, correlate
from .stats.dispersion import DispersionResult, dispersion
from .stats.probability import ProbabilityResult, evaluate_probability
from .stats.sample_size import SampleSizeResult, calculate as sample_size_result
from .stats.zscore import ZScoreResult, summarize_inputs
from .validation import (
    validate_central_tendency,
    validate_correlation,
    validate_dispersion,
    validate_probability,
    validate_sample_size,
    validate_z_score,
)


# Engine warnings already explained by a validation warning for the same cause.
SUPERSEDED_BY = {
    "result_clamped": frozenset({"intersection_exceeds_condition"}),
    "zero_variance": frozenset({"constant_x", "constant_y"}),
}


def _merge_warnings(result, outcome: ValidationOutcome):
    if not outcome.warnings:
        return result
    raised = {issue.code for issue in outcome.warnings}
    engine = tuple(
        issue for issue in result.warnings if not SUPERSEDED_BY.get(issue.code, frozenset()) & raised
    )
    return replace(result, warnings=tuple(outcome.warnings) + engine)


def calculate_central_tendency(
    inputs: CentralTendencyInputs,
) -> Union[CentralTendencyResult, ValidationOutcome]:
    outcome = validate_central_tendency(inputs)
    if not outcome.valid:
        return outcome
    weights = outcome.parsed_weights.values if outcome.parsed_weights is not None else None
    result = central_tendency(
        outcome.parsed.values,
        mean_type=inputs.mean_type,
        weights=weights,
        precision=int(inputs.decimal_precision),
    )
    return _merge_warnings(result, outcome)


def calculate_dispersion(inputs: DispersionInputs) -> Union[DispersionResult, ValidationOutcome]:
    outcome = validate_dispersion(inputs)
    if not outcome.valid:
        return outcome
    result = dispersion(
        outcome.parsed.values,
        calculation_type=inputs.calculation_type,
        precision=int(inputs.decimal_precision),
    )
    return _merge_warnings(result, outcome)


def calculate_correlation(inputs: CorrelationInputs) -> Union[CorrelationResult, ValidationOutcome]:
    """Correlate pairs or columns; a constant series yields ``r = 0`` with a warning."""
    outcome = validate_correlation(inputs)
    if not outcome.valid:
        return outcome
    field = FIELDS.pairs_input if inputs.input_method == "pairs" else FIELDS.x_data_input
    result = correlate(
        outcome.parsed.data_points,
        precision=int(inputs.decimal_precision),
        warning_field=field,
    )
    return _merge_warnings(result, outcome)


def calculate_probability(inputs: ProbabilityInputs) -> Union[ProbabilityResult, ValidationOutcome]:
    outcome = validate_probability(inputs)
    if not outcome.valid:
        return outcome
    precise = replace(inputs, decimal_precision=int(inputs.decimal_precision))
    return _merge_warnings(evaluate_probability(precise), outcome)


def calculate_z_score(inputs: ZScoreInputs) -> Union[ZScoreResult, ValidationOutcome]:
    outcome = validate_z_score(inputs)
    if not outcome.valid:
        return outcome
    precise = replace(inputs, decimal_precision=int(inputs.decimal_precision))
    return _merge_warnings(summarize_inputs(precise), outcome)


def calculate_sample_size(inputs: SampleSizeInputs) -> Union[SampleSizeResult, ValidationOutcome]:
    outcome = validate_sample_size(inputs)
    if not outcome.valid:
        return outcome
    return _merge_warnings(sample_size_result(inputs), outcome)
