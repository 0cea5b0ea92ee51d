"""
Statistical engines.

Every engine takes already-parsed numbers and returns a frozen result object
whose numeric fields are rounded half away from zero at the caller's
precision. Engines raise ``ValueError`` for inputs the validation layer
would have rejected.

Modules:
    central_tendency:
        Arithmetic, geometric, harmonic and weighted means; median, mode and
        quartiles.

    dispersion:
        Population and sample variance, standard deviation, standard error
        and coefficient of variation.

    correlation:
        Pearson r, least-squares regression line and significance of r
        against tabulated critical t values.

    probability:
        Single-event, AND, OR and conditional probability with odds and
        fraction forms.

    zscore:
        Z-score <-> raw value conversion, percentile and tail p-values.

    sample_size:
        Cochran's sample size with finite population correction.
"""

from .central_tendency import (
    CentralTendencyResult,
    arithmetic_mean,
    central_tendency,
    geometric_mean,
    harmonic_mean,
    median,
    mode,
    quartiles,
    weighted_mean,
)
from .correlation import (
    CorrelationResult,
    classify_strength,
    correlate,
    critical_t,
    pearson,
    regression_line,
    significance,
)
from .dispersion import DispersionResult, dispersion, variance
from .probability import (
    ProbabilityResult,
    conditional_probability,
    evaluate_probability,
    odds,
    or_probability,
    to_fraction,
)
from .sample_size import SampleSizeResult, sample_size, sample_size_table, z_for_confidence
from .zscore import ZScoreResult, normal_cdf, p_values, value_from_z, z_score_of, z_score_summary

__all__ = [
    # Central tendency
    "CentralTendencyResult",
    "arithmetic_mean",
    "central_tendency",
    "geometric_mean",
    "harmonic_mean",
    "median",
    "mode",
    "quartiles",
    "weighted_mean",
    # Dispersion
    "DispersionResult",
    "dispersion",
    "variance",
    # Correlation
    "CorrelationResult",
    "classify_strength",
    "correlate",
    "critical_t",
    "pearson",
    "regression_line",
    "significance",
    # Probability
    "ProbabilityResult",
    "conditional_probability",
    "evaluate_probability",
    "odds",
    "or_probability",
    "to_fraction",
    # Z-score
    "ZScoreResult",
    "normal_cdf",
    "p_values",
    "value_from_z",
    "z_score_of",
    "z_score_summary",
    # Sample size
    "SampleSizeResult",
    "sample_size",
    "sample_size_table",
    "z_for_confidence",
]
