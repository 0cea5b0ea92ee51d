"""
Deterministic statistical calculators with step-by-step derivations.

Turns free-form, locale-ambiguous numeric text into validated series and
computes reproducible, pre-rounded results together with a labeled trail of
calculation steps.

Modules:
    - parsing: US / European numeric list and paired-data parsers.
    - validation: Per-calculator rule sets producing errors and warnings.
    - stats: Central tendency, dispersion, correlation, probability, z-score
      and sample-size engines.
    - calculators: Validate-then-compute entry points.
    - formatting: Locale-aware display of numbers, issues and steps.
"""

__version__ = "1.0.0"

from .calculators import (
    calculate_central_tendency,
    calculate_correlation,
    calculate_dispersion,
    calculate_probability,
    calculate_sample_size,
    calculate_z_score,
)
from .models import UNAVAILABLE, Issue, NumericSeries, PairedSeries, ValidationOutcome
from .parsing import parse_columns, parse_numeric_list, parse_pairs
from .schema import (
    CentralTendencyInputs,
    CorrelationInputs,
    DispersionInputs,
    ProbabilityInputs,
    SampleSizeInputs,
    ZScoreInputs,
)

__all__ = [
    # Calculators
    "calculate_central_tendency",
    "calculate_correlation",
    "calculate_dispersion",
    "calculate_probability",
    "calculate_sample_size",
    "calculate_z_score",
    # Inputs
    "CentralTendencyInputs",
    "CorrelationInputs",
    "DispersionInputs",
    "ProbabilityInputs",
    "SampleSizeInputs",
    "ZScoreInputs",
    # Models
    "UNAVAILABLE",
    "Issue",
    "NumericSeries",
    "PairedSeries",
    "ValidationOutcome",
    # Parsing
    "parse_columns",
    "parse_numeric_list",
    "parse_pairs",
]
