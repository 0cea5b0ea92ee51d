"""Define the calculator input structs and their stable field keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .config import DEFAULT_PRECISION

MEAN_TYPES: Tuple[str, ...] = ("arithmetic", "geometric", "harmonic", "weighted")
CALCULATION_TYPES: Tuple[str, ...] = ("population", "sample")
INPUT_METHODS: Tuple[str, ...] = ("pairs", "columns")
PROBABILITY_MODES: Tuple[str, ...] = ("single", "and", "or", "conditional")
RELATIONSHIPS: Tuple[str, ...] = ("independent", "dependent")
Z_SCORE_MODES: Tuple[str, ...] = ("z_score", "value")
CONFIDENCE_PRESETS: Tuple[str, ...] = ("90", "95", "99", "custom")


@dataclass(frozen=True)
class Fields:
    """Container for the field keys used in errors and warnings.

    Every key equals the attribute name of the input struct it refers to, so
    a form can bind issues to widgets without a translation table.

    Attributes:
        data_input: Raw numeric text of the main series.
        weights_input: Raw numeric text of the weights (weighted mean only).
        pairs_input: Raw ``x,y`` rows for correlation in pairs mode.
        x_data_input: Raw x column for correlation in columns mode.
        y_data_input: Raw y column for correlation in columns mode.
        decimal_precision: Display precision, an integer in 0-10.
    """

    data_input: str = "data_input"
    weights_input: str = "weights_input"
    mean_type: str = "mean_type"
    calculation_type: str = "calculation_type"
    input_method: str = "input_method"
    pairs_input: str = "pairs_input"
    x_data_input: str = "x_data_input"
    y_data_input: str = "y_data_input"
    mode: str = "mode"
    relationship: str = "relationship"
    favorable_outcomes: str = "favorable_outcomes"
    total_outcomes: str = "total_outcomes"
    probability_a: str = "probability_a"
    probability_b: str = "probability_b"
    probability_b_given_a: str = "probability_b_given_a"
    probability_a_and_b: str = "probability_a_and_b"
    value: str = "value"
    mean: str = "mean"
    standard_deviation: str = "standard_deviation"
    z_score: str = "z_score"
    confidence_level: str = "confidence_level"
    custom_confidence_level: str = "custom_confidence_level"
    margin_of_error: str = "margin_of_error"
    expected_proportion: str = "expected_proportion"
    population_size: str = "population_size"
    decimal_precision: str = "decimal_precision"


FIELDS = Fields()


@dataclass(frozen=True)
class CentralTendencyInputs:
    data_input: str
    mean_type: str = "arithmetic"
    weights_input: str = ""
    decimal_precision: int = DEFAULT_PRECISION
    locale: Optional[str] = None


@dataclass(frozen=True)
class DispersionInputs:
    data_input: str
    calculation_type: str = "sample"
    decimal_precision: int = DEFAULT_PRECISION
    locale: Optional[str] = None


@dataclass(frozen=True)
class CorrelationInputs:
    input_method: str = "pairs"
    pairs_input: str = ""
    x_data_input: str = ""
    y_data_input: str = ""
    decimal_precision: int = DEFAULT_PRECISION
    locale: Optional[str] = None


@dataclass(frozen=True)
class ProbabilityInputs:
    """Structured inputs of the probability calculator.

    Probabilities are decimals in ``[0, 1]``. Only the fields required by
    ``mode`` and ``relationship`` are read:

    - ``single``: ``favorable_outcomes``, ``total_outcomes``
    - ``and``: ``probability_a``, ``probability_b`` and, when dependent,
      ``probability_b_given_a``
    - ``or``: ``probability_a``, ``probability_b`` and, when dependent,
      ``probability_a_and_b``
    - ``conditional``: ``probability_b``, ``probability_a_and_b``
      (``probability_a`` is range-checked when given)
    """

    mode: str = "single"
    favorable_outcomes: Optional[float] = None
    total_outcomes: Optional[float] = None
    probability_a: Optional[float] = None
    probability_b: Optional[float] = None
    relationship: str = "independent"
    probability_b_given_a: Optional[float] = None
    probability_a_and_b: Optional[float] = None
    decimal_precision: int = DEFAULT_PRECISION


@dataclass(frozen=True)
class ZScoreInputs:
    mode: str = "z_score"
    value: Optional[float] = None
    mean: Optional[float] = None
    standard_deviation: Optional[float] = None
    z_score: Optional[float] = None
    decimal_precision: int = DEFAULT_PRECISION


@dataclass(frozen=True)
class SampleSizeInputs:
    """Inputs of the survey sample-size calculator.

    Attributes:
        confidence_level: One of ``"90"``, ``"95"``, ``"99"`` or ``"custom"``.
        custom_confidence_level: Percent in 50-99.99, read when
            ``confidence_level`` is ``"custom"``.
        margin_of_error: Percent, for example ``5`` for +/-5 %.
        expected_proportion: Percent of expected "yes" responses; ``50``
            gives the most conservative size.
        population_size: Finite population size, ``None`` for an infinite
            population.
    """

    confidence_level: str = "95"
    margin_of_error: float = 5.0
    expected_proportion: float = 50.0
    population_size: Optional[float] = None
    custom_confidence_level: Optional[float] = None
