"""Shared value types passed between the parsers, validators and engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


class _Unavailable:
    """Marker for a quantity that is mathematically undefined for the input.

    Distinct from ``0`` and ``NaN`` so callers can render it explicitly.
    """

    _instance: Optional["_Unavailable"] = None

    def __new__(cls) -> "_Unavailable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNAVAILABLE"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Unavailable, ())


UNAVAILABLE = _Unavailable()

MaybeFloat = Union[float, _Unavailable]


def is_available(value: Any) -> bool:
    return value is not UNAVAILABLE


@dataclass(frozen=True)
class NumericSeries:
    """Finite values parsed from one text field plus the rejected tokens.

    Attributes:
        values: Parsed values in input order. Every element is finite.
        invalid_tokens: Tokens that were not finite float literals, after
            separator normalization.
        convention: ``"us"`` or ``"european"``, the decimal convention used.
    """

    values: Tuple[float, ...] = ()
    invalid_tokens: Tuple[str, ...] = ()
    convention: str = "us"

    @property
    def count(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class DataPoint:
    x: float
    y: float
    index: int


@dataclass(frozen=True)
class PairedSeries:
    """Two aligned series for correlation and regression.

    Attributes:
        data_points: Points in parsed order; ``index`` matches the position.
        x_values: X coordinates of ``data_points``.
        y_values: Y coordinates of ``data_points``.
        invalid_lines: Pairs-mode lines that did not yield two numbers.
        invalid_x_tokens: Columns-mode tokens rejected from the x column.
        invalid_y_tokens: Columns-mode tokens rejected from the y column.
        x_source_count: Number of x values before truncation.
        y_source_count: Number of y values before truncation.
    """

    data_points: Tuple[DataPoint, ...] = ()
    x_values: Tuple[float, ...] = ()
    y_values: Tuple[float, ...] = ()
    invalid_lines: Tuple[str, ...] = ()
    invalid_x_tokens: Tuple[str, ...] = ()
    invalid_y_tokens: Tuple[str, ...] = ()
    x_source_count: int = 0
    y_source_count: int = 0

    @property
    def count(self) -> int:
        return len(self.data_points)

    @property
    def truncated(self) -> bool:
        return self.x_source_count != self.y_source_count


@dataclass(frozen=True)
class Issue:
    """One validation error or warning.

    Attributes:
        field: Form field key the issue belongs to (see ``schema.Fields``).
        code: Stable machine-readable identifier for localization.
        message: Default English text.
        params: Values substituted into ``message``; also available to
            localized templates.
    """

    field: str
    code: str
    message: str
    params: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of running a calculator's rule set over raw inputs.

    ``parsed`` and ``parsed_weights`` are ``None`` whenever ``valid`` is
    ``False``.
    """

    valid: bool
    errors: Tuple[Issue, ...] = ()
    warnings: Tuple[Issue, ...] = ()
    parsed: Optional[Union[NumericSeries, PairedSeries]] = None
    parsed_weights: Optional[NumericSeries] = None

    def error_fields(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(issue.field for issue in self.errors))

    def codes(self) -> Tuple[str, ...]:
        return tuple(issue.code for issue in self.errors + self.warnings)
