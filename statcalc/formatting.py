"""Locale-aware display helpers for results, issues and steps.

Engines return pre-rounded floats and structured records; this module turns
them into display strings for a given locale. Grouping follows the common
conventions of each language family: ``1,234.5`` (US), ``1.234,5`` (German
style) and ``1 234,5`` (French/Nordic style, non-breaking space).
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional, Tuple

from .config import DEFAULT_PRECISION, is_decimal_comma_locale
from .models import UNAVAILABLE, Issue, MaybeFloat
from .numeric import round_half_away
from .steps import CalculationStep, render_steps

UNAVAILABLE_TEXT = "N/A"

# Decimal-comma languages that group thousands with a space instead of a period.
_SPACE_GROUPING_LANGUAGES = frozenset(
    {"bg", "cs", "et", "fi", "fr", "hu", "lt", "lv", "nb", "nn", "no", "pl", "ru", "sk", "sv", "uk"}
)


def separators(locale: Optional[str]) -> Tuple[str, str]:
    """Return ``(decimal_separator, group_separator)`` for a locale tag."""
    if not is_decimal_comma_locale(locale):
        return ".", ","
    language = str(locale).strip().replace("_", "-").split("-", 1)[0].lower()
    if language in _SPACE_GROUPING_LANGUAGES:
        return ",", "\u00a0"
    return ",", "."


def format_number(
    value: MaybeFloat,
    precision: int = DEFAULT_PRECISION,
    locale: Optional[str] = None,
    grouping: bool = True,
) -> str:
    """Format a number with a fixed number of decimals for ``locale``.

    Args:
        value (float | UNAVAILABLE): Number to format.
        precision (int, optional): Decimal places. Defaults to ``4``.
        locale (str | None, optional): BCP-47-like tag. ``None`` means US
            conventions.
        grouping (bool, optional): Insert thousands separators.

    Returns:
        str: Formatted text; ``"N/A"`` for the unavailable marker.

    Examples:
        >>> format_number(1234.567, 2, "en-US")
        '1,234.57'
        >>> format_number(1234.567, 2, "de-DE")
        '1.234,57'
    """
    if value is UNAVAILABLE:
        return UNAVAILABLE_TEXT
    x = float(value)
    if math.isnan(x):
        return UNAVAILABLE_TEXT
    if math.isinf(x):
        return "∞" if x > 0 else "-∞"

    decimal_sep, group_sep = separators(locale)
    text = f"{round_half_away(x, precision):,.{int(precision)}f}" if grouping else (
        f"{round_half_away(x, precision):.{int(precision)}f}"
    )
    if text.startswith("-") and float(text.replace(",", "")) == 0:
        text = text[1:]
    return text.replace(",", "\x00").replace(".", decimal_sep).replace("\x00", group_sep)


def format_percent(
    value: MaybeFloat, precision: int = 2, locale: Optional[str] = None
) -> str:
    """Format a percentage value (``25`` means 25 %) with a trailing ``%``."""
    if value is UNAVAILABLE:
        return UNAVAILABLE_TEXT
    return f"{format_number(value, precision, locale)}%"


def format_values(
    values: Iterable[float], precision: int = DEFAULT_PRECISION, locale: Optional[str] = None
) -> str:
    """Join numbers with the list separator that does not clash with ``locale``."""
    sep = "; " if is_decimal_comma_locale(locale) else ", "
    return sep.join(format_number(v, precision, locale, grouping=False) for v in values)


def render_issue(issue: Issue, templates: Optional[Mapping[str, str]] = None) -> str:
    """Render an error or warning, preferring a caller template for its code."""
    if templates and issue.code in templates:
        return templates[issue.code].format(**issue.params)
    return issue.message


def render_issues(
    issues: Iterable[Issue], templates: Optional[Mapping[str, str]] = None
) -> Tuple[str, ...]:
    return tuple(render_issue(issue, templates) for issue in issues)


def step_lines(
    steps: Tuple[CalculationStep, ...], templates: Optional[Mapping[str, str]] = None
) -> Tuple[str, ...]:
    """Flatten steps into ``"1. description: expression = result"`` lines."""
    if templates:
        steps = render_steps(steps, templates)
    lines = []
    for step in steps:
        line = f"{step.step_number}. {step.description}: {step.expression}"
        if step.result is not None:
            line += f" = {step.result}"
        lines.append(line)
    return tuple(lines)
