"""Build aligned ``(x, y)`` series from pair rows or from two columns."""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..config import is_decimal_comma_locale
from ..models import DataPoint, PairedSeries
from .numeric_text import EUROPEAN, US, coerce_tokens, normalize, parse_numeric_list

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"[\n;]+")
_DECIMAL_COMMA = re.compile(r"\d,\d")
_WHITESPACE = re.compile(r"\s+")
_EUROPEAN_PAIR_SPLIT = re.compile(r"\s+")
_US_PAIR_SPLIT = re.compile(r"[\s,]+")


def detect_pairs_convention(text: str, locale: Optional[str] = None) -> str:
    """Decide whether commas inside pair rows are decimal separators.

    A comma is the x/y separator in US rows (``1.5,2``). It can only be a
    decimal separator when the locale says so, or when some row already
    separates its values by whitespace and still has a ``digit,digit`` group
    (``1,5 2,3``).
    """
    if is_decimal_comma_locale(locale):
        return EUROPEAN
    for line in _LINE_SPLIT.split(text):
        stripped = line.strip()
        if len(_WHITESPACE.split(stripped)) >= 2 and _DECIMAL_COMMA.search(stripped):
            return EUROPEAN
    return US


def parse_pairs(text: Optional[str], locale: Optional[str] = None) -> PairedSeries:
    """Parse one ``x, y`` pair per line (lines split on newlines or ``;``).

    Args:
        text (str | None): Raw rows such as ``"1,2\\n2,4"`` or ``"1 2; 3 4"``.
        locale (str | None, optional): Caller locale hint.

    Returns:
        PairedSeries: Points from every row with at least two numbers (extra
        numbers are ignored). Other non-blank rows are kept, stripped, in
        ``invalid_lines``.
    """
    if text is None or not str(text).strip():
        return PairedSeries()

    raw = str(text)
    convention = detect_pairs_convention(raw, locale)
    splitter = _EUROPEAN_PAIR_SPLIT if convention == EUROPEAN else _US_PAIR_SPLIT

    points = []
    invalid_lines = []
    for line in _LINE_SPLIT.split(raw):
        stripped = line.strip()
        if not stripped:
            continue
        normalized = normalize(stripped, EUROPEAN) if convention == EUROPEAN else stripped
        tokens = [tok for tok in splitter.split(normalized) if tok]
        numbers, _ = coerce_tokens(tokens)
        if len(numbers) >= 2:
            points.append(DataPoint(x=numbers[0], y=numbers[1], index=len(points)))
        else:
            invalid_lines.append(stripped)

    logger.debug(
        "Parsed %d pair(s), %d invalid line(s) using %s convention",
        len(points),
        len(invalid_lines),
        convention,
    )
    return PairedSeries(
        data_points=tuple(points),
        x_values=tuple(p.x for p in points),
        y_values=tuple(p.y for p in points),
        invalid_lines=tuple(invalid_lines),
        x_source_count=len(points),
        y_source_count=len(points),
    )


def parse_columns(
    x_text: Optional[str], y_text: Optional[str], locale: Optional[str] = None
) -> PairedSeries:
    """Parse two independent columns and zip them to the shorter length.

    Args:
        x_text (str | None): Raw x values.
        y_text (str | None): Raw y values.
        locale (str | None, optional): Caller locale hint, applied to both.

    Returns:
        PairedSeries: Aligned points. ``x_source_count`` and
        ``y_source_count`` keep the pre-truncation counts.
    """
    xs = parse_numeric_list(x_text, locale)
    ys = parse_numeric_list(y_text, locale)
    n = min(xs.count, ys.count)
    if xs.count != ys.count:
        logger.debug("Truncating columns of %d and %d values to %d", xs.count, ys.count, n)

    points = tuple(DataPoint(x=xs.values[i], y=ys.values[i], index=i) for i in range(n))
    return PairedSeries(
        data_points=points,
        x_values=xs.values[:n],
        y_values=ys.values[:n],
        invalid_x_tokens=xs.invalid_tokens,
        invalid_y_tokens=ys.invalid_tokens,
        x_source_count=xs.count,
        y_source_count=ys.count,
    )
