"""Turn free-form numeric text into a :class:`NumericSeries`.

Accepted inputs mix commas, semicolons, spaces and newlines as delimiters and
use either the US convention (``1,234.5``) or the European one (``1.234,5``).
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import is_decimal_comma_locale
from ..models import NumericSeries

logger = logging.getLogger(__name__)

US = "us"
EUROPEAN = "european"

_LINE_DELIMITED_DECIMAL_COMMA = re.compile(r"\d,\d")
_LINE_DELIMITERS = re.compile(r"[;\n]")
_EUROPEAN_DECIMAL = re.compile(r"\d,\d{1,2}(?:\s|;|\n|$)")
_US_DECIMAL = re.compile(r"\d\.\d{1,2}(?:\s|,|;|\n|$)")

_EUROPEAN_THOUSANDS = re.compile(r"(\d)\.(\d{3})")
_US_THOUSANDS = re.compile(r"(\d),(\d{3})(?!\d)")

_EUROPEAN_SPLIT = re.compile(r"[\s;]+")
_US_SPLIT = re.compile(r"[\s,;]+")


def detect_convention(text: str, locale: Optional[str] = None) -> str:
    """Classify ``text`` as ``"european"`` or ``"us"``.

    Args:
        text (str): Raw user input.
        locale (str | None, optional): Caller locale. A decimal-comma language
            forces the European convention; any other value is ignored.

    Returns:
        str: ``"european"`` when commas act as decimal separators.

    Note:
        Without a locale hint the text is European when it is delimited by
        semicolons or newlines and has a ``digit,digit`` group, or when it
        has a ``digit,d`` / ``digit,dd`` group ending at a delimiter and no
        US-style ``digit.d`` / ``digit.dd`` group.
    """
    if is_decimal_comma_locale(locale):
        return EUROPEAN
    if _LINE_DELIMITERS.search(text) and _LINE_DELIMITED_DECIMAL_COMMA.search(text):
        return EUROPEAN
    if _EUROPEAN_DECIMAL.search(text) and not _US_DECIMAL.search(text):
        return EUROPEAN
    return US


def normalize(text: str, convention: str) -> str:
    """Remove thousands separators and make ``.`` the decimal separator."""
    if convention == EUROPEAN:
        return _EUROPEAN_THOUSANDS.sub(r"\1\2", text).replace(",", ".")
    return _US_THOUSANDS.sub(r"\1\2", text)


def tokenize(text: str, convention: str) -> List[str]:
    pattern = _EUROPEAN_SPLIT if convention == EUROPEAN else _US_SPLIT
    return [token for token in pattern.split(text.strip()) if token]


def coerce_tokens(tokens: Sequence[str]) -> Tuple[List[float], List[str]]:
    """Parse each token as a complete float literal.

    Args:
        tokens (Sequence[str]): Candidate number strings.

    Returns:
        tuple[list[float], list[str]]: Finite values and the rejected tokens,
        both in input order.
    """
    if not tokens:
        return [], []
    numbers = pd.to_numeric(pd.Series(list(tokens), dtype=object), errors="coerce")
    numbers = numbers.astype(float).to_numpy()
    finite = np.isfinite(numbers)

    values = [float(v) for v in numbers[finite]]
    invalid = [tok for tok, ok in zip(tokens, finite) if not ok]
    return values, invalid


def parse_numeric_list(text: Optional[str], locale: Optional[str] = None) -> NumericSeries:
    """Parse a delimited list of numbers.

    Args:
        text (str | None): Raw input such as ``"1, 2, 3"``, ``"1,5; 2,3"`` or
            one number per line.
        locale (str | None, optional): Caller locale hint.

    Returns:
        NumericSeries: Parsed values, rejected tokens and the convention used.
        Blank input gives an empty series; this function never raises on
        malformed text.
    """
    if text is None or not str(text).strip():
        return NumericSeries()

    raw = str(text)
    convention = detect_convention(raw, locale)
    tokens = tokenize(normalize(raw, convention), convention)
    values, invalid = coerce_tokens(tokens)

    logger.debug(
        "Parsed %d value(s), %d invalid token(s) using %s convention",
        len(values),
        len(invalid),
        convention,
    )
    return NumericSeries(values=tuple(values), invalid_tokens=tuple(invalid), convention=convention)
