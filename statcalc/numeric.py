"""Rounding and plain-text number helpers shared by every engine."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Iterable, List

from .config import DEFAULT_PRECISION
from .models import UNAVAILABLE, MaybeFloat


def round_half_away(value: float, decimals: int = DEFAULT_PRECISION) -> float:
    """Round to ``decimals`` places, halves away from zero.

    Args:
        value (float): Number to round. Non-finite values are returned as is.
        decimals (int, optional): Decimal places. Defaults to ``4``.

    Returns:
        float: Rounded value; negative zero is normalized to ``0.0``.

    Note:
        Rounding is applied to the shortest decimal representation of the
        float (``repr``), so ``2.675`` rounds to ``2.68`` even though its
        binary value is slightly below the half.
    """
    x = float(value)
    if not math.isfinite(x):
        return x
    d = Decimal(repr(x))
    ctx = Context(prec=max(28, d.adjusted() + int(decimals) + 2))
    rounded = d.quantize(Decimal(1).scaleb(-int(decimals)), rounding=ROUND_HALF_UP, context=ctx)
    return float(rounded) + 0.0


def round_or_unavailable(value: MaybeFloat, decimals: int) -> MaybeFloat:
    if value is UNAVAILABLE:
        return UNAVAILABLE
    return round_half_away(value, decimals)


def round_all(values: Iterable[float], decimals: int) -> List[float]:
    return [round_half_away(v, decimals) for v in values]


def plain(value: MaybeFloat, decimals: int = DEFAULT_PRECISION) -> str:
    """Render a number for step expressions without trailing zeros.

    ``plain(18.0)`` gives ``"18"``, ``plain(2.50)`` gives ``"2.5"`` and the
    unavailable marker renders as ``"--"``.
    """
    if value is UNAVAILABLE:
        return "--"
    x = float(value)
    if math.isinf(x):
        return "∞" if x > 0 else "-∞"
    r = round_half_away(x, decimals)
    text = f"{r:.{int(decimals)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def join_plain(values: Iterable[float], decimals: int, sep: str = ", ") -> str:
    return sep.join(plain(v, decimals) for v in values)


def ordinal(n: int) -> str:
    """Return ``1st``, ``2nd``, ``3rd``, ``4th``, ... ``11th``, ``21st``."""
    n = int(n)
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
