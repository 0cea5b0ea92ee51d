"""Means, median, mode and quartiles of a single numeric series.

Every public function works on raw floats; :func:`central_tendency` combines
them into a rounded :class:`CentralTendencyResult` with derivation steps.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import DEFAULT_PRECISION
from ..models import UNAVAILABLE, Issue, MaybeFloat
from ..numeric import join_plain, ordinal, plain, round_all, round_half_away, round_or_unavailable
from ..schema import FIELDS, MEAN_TYPES
from ..steps import CalculationStep, StepRecorder

logger = logging.getLogger(__name__)

# Sorted series longer than this are shown as "first 4, ..., last 4" in steps.
MAX_LISTED_VALUES = 10
LISTED_EDGE_VALUES = 4
# Frequencies listed in the mode steps.
MAX_LISTED_FREQUENCIES = 5

MEAN_FORMULAS = {
    "arithmetic": "x̄ = Σxᵢ / n",
    "geometric": "G = ⁿ√(Πxᵢ)",
    "harmonic": "H = n / Σ(1/xᵢ)",
    "weighted": "x̄ʷ = Σ(xᵢ × wᵢ) / Σwᵢ",
}


@dataclass(frozen=True)
class MedianResult:
    value: float
    position: str
    is_interpolated: bool
    sorted_values: Tuple[float, ...]
    middle_values: Tuple[float, ...]


@dataclass(frozen=True)
class FrequencyEntry:
    value: float
    frequency: int
    percentage: float


@dataclass(frozen=True)
class ModeResult:
    """Mode classification of a series.

    Attributes:
        values: Mode values in ascending order; empty for ``no-mode``.
        frequency: Highest frequency observed.
        mode_type: ``no-mode``, ``unimodal``, ``bimodal`` or ``multimodal``.
        frequency_table: Entries sorted by frequency (desc) then value (asc).
    """

    values: Tuple[float, ...]
    frequency: int
    mode_type: str
    frequency_table: Tuple[FrequencyEntry, ...]


@dataclass(frozen=True)
class QuartileResult:
    q1: float
    q2: float
    q3: float
    iqr: float
    minimum: float
    maximum: float


@dataclass(frozen=True)
class CentralTendencyResult:
    """Rounded summary of a series' center.

    ``mean`` is the mean selected by ``mean_type``; all four variants are
    reported alongside it. Undefined means carry ``UNAVAILABLE``.
    """

    mean_type: str
    mean: MaybeFloat
    arithmetic_mean: float
    geometric_mean: MaybeFloat
    harmonic_mean: MaybeFloat
    weighted_mean: MaybeFloat
    median: MedianResult
    mode: ModeResult
    quartiles: QuartileResult
    count: int
    total: float
    minimum: float
    maximum: float
    range: float
    variance: float
    standard_deviation: float
    formula: str
    mean_steps: Tuple[CalculationStep, ...]
    median_steps: Tuple[CalculationStep, ...]
    mode_steps: Tuple[CalculationStep, ...]
    quartile_steps: Tuple[CalculationStep, ...]
    warnings: Tuple[Issue, ...] = ()


def _as_array(values: Sequence[float], name: str = "values") -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError(f"Cannot summarize an empty series of {name}.")
    return arr


def arithmetic_mean(values: Sequence[float]) -> float:
    arr = _as_array(values)
    return float(np.sum(arr) / arr.size)


def geometric_mean(values: Sequence[float]) -> MaybeFloat:
    """Return ``exp(mean(ln x))``, or ``UNAVAILABLE`` unless every value is > 0."""
    arr = _as_array(values)
    if np.any(arr <= 0):
        return UNAVAILABLE
    return float(np.exp(np.mean(np.log(arr))))


def harmonic_mean(values: Sequence[float]) -> MaybeFloat:
    """Return ``n / Σ(1/x)``, or ``UNAVAILABLE`` unless every value is > 0."""
    arr = _as_array(values)
    if np.any(arr <= 0):
        return UNAVAILABLE
    return float(arr.size / np.sum(1.0 / arr))


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> MaybeFloat:
    """Return ``Σ(x·w) / Σw``.

    Raises:
        ValueError: If ``values`` and ``weights`` differ in length.

    Returns:
        float | UNAVAILABLE: ``UNAVAILABLE`` when the weights sum to zero or
        less.
    """
    arr = _as_array(values)
    w = np.asarray(weights, dtype=float)
    if w.shape != arr.shape:
        raise ValueError(
            f"Number of weights ({w.size}) must match number of values ({arr.size})."
        )
    weight_sum = float(np.sum(w))
    if weight_sum <= 0:
        return UNAVAILABLE
    return float(np.sum(arr * w) / weight_sum)


def median(values: Sequence[float]) -> MedianResult:
    """Return the median and where it sits in the sorted series.

    Even-length series average the two middle values and are flagged as
    interpolated.
    """
    ordered = np.sort(_as_array(values))
    n = int(ordered.size)
    mid = n // 2
    if n % 2 == 1:
        middle = (float(ordered[mid]),)
        position = f"{ordinal(mid + 1)} value"
        value = middle[0]
    else:
        middle = (float(ordered[mid - 1]), float(ordered[mid]))
        position = f"average of {ordinal(mid)} and {ordinal(mid + 1)} values"
        value = (middle[0] + middle[1]) / 2.0
    return MedianResult(
        value=value,
        position=position,
        is_interpolated=n % 2 == 0,
        sorted_values=tuple(float(v) for v in ordered),
        middle_values=middle,
    )


def mode(values: Sequence[float], precision: int = DEFAULT_PRECISION) -> ModeResult:
    """Classify the most frequent value(s).

    Args:
        values (Sequence[float]): Series to inspect.
        precision (int, optional): Values equal after rounding to this many
            decimals are counted together.

    Returns:
        ModeResult: ``no-mode`` when every distinct value has the same
        frequency (whether 1 or higher); otherwise uni-, bi- or multimodal by
        the number of values at the top frequency.
    """
    arr = _as_array(values)
    rounded = pd.Series([round_half_away(v, precision) for v in arr])
    counts = rounded.value_counts().rename_axis("value").reset_index(name="frequency")
    counts = counts.sort_values(["frequency", "value"], ascending=[False, True], kind="mergesort")

    n = int(arr.size)
    table = tuple(
        FrequencyEntry(
            value=float(row.value),
            frequency=int(row.frequency),
            percentage=round_half_away(100.0 * row.frequency / n, 2),
        )
        for row in counts.itertuples(index=False)
    )
    top = table[0].frequency
    if all(entry.frequency == top for entry in table):
        return ModeResult(values=(), frequency=top, mode_type="no-mode", frequency_table=table)

    modes = tuple(sorted(entry.value for entry in table if entry.frequency == top))
    if len(modes) == 1:
        mode_type = "unimodal"
    elif len(modes) == 2:
        mode_type = "bimodal"
    else:
        mode_type = "multimodal"
    return ModeResult(values=modes, frequency=top, mode_type=mode_type, frequency_table=table)


def quartiles(values: Sequence[float]) -> QuartileResult:
    """Return Q1, Q2, Q3 and the IQR using the median-of-halves method.

    The middle element is excluded from both halves when the count is odd.
    A single value is its own Q1 and Q3.
    """
    ordered = np.sort(_as_array(values))
    n = int(ordered.size)
    lower = ordered[: n // 2]
    upper = ordered[n // 2 :] if n % 2 == 0 else ordered[n // 2 + 1 :]
    q1 = median(lower).value if lower.size else float(ordered[0])
    q3 = median(upper).value if upper.size else float(ordered[-1])
    return QuartileResult(
        q1=q1,
        q2=median(ordered).value,
        q3=q3,
        iqr=q3 - q1,
        minimum=float(ordered[0]),
        maximum=float(ordered[-1]),
    )


def abbreviate(values: Sequence[float], decimals: int) -> str:
    """List values in full when short, else as ``first 4, ..., last 4``."""
    if len(values) <= MAX_LISTED_VALUES:
        return join_plain(values, decimals)
    head = join_plain(values[:LISTED_EDGE_VALUES], decimals)
    tail = join_plain(values[-LISTED_EDGE_VALUES:], decimals)
    return f"{head}, ..., {tail}"


def _mean_steps(
    values: Sequence[float],
    mean_type: str,
    weights: Optional[Sequence[float]],
    precision: int,
) -> Tuple[CalculationStep, ...]:
    rec = StepRecorder()
    n = len(values)
    arr = np.asarray(values, dtype=float)
    p = precision

    if mean_type == "arithmetic":
        total = float(np.sum(arr))
        rec.add("sum_values", " + ".join(plain(v, p) for v in values), plain(total, p), n=n)
        rec.add(
            "divide_by_count",
            f"{plain(total, p)} / {n}",
            plain(arithmetic_mean(values), p),
            n=n,
        )
    elif mean_type == "geometric":
        g = geometric_mean(values)
        if g is UNAVAILABLE:
            rec.add("geometric_unavailable", "all xᵢ > 0 required")
        else:
            log_sum = float(np.sum(np.log(arr)))
            rec.add(
                "sum_logarithms",
                " + ".join(f"ln({plain(v, p)})" for v in values),
                plain(log_sum, p),
                n=n,
            )
            rec.add("exponentiate_mean_log", f"exp({plain(log_sum, p)} / {n})", plain(g, p), n=n)
    elif mean_type == "harmonic":
        h = harmonic_mean(values)
        if h is UNAVAILABLE:
            rec.add("harmonic_unavailable", "all xᵢ > 0 required")
        else:
            reciprocal_sum = float(np.sum(1.0 / arr))
            rec.add(
                "sum_reciprocals",
                " + ".join(f"1/{plain(v, p)}" for v in values),
                plain(reciprocal_sum, p),
            )
            rec.add(
                "divide_count_by_reciprocal_sum",
                f"{n} / {plain(reciprocal_sum, p)}",
                plain(h, p),
                n=n,
            )
    else:
        w = np.asarray(weights if weights is not None else [], dtype=float)
        wm = weighted_mean(values, w)
        if wm is UNAVAILABLE:
            rec.add("weighted_unavailable", "Σwᵢ > 0 required")
        else:
            weighted_sum = float(np.sum(arr * w))
            weight_sum = float(np.sum(w))
            rec.add(
                "multiply_by_weights",
                " + ".join(f"{plain(v, p)} × {plain(wi, p)}" for v, wi in zip(values, w)),
                plain(weighted_sum, p),
            )
            rec.add("sum_weights", " + ".join(plain(wi, p) for wi in w), plain(weight_sum, p))
            rec.add(
                "divide_by_weight_sum",
                f"{plain(weighted_sum, p)} / {plain(weight_sum, p)}",
                plain(wm, p),
            )
    rec.add(f"{mean_type}_formula", MEAN_FORMULAS[mean_type])
    return rec.freeze()


def _median_steps(result: MedianResult, precision: int) -> Tuple[CalculationStep, ...]:
    rec = StepRecorder()
    n = len(result.sorted_values)
    rec.add("sort_values", abbreviate(result.sorted_values, precision))
    rec.add("find_middle_position", f"n = {n}", result.position)
    if result.is_interpolated:
        a, b = result.middle_values
        rec.add(
            "average_middle_values",
            f"({plain(a, precision)} + {plain(b, precision)}) / 2",
            plain(result.value, precision),
        )
    else:
        rec.add("middle_value", result.position, plain(result.value, precision))
    rec.add(
        "median_formula",
        "Median = x₍ₙ₊₁₎/₂" if n % 2 == 1 else "Median = (xₙ/₂ + xₙ/₂₊₁) / 2",
    )
    return rec.freeze()


def _mode_steps(result: ModeResult, precision: int) -> Tuple[CalculationStep, ...]:
    rec = StepRecorder()
    listed = "; ".join(
        f"{plain(e.value, precision)} appears {e.frequency} time{'s' if e.frequency != 1 else ''}"
        for e in result.frequency_table[:MAX_LISTED_FREQUENCIES]
    )
    if len(result.frequency_table) > MAX_LISTED_FREQUENCIES:
        listed += "; ..."
    rec.add("count_frequencies", listed)
    rec.add("find_highest_frequency", f"frequency = {result.frequency}", str(result.frequency))
    if result.mode_type == "no-mode":
        outcome = (
            "no mode (all values are different)"
            if result.frequency == 1
            else "no mode (all values appear equally often)"
        )
    else:
        outcome = join_plain(result.values, precision)
    rec.add("identify_modes", result.mode_type, outcome, mode_type=result.mode_type)
    rec.add("mode_formula", "Mode = value(s) with the highest frequency")
    return rec.freeze()


def _quartile_steps(
    ordered: Sequence[float], result: QuartileResult, precision: int
) -> Tuple[CalculationStep, ...]:
    rec = StepRecorder()
    n = len(ordered)
    lower = ordered[: n // 2]
    upper = ordered[n // 2 :] if n % 2 == 0 else ordered[n // 2 + 1 :]
    rec.add(
        "split_halves",
        f"[{abbreviate(lower, precision)}] | [{abbreviate(upper, precision)}]",
    )
    rec.add("lower_quartile", "Q1 = median(lower half)", plain(result.q1, precision))
    rec.add("upper_quartile", "Q3 = median(upper half)", plain(result.q3, precision))
    rec.add(
        "interquartile_range",
        f"IQR = {plain(result.q3, precision)} - {plain(result.q1, precision)}",
        plain(result.iqr, precision),
    )
    return rec.freeze()


def central_tendency(
    values: Sequence[float],
    mean_type: str = "arithmetic",
    weights: Optional[Sequence[float]] = None,
    precision: int = DEFAULT_PRECISION,
) -> CentralTendencyResult:
    """Summarize the center of a series.

    Args:
        values (Sequence[float]): Non-empty finite series.
        mean_type (str, optional): ``arithmetic``, ``geometric``,
            ``harmonic`` or ``weighted``.
        weights (Sequence[float] | None, optional): Required for the weighted
            mean; ignored otherwise.
        precision (int, optional): Decimal places of every reported value.

    Returns:
        CentralTendencyResult: Rounded values, per-section steps and any
        result-level warnings (zero weight sum).

    Raises:
        ValueError: If ``values`` is empty, ``mean_type`` is unknown, or the
            weights are missing or of the wrong length for a weighted mean.
    """
    if mean_type not in MEAN_TYPES:
        raise ValueError(f"Unknown mean type {mean_type!r}; expected one of {MEAN_TYPES}.")
    arr = _as_array(values)
    if mean_type == "weighted" and weights is None:
        raise ValueError("Weighted mean requires weights.")

    p = int(precision)
    n = int(arr.size)
    warnings = []

    arith = arithmetic_mean(arr)
    geo = geometric_mean(arr)
    harm = harmonic_mean(arr)
    weighted = weighted_mean(arr, weights) if weights is not None else UNAVAILABLE
    if mean_type == "weighted" and weighted is UNAVAILABLE:
        logger.debug("Weighted mean unavailable: weights sum to zero or less")
        warnings.append(
            Issue(
                field=FIELDS.weights_input,
                code="zero_weight_sum",
                message="The weights sum to zero, so the weighted mean is undefined.",
            )
        )
    selected = {
        "arithmetic": arith,
        "geometric": geo,
        "harmonic": harm,
        "weighted": weighted,
    }[mean_type]

    med = median(arr)
    mod = mode(arr, p)
    quart = quartiles(arr)
    variance = float(np.var(arr, ddof=1)) if n >= 2 else 0.0

    rounded_median = MedianResult(
        value=round_half_away(med.value, p),
        position=med.position,
        is_interpolated=med.is_interpolated,
        sorted_values=tuple(round_all(med.sorted_values, p)),
        middle_values=tuple(round_all(med.middle_values, p)),
    )
    rounded_quartiles = QuartileResult(
        q1=round_half_away(quart.q1, p),
        q2=round_half_away(quart.q2, p),
        q3=round_half_away(quart.q3, p),
        iqr=round_half_away(quart.iqr, p),
        minimum=round_half_away(quart.minimum, p),
        maximum=round_half_away(quart.maximum, p),
    )

    return CentralTendencyResult(
        mean_type=mean_type,
        mean=round_or_unavailable(selected, p),
        arithmetic_mean=round_half_away(arith, p),
        geometric_mean=round_or_unavailable(geo, p),
        harmonic_mean=round_or_unavailable(harm, p),
        weighted_mean=round_or_unavailable(weighted, p),
        median=rounded_median,
        mode=mod,
        quartiles=rounded_quartiles,
        count=n,
        total=round_half_away(float(np.sum(arr)), p),
        minimum=round_half_away(quart.minimum, p),
        maximum=round_half_away(quart.maximum, p),
        range=round_half_away(quart.maximum - quart.minimum, p),
        variance=round_half_away(variance, p),
        standard_deviation=round_half_away(math.sqrt(variance), p),
        formula=MEAN_FORMULAS[mean_type],
        mean_steps=_mean_steps(list(arr), mean_type, weights, p),
        median_steps=_median_steps(med, p),
        mode_steps=_mode_steps(mod, p),
        quartile_steps=_quartile_steps(med.sorted_values, quart, p),
        warnings=tuple(warnings),
    )
