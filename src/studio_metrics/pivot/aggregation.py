"""Sum and average policies applied to record period cells."""

import re
from collections.abc import Iterable
from typing import TypeAlias, cast

import numpy as np
import numpy.typing as npt

from ..data.models import MetricRecord

FloatArray: TypeAlias = npt.NDArray[np.float64]

# Metrics describing rates or per-transaction values are averaged, not summed.
AVERAGE_METRICS: frozenset[str] = frozenset(
    {
        "Average Transaction Value",
        "Avg Transaction Value",
        "Average Revenue Per Member",
        "Average Spend Per Customer",
        "Average Class Size",
        "Class Average",
        "Retention Rate",
        "Conversion Rate",
        "Churn Rate",
        "Fill Rate",
        "Occupancy Rate",
        "Discount Percentage",
    }
)

_NOISE = re.compile(r"[₹$€£,\s]")
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def extract_value(raw: str | None) -> float | None:
    """Parse a cell into a float, or ``None`` when it holds no number.

    Currency symbols, thousands separators and whitespace are removed first.
    Trailing text after the leading number is ignored, so ``"45%"`` reads as 45.
    """
    if raw is None:
        return None
    cleaned = _NOISE.sub("", raw)
    match = _NUMBER_PREFIX.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))


def is_average_metric(metric: str, average_metrics: Iterable[str] | None = None) -> bool:
    """Return True when ``metric`` is combined by mean rather than sum."""
    policy = AVERAGE_METRICS if average_metrics is None else frozenset(average_metrics)
    return metric in policy


def _to_array(raw_values: Iterable[str]) -> FloatArray:
    """Extract cells into a float array holding NaN for absent values."""
    parsed = (extract_value(raw) for raw in raw_values)
    return cast(
        FloatArray,
        np.fromiter((np.nan if value is None else value for value in parsed), dtype=float),
    )


def combine(raw_values: Iterable[str], *, average: bool) -> float:
    """Reduce raw cells with the sum or mean-of-positives policy."""
    values = _to_array(raw_values)
    if average:
        present = values[~np.isnan(values)]
        positive = present[present > 0]
        if positive.size == 0:
            return 0.0
        return float(positive.mean())
    return float(np.nansum(values))


def aggregate(
    records: Iterable[MetricRecord],
    period_key: str,
    metric: str,
    *,
    average_metrics: Iterable[str] | None = None,
) -> float:
    """Aggregate one period column over a group of records."""
    return combine(
        (record.value(period_key) for record in records),
        average=is_average_metric(metric, average_metrics),
    )


def grand_total(
    records: Iterable[MetricRecord],
    metric: str,
    *,
    average_metrics: Iterable[str] | None = None,
) -> float:
    """Aggregate the precomputed ``total`` column over a group of records."""
    return combine(
        (record.total for record in records),
        average=is_average_metric(metric, average_metrics),
    )


def row_value(record: MetricRecord, period_key: str) -> float | None:
    """Extract a single record's cell for a period."""
    return extract_value(record.value(period_key))


__all__ = [
    "AVERAGE_METRICS",
    "aggregate",
    "combine",
    "extract_value",
    "grand_total",
    "is_average_metric",
    "row_value",
]
