"""Period-over-period growth indicators."""

import math
from enum import Enum

from attrs import define

from .aggregation import extract_value

# Changes smaller than this many percentage points read as flat.
NEUTRAL_THRESHOLD = 0.1


class Trend(str, Enum):
    """Direction of a growth indicator."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@define(slots=True, frozen=True)
class Growth:
    """Signed percentage change between a period and its reference period."""

    change: float
    trend: Trend

    @property
    def magnitude(self) -> float:
        """Absolute change rounded to one decimal; zero when neutral."""
        if self.trend is Trend.NEUTRAL:
            return 0.0
        return round(abs(self.change), 1)

    @property
    def label(self) -> str:
        if self.trend is Trend.NEUTRAL:
            return "0%"
        return f"{self.magnitude:.1f}%"


def _coerce(value: float | str | None) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        return extract_value(value)
    number = float(value)
    if math.isnan(number):
        return None
    return number


def classify(change: float) -> Trend:
    """Map a percentage change onto its trend."""
    if abs(change) < NEUTRAL_THRESHOLD:
        return Trend.NEUTRAL
    if change > 0:
        return Trend.POSITIVE
    return Trend.NEGATIVE


def compute_growth(
    current: float | str | None,
    previous: float | str | None,
) -> Growth | None:
    """Return the change from ``previous`` to ``current``, or ``None``.

    No indicator exists when either side holds no number or the reference
    value is zero.
    """
    current_value = _coerce(current)
    previous_value = _coerce(previous)
    if current_value is None or previous_value is None or previous_value == 0:
        return None
    change = (current_value - previous_value) / previous_value * 100
    return Growth(change=change, trend=classify(change))


__all__ = ["Growth", "NEUTRAL_THRESHOLD", "Trend", "classify", "compute_growth"]
