"""Compact Indian-unit formatting for metric values.

Strings are read the way the aggregation engine reads cells: currency
symbols and separators are dropped and the leading number is used, so
``"1,500 INR"`` formats as 1,500. Small values keep ``en-IN`` digit grouping.

Metric names containing the word "rate" are formatted as percentages, not
only names containing "percentage". This widens the web dashboard's
rule, which showed rates such as "Retention Rate" as plain numbers.
"""

import math
import re

from ..pivot.aggregation import extract_value

CURRENCY_SYMBOL = "₹"
PLACEHOLDER = "-"

# (threshold, suffix) from largest to smallest: crore, lakh, thousand.
_SCALES = (
    (10_000_000, "Cr"),
    (100_000, "L"),
    (1_000, "K"),
)

_CURRENCY_HINTS = frozenset({"sales", "amount", "vat", "value"})
_PERCENT_HINTS = frozenset({"percentage", "rate"})
_WORD = re.compile(r"[a-z]+")


def _coerce(value: float | str | None) -> float:
    """Parse strings by their leading number; NaN when there is none."""
    if value is None:
        return math.nan
    if isinstance(value, str):
        parsed = extract_value(value)
        return math.nan if parsed is None else parsed
    return float(value)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _group_en_in(whole: int) -> str:
    """Indian digit grouping: the last three digits, then pairs (12,34,567)."""
    digits = str(whole)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    return ",".join([head, *pairs, tail])


def _abbreviate(magnitude: float) -> str:
    for threshold, suffix in _SCALES:
        if magnitude >= threshold:
            return f"{magnitude / threshold:.1f}{suffix}"
    return _group_en_in(_round_half_up(magnitude))


def format_currency(value: float | str | None) -> str:
    """Render rupees with Cr/L/K suffixes, e.g. ``12345678`` -> ``₹1.2Cr``."""
    number = _coerce(value)
    if math.isnan(number) or number == 0:
        return f"{CURRENCY_SYMBOL}0"
    sign = "-" if number < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{_abbreviate(abs(number))}"


def format_number(value: float | str | None) -> str:
    """Render a count with Cr/L/K suffixes and no currency symbol."""
    number = _coerce(value)
    if math.isnan(number):
        return "0"
    sign = "-" if number < 0 else ""
    return f"{sign}{_abbreviate(abs(number))}"


def format_percentage(value: float | str | None) -> str:
    """Render a percentage with one decimal place."""
    number = _coerce(value)
    if math.isnan(number):
        return "0%"
    return f"{number:.1f}%"


def formatter_for_metric(metric: str):
    """Pick the formatter implied by a metric's name."""
    words = set(_WORD.findall(metric.lower()))
    if words & _CURRENCY_HINTS:
        return format_currency
    if words & _PERCENT_HINTS or "%" in metric:
        return format_percentage
    return format_number


def format_metric_value(value: float | None, metric: str) -> str:
    """Format a cell for display, using the placeholder for empty or zero cells."""
    if value is None or math.isnan(value) or value == 0:
        return PLACEHOLDER
    return formatter_for_metric(metric)(value)


__all__ = [
    "CURRENCY_SYMBOL",
    "PLACEHOLDER",
    "format_currency",
    "format_metric_value",
    "format_number",
    "format_percentage",
    "formatter_for_metric",
]
