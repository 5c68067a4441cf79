"""Reporting period descriptors and catalog construction."""

import calendar
from collections.abc import Sequence
from typing import Literal

from attrs import define, field

KeyStyle = Literal["month", "month-year"]


def _valid_month(instance: object, attribute: object, value: int) -> None:
    """Reject month numbers outside 1..12."""
    if not 1 <= value <= 12:
        raise ValueError(f"Month must lie in 1..12, got {value!r}.")


@define(slots=True, frozen=True)
class PeriodDescriptor:
    """One reporting column: the record field it reads plus calendar position."""

    key: str
    label: str
    year: int
    month: int = field(validator=_valid_month)

    @property
    def quarter(self) -> int:
        """Calendar quarter (1-4) the month falls in."""
        return (self.month - 1) // 3 + 1

    @property
    def month_name(self) -> str:
        """Three-letter month abbreviation, e.g. ``Jun``."""
        return calendar.month_abbr[self.month]


def month_key(year: int, month: int, style: KeyStyle = "month") -> str:
    """Return the record field name used for a month.

    ``month`` style yields ``jan``; ``month-year`` style yields ``jan-2025``.
    """
    abbr = calendar.month_abbr[month].lower()
    if style == "month":
        return abbr
    return f"{abbr}-{year}"


def month_label(year: int, month: int, style: KeyStyle = "month") -> str:
    """Return the column header shown for a month."""
    abbr = calendar.month_abbr[month]
    if style == "month":
        return abbr
    return f"{abbr} {year}"


def _step_back(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def build_month_catalog(
    latest_year: int,
    latest_month: int,
    count: int,
    *,
    key_style: KeyStyle = "month",
) -> tuple[PeriodDescriptor, ...]:
    """Build ``count`` contiguous months ending at the given month, newest first."""
    if count <= 0:
        raise ValueError("count must be a positive integer.")
    if not 1 <= latest_month <= 12:
        raise ValueError(f"Month must lie in 1..12, got {latest_month!r}.")
    periods: list[PeriodDescriptor] = []
    year, month = latest_year, latest_month
    for _ in range(count):
        periods.append(
            PeriodDescriptor(
                key=month_key(year, month, key_style),
                label=month_label(year, month, key_style),
                year=year,
                month=month,
            )
        )
        year, month = _step_back(year, month)
    keys = [period.key for period in periods]
    if len(set(keys)) != len(keys):
        raise ValueError(
            f"{key_style!r} keys repeat across {count} months; use year-qualified keys."
        )
    return tuple(periods)


def catalog_keys(catalog: Sequence[PeriodDescriptor]) -> tuple[str, ...]:
    """Return the period keys of a catalog in catalog order."""
    return tuple(period.key for period in catalog)


__all__ = [
    "KeyStyle",
    "PeriodDescriptor",
    "build_month_catalog",
    "catalog_keys",
    "month_key",
    "month_label",
]
