"""Alternate column groupings over a period catalog.

Every view re-indexes the same catalog; none of them computes values. The
chronological, year-on-year and quarterly views cover each period exactly
once. The comparative view repeats the three most recent periods under two
headings: its "best" slice is not ranked by value.
"""

from collections.abc import Sequence
from enum import Enum

from attrs import define, field

from ..periods import PeriodDescriptor

COMPARATIVE_SLICE = 3


class ViewMode(str, Enum):
    """Column arrangements offered for a pivot table."""

    CHRONOLOGICAL = "chronological"
    YEAR_ON_YEAR = "year-on-year"
    QUARTERLY = "quarterly"
    COMPARATIVE = "comparative"

    @property
    def shows_growth(self) -> bool:
        """Whether growth indicators accompany this view's cells."""
        return self in (ViewMode.CHRONOLOGICAL, ViewMode.YEAR_ON_YEAR)


@define(slots=True, frozen=True)
class ColumnGroup:
    """A header spanning a run of period columns."""

    label: str
    periods: tuple[PeriodDescriptor, ...] = field(converter=tuple)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(period.key for period in self.periods)


def chronological(catalog: Sequence[PeriodDescriptor]) -> tuple[ColumnGroup, ...]:
    """Keep catalog order, with one header per run of the same year."""
    groups: list[ColumnGroup] = []
    run: list[PeriodDescriptor] = []
    for period in catalog:
        if run and run[-1].year != period.year:
            groups.append(ColumnGroup(str(run[0].year), run))
            run = []
        run.append(period)
    if run:
        groups.append(ColumnGroup(str(run[0].year), run))
    return tuple(groups)


def _month_cycle(latest_month: int) -> list[int]:
    """Months from ``latest_month`` wrapping backward through the year."""
    return [((latest_month - 1 - offset) % 12) + 1 for offset in range(12)]


def year_on_year(catalog: Sequence[PeriodDescriptor]) -> tuple[ColumnGroup, ...]:
    """Group by calendar month, newest year first within each month."""
    if not catalog:
        return ()
    by_month: dict[int, list[PeriodDescriptor]] = {}
    for period in catalog:
        by_month.setdefault(period.month, []).append(period)
    groups: list[ColumnGroup] = []
    for month in _month_cycle(catalog[0].month):
        members = by_month.get(month)
        if not members:
            continue
        ordered = sorted(members, key=lambda period: period.year, reverse=True)
        groups.append(ColumnGroup(ordered[0].month_name, ordered))
    return tuple(groups)


def quarterly(catalog: Sequence[PeriodDescriptor]) -> tuple[ColumnGroup, ...]:
    """Group by (year, quarter), newest quarter and newest month first."""
    by_quarter: dict[tuple[int, int], list[PeriodDescriptor]] = {}
    for period in catalog:
        by_quarter.setdefault((period.year, period.quarter), []).append(period)
    groups: list[ColumnGroup] = []
    for year, quarter in sorted(by_quarter, reverse=True):
        ordered = sorted(by_quarter[(year, quarter)], key=lambda period: period.month, reverse=True)
        groups.append(ColumnGroup(f"Q{quarter} {year}", ordered))
    return tuple(groups)


def comparative(catalog: Sequence[PeriodDescriptor]) -> tuple[ColumnGroup, ...]:
    """Show the most recent periods twice, as "best" and "recent" slices."""
    recent = tuple(catalog[:COMPARATIVE_SLICE])
    return (
        ColumnGroup(f"Best {COMPARATIVE_SLICE} Months", recent),
        ColumnGroup(f"Recent {COMPARATIVE_SLICE} Months", recent),
    )


_COMPOSERS = {
    ViewMode.CHRONOLOGICAL: chronological,
    ViewMode.YEAR_ON_YEAR: year_on_year,
    ViewMode.QUARTERLY: quarterly,
    ViewMode.COMPARATIVE: comparative,
}


def compose_view(
    mode: ViewMode | str,
    catalog: Sequence[PeriodDescriptor],
) -> tuple[ColumnGroup, ...]:
    """Arrange ``catalog`` into the column groups of ``mode``."""
    return _COMPOSERS[ViewMode(mode)](catalog)


def flatten(groups: Sequence[ColumnGroup]) -> tuple[PeriodDescriptor, ...]:
    """Concatenate the periods of each group in display order."""
    return tuple(period for group in groups for period in group.periods)


def reference_periods(
    mode: ViewMode | str,
    catalog: Sequence[PeriodDescriptor],
) -> dict[str, PeriodDescriptor | None]:
    """Map each period key to the period its growth is measured against.

    Chronological compares with the next-older catalog entry; year-on-year
    with the same month one step older in its group. Other views carry no
    growth, so every reference is ``None``.
    """
    view = ViewMode(mode)
    references: dict[str, PeriodDescriptor | None] = {period.key: None for period in catalog}
    if view is ViewMode.CHRONOLOGICAL:
        for current, previous in zip(catalog, catalog[1:]):
            references[current.key] = previous
    elif view is ViewMode.YEAR_ON_YEAR:
        for group in year_on_year(catalog):
            for current, previous in zip(group.periods, group.periods[1:]):
                references[current.key] = previous
    return references


__all__ = [
    "COMPARATIVE_SLICE",
    "ColumnGroup",
    "ViewMode",
    "chronological",
    "comparative",
    "compose_view",
    "flatten",
    "quarterly",
    "reference_periods",
    "year_on_year",
]
