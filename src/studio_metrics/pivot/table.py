"""Assemble grouped, growth-annotated pivot tables from a dataset."""

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from enum import Enum

import structlog
from attrs import define, evolve, field

from ..data.layouts import DatasetLayout, get_layout
from ..data.models import Dataset, MetricRecord
from ..periods import PeriodDescriptor
from .aggregation import aggregate, extract_value, grand_total, row_value
from .grouping import group_records
from .growth import Growth, compute_growth
from .views import ColumnGroup, ViewMode, compose_view, flatten, reference_periods

logger = structlog.get_logger(__name__)


class RowKind(str, Enum):
    GROUP = "group"
    RECORD = "record"
    TOTAL = "total"


@define(slots=True, frozen=True)
class SelectionState:
    """What the reader is looking at: metric, grouping, view, and expansion.

    ``dimension`` defaults to the layout's usual grouping when left ``None``.
    """

    metric: str
    dimension: str | None = None
    view: ViewMode = field(default=ViewMode.CHRONOLOGICAL, converter=ViewMode)
    expanded: frozenset[str] = field(factory=frozenset, converter=frozenset)
    expand_all: bool = False
    location: str | None = None

    def is_expanded(self, group: str) -> bool:
        return self.expand_all or group in self.expanded

    def toggle(self, group: str) -> "SelectionState":
        """Return a copy with ``group`` expanded or collapsed."""
        return evolve(self, expanded=self.expanded ^ {group})


@define(slots=True, frozen=True)
class PivotCell:
    """One numeric cell plus its growth against the reference period."""

    period: str
    value: float | None
    growth: Growth | None = None

    @property
    def is_negative(self) -> bool:
        return self.value is not None and self.value < 0


@define(slots=True, frozen=True)
class PivotRow:
    label: str
    kind: RowKind
    cells: tuple[PivotCell, ...] = field(converter=tuple)
    total: float | None
    group: str | None = None

    def cell(self, period_key: str) -> PivotCell:
        """Return the first cell for ``period_key``."""
        for cell in self.cells:
            if cell.period == period_key:
                return cell
        raise KeyError(period_key)


@define(slots=True, frozen=True)
class PivotTable:
    """Rows of a pivot in display order with their column grouping."""

    metric: str
    dimension: str
    view: ViewMode
    column_groups: tuple[ColumnGroup, ...] = field(converter=tuple)
    rows: tuple[PivotRow, ...] = field(converter=tuple)

    @property
    def columns(self) -> tuple[PeriodDescriptor, ...]:
        """Period columns in display order, repeated where the view repeats them."""
        return flatten(self.column_groups)

    def column_labels(self) -> list[str]:
        """Unique, human-readable header per displayed column.

        Periods shown more than once are prefixed with their group label.
        """
        counts = Counter(period.key for period in self.columns)
        labels: list[str] = []
        for group in self.column_groups:
            for period in group.periods:
                if counts[period.key] > 1:
                    labels.append(f"{group.label} | {period.label}")
                else:
                    labels.append(period.label)
        return labels

    def group_keys(self) -> list[str]:
        return [row.label for row in self.rows if row.kind is RowKind.GROUP]

    def to_rows(
        self,
        render: Callable[[PivotCell], object] | None = None,
    ) -> list[dict[str, object]]:
        """Flatten into one mapping per row, keyed by column label.

        Cells hold their numeric value unless ``render`` maps each
        :class:`PivotCell` to something else, e.g. a display string.
        """
        labels = self.column_labels()
        flattened: list[dict[str, object]] = []
        for row in self.rows:
            entry: dict[str, object] = {
                "row": row.label,
                "kind": row.kind.value,
                "group": row.group,
            }
            for label, cell in zip(labels, row.cells):
                entry[label] = cell.value if render is None else render(cell)
            entry["total"] = row.total
            flattened.append(entry)
        return flattened


def _cells(
    columns: Sequence[PeriodDescriptor],
    values: dict[str, float | None],
    references: dict[str, PeriodDescriptor | None],
) -> list[PivotCell]:
    cells: list[PivotCell] = []
    for period in columns:
        reference = references.get(period.key)
        growth = None
        if reference is not None:
            growth = compute_growth(values.get(period.key), values.get(reference.key))
        cells.append(PivotCell(period=period.key, value=values.get(period.key), growth=growth))
    return cells


def _aggregate_row(
    label: str,
    kind: RowKind,
    records: Sequence[MetricRecord],
    metric: str,
    columns: Sequence[PeriodDescriptor],
    catalog: Sequence[PeriodDescriptor],
    references: dict[str, PeriodDescriptor | None],
    average_metrics: Iterable[str] | None,
    group: str | None,
) -> PivotRow:
    values: dict[str, float | None] = {
        period.key: aggregate(records, period.key, metric, average_metrics=average_metrics)
        for period in catalog
    }
    return PivotRow(
        label=label,
        kind=kind,
        cells=_cells(columns, values, references),
        total=grand_total(records, metric, average_metrics=average_metrics),
        group=group,
    )


def _record_row(
    record: MetricRecord,
    label: str,
    group: str,
    columns: Sequence[PeriodDescriptor],
    catalog: Sequence[PeriodDescriptor],
    references: dict[str, PeriodDescriptor | None],
) -> PivotRow:
    values = {period.key: row_value(record, period.key) for period in catalog}
    return PivotRow(
        label=label,
        kind=RowKind.RECORD,
        cells=_cells(columns, values, references),
        total=extract_value(record.total),
        group=group,
    )


def build_pivot(
    dataset: Dataset,
    selection: SelectionState,
    *,
    layout: DatasetLayout | None = None,
    average_metrics: Iterable[str] | None = None,
) -> PivotTable:
    """Group, aggregate, and annotate ``dataset`` for the current selection.

    Produces a row per group, member rows for expanded groups, and a closing
    totals row across every record of the metric.
    """
    layout = layout or get_layout(dataset.layout)
    dimension = selection.dimension or layout.default_group_by
    if dimension not in layout.dimensions:
        raise KeyError(
            f"Layout {layout.name!r} cannot group by {dimension!r}; "
            f"expected one of {', '.join(layout.dimensions)}."
        )
    if average_metrics is not None:
        average_metrics = frozenset(average_metrics)

    source = dataset
    if selection.location is not None:
        source = dataset.where(layout.location_dimension, selection.location)

    catalog = layout.catalog
    column_groups = compose_view(selection.view, catalog)
    columns = flatten(column_groups)
    references = reference_periods(selection.view, catalog)
    groups = group_records(source.records, selection.metric, dimension)

    rows: list[PivotRow] = []
    for key, members in groups.items():
        rows.append(
            _aggregate_row(
                key,
                RowKind.GROUP,
                members,
                selection.metric,
                columns,
                catalog,
                references,
                average_metrics,
                group=key,
            )
        )
        if not selection.is_expanded(key):
            continue
        for record in members:
            label = record.dimension(layout.label_dimension) or record.metric
            rows.append(_record_row(record, label, key, columns, catalog, references))

    if groups:
        matching = [record for members in groups.values() for record in members]
        rows.append(
            _aggregate_row(
                "TOTAL",
                RowKind.TOTAL,
                matching,
                selection.metric,
                columns,
                catalog,
                references,
                average_metrics,
                group=None,
            )
        )

    logger.debug(
        "pivot.built",
        metric=selection.metric,
        dimension=dimension,
        view=selection.view.value,
        groups=len(groups),
        rows=len(rows),
    )
    return PivotTable(
        metric=selection.metric,
        dimension=dimension,
        view=selection.view,
        column_groups=column_groups,
        rows=rows,
    )


__all__ = [
    "PivotCell",
    "PivotRow",
    "PivotTable",
    "RowKind",
    "SelectionState",
    "build_pivot",
]
