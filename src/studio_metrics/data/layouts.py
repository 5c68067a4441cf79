"""Fixed column layouts for each supported metrics export."""

from collections.abc import Sequence

from attrs import define, field

from ..periods import PeriodDescriptor, build_month_catalog, catalog_keys, month_key
from .files import LAYOUT_FILES
from .models import MetricRecord, record_type_for

# Reporting window of the 18-month exports.
ROLLING_LATEST = (2025, 6)
ROLLING_MONTHS = 18

# The single-year studio export.
STUDIO_YEAR = 2024


@define(slots=True, frozen=True)
class DatasetLayout:
    """Hard-mapped CSV column positions for one export variant.

    Columns appear as: identity dimensions, one column per period (in
    ``period_columns`` order), the row total, then the metric name.
    """

    name: str
    filename: str
    dimensions: tuple[str, ...] = field(converter=tuple)
    catalog: tuple[PeriodDescriptor, ...] = field(converter=tuple)
    location_dimension: str
    label_dimension: str
    default_group_by: str
    period_columns: tuple[str, ...] = field(converter=tuple)

    @period_columns.default
    def _catalog_order(self) -> tuple[str, ...]:
        return catalog_keys(self.catalog)

    def __attrs_post_init__(self) -> None:
        if sorted(self.period_columns) != sorted(self.period_keys):
            raise ValueError(f"Layout {self.name!r} period columns do not match its catalog.")
        record_cls = self.record_type
        if self.dimensions != record_cls.DIMENSIONS:
            raise ValueError(
                f"Layout {self.name!r} dimensions {self.dimensions} do not match "
                f"{record_cls.__name__}.DIMENSIONS {record_cls.DIMENSIONS}."
            )
        for name in (self.location_dimension, self.label_dimension, self.default_group_by):
            if name not in self.dimensions:
                raise ValueError(f"Layout {self.name!r} has no dimension {name!r}.")

    @property
    def record_type(self) -> type[MetricRecord]:
        """Record variant produced for this layout."""
        return record_type_for(self.name)

    @property
    def period_keys(self) -> tuple[str, ...]:
        """Period field names in catalog order, newest first."""
        return catalog_keys(self.catalog)

    @property
    def total_index(self) -> int:
        """Zero-based column index of the precomputed row total."""
        return len(self.dimensions) + len(self.catalog)

    @property
    def metric_index(self) -> int:
        """Zero-based column index of the metric name."""
        return self.total_index + 1

    @property
    def column_count(self) -> int:
        return self.metric_index + 1

    def build_record(self, cells: Sequence[str]) -> MetricRecord:
        """Map one row of cells onto the layout's record variant.

        Missing trailing cells default to the empty string.
        """

        def cell(index: int) -> str:
            if index < len(cells):
                return cells[index] or ""
            return ""

        offset = len(self.dimensions)
        values = {key: cell(offset + index) for index, key in enumerate(self.period_columns)}
        dimensions = {name: cell(index) for index, name in enumerate(self.dimensions)}
        return self.record_type(
            metric=cell(self.metric_index),
            values=values,
            total=cell(self.total_index),
            **dimensions,
        )


def _rolling_catalog() -> tuple[PeriodDescriptor, ...]:
    year, month = ROLLING_LATEST
    return build_month_catalog(year, month, ROLLING_MONTHS, key_style="month-year")


STUDIO_LAYOUT = DatasetLayout(
    name="studio",
    filename=LAYOUT_FILES["studio"],
    dimensions=("location", "category", "product"),
    catalog=build_month_catalog(STUDIO_YEAR, 12, 12, key_style="month"),
    location_dimension="location",
    label_dimension="product",
    default_group_by="category",
    period_columns=tuple(month_key(STUDIO_YEAR, month) for month in range(1, 13)),
)

TRAINER_LAYOUT = DatasetLayout(
    name="trainer",
    filename=LAYOUT_FILES["trainer"],
    dimensions=("location", "trainer", "is_new"),
    catalog=_rolling_catalog(),
    location_dimension="location",
    label_dimension="is_new",
    default_group_by="trainer",
)

CLIENT_LAYOUT = DatasetLayout(
    name="client",
    filename=LAYOUT_FILES["client"],
    dimensions=("first_visit_location", "membership", "is_new"),
    catalog=_rolling_catalog(),
    location_dimension="first_visit_location",
    label_dimension="is_new",
    default_group_by="membership",
)

LAYOUTS: dict[str, DatasetLayout] = {
    layout.name: layout for layout in (STUDIO_LAYOUT, TRAINER_LAYOUT, CLIENT_LAYOUT)
}


def get_layout(name: str) -> DatasetLayout:
    """Look up a layout by name."""
    try:
        return LAYOUTS[name.strip().lower()]
    except KeyError:
        valid = ", ".join(sorted(LAYOUTS))
        raise KeyError(f"Unknown layout {name!r}; expected one of {valid}.") from None


__all__ = [
    "CLIENT_LAYOUT",
    "DatasetLayout",
    "LAYOUTS",
    "STUDIO_LAYOUT",
    "TRAINER_LAYOUT",
    "get_layout",
]
