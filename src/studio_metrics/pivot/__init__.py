"""Grouping, aggregation, growth, and view composition for metric pivots."""

from .aggregation import AVERAGE_METRICS, aggregate, extract_value, grand_total, row_value
from .grouping import UNCATEGORIZED, group_records, partition_records
from .growth import Growth, Trend, compute_growth
from .table import PivotCell, PivotRow, PivotTable, RowKind, SelectionState, build_pivot
from .views import ColumnGroup, ViewMode, compose_view, reference_periods

__all__ = [
    "AVERAGE_METRICS",
    "ColumnGroup",
    "Growth",
    "PivotCell",
    "PivotRow",
    "PivotTable",
    "RowKind",
    "SelectionState",
    "Trend",
    "UNCATEGORIZED",
    "ViewMode",
    "aggregate",
    "build_pivot",
    "compose_view",
    "compute_growth",
    "extract_value",
    "grand_total",
    "group_records",
    "partition_records",
    "reference_periods",
    "row_value",
]
