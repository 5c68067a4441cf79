"""Formatting and export helpers for metric pivots."""

from .formatters import (
    format_currency,
    format_metric_value,
    format_number,
    format_percentage,
    formatter_for_metric,
)
from .schemas import PivotTableSchema
from .tables import pivot_frame, write_csv, write_parquet

__all__ = [
    "format_currency",
    "format_metric_value",
    "format_number",
    "format_percentage",
    "formatter_for_metric",
    "PivotTableSchema",
    "pivot_frame",
    "write_csv",
    "write_parquet",
]
