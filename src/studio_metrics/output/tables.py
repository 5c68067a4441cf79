"""Turn pivot tables into pandas frames for display and export."""

from pathlib import Path

import pandas as pd

from ..pivot.table import PivotCell, PivotTable, RowKind
from .formatters import format_metric_value


def _display_label(row_label: str, kind: str) -> str:
    if kind == RowKind.RECORD.value:
        return f"  {row_label}"
    if kind == RowKind.TOTAL.value:
        return row_label.upper()
    return row_label


def _trend_marker(trend: str) -> str:
    return {"positive": "▲", "negative": "▼"}.get(trend, "=")


def pivot_frame(
    table: PivotTable,
    *,
    formatted: bool = True,
    show_growth: bool | None = None,
) -> pd.DataFrame:
    """Build a frame with one column per displayed period plus a total.

    With ``formatted`` the cells hold display strings; growth labels are
    appended as ``▲``/``▼``/``=`` markers. ``show_growth`` defaults to
    whether the table's view carries growth at all.
    """
    if show_growth is None:
        show_growth = table.view.shows_growth

    def render(cell: PivotCell) -> str:
        text = format_metric_value(cell.value, table.metric)
        if show_growth and cell.growth is not None:
            text = f"{text} {_trend_marker(cell.growth.trend.value)}{cell.growth.label}"
        return text

    labels = table.column_labels()
    rows = table.to_rows(render if formatted else None)
    frame = pd.DataFrame(rows, columns=["row", "kind", "group", *labels, "total"])
    frame.insert(
        0,
        table.dimension,
        [_display_label(row["row"], row["kind"]) for row in rows],
    )
    if formatted:
        frame["total"] = [format_metric_value(row["total"], table.metric) for row in rows]
    frame = frame.drop(columns=["row", "kind", "group"]).rename(columns={"total": "Total"})
    return frame[[table.dimension, *labels, "Total"]]


def write_csv(frame: pd.DataFrame, path: Path) -> None:
    """Write a frame to CSV without the index."""
    frame.to_csv(path, index=False)


def write_parquet(frame: pd.DataFrame, path: Path) -> None:
    """Write a frame to parquet (requires pyarrow or fastparquet)."""
    frame.to_parquet(path, index=False)


__all__ = ["pivot_frame", "write_csv", "write_parquet"]
