"""Parsers for metric CSV exports."""

import csv
import io
from collections.abc import Iterable

from .layouts import DatasetLayout
from .models import MetricRecord


def _read_rows(text: str) -> Iterable[list[str]]:
    """Yield cell lists from a comma-separated payload, skipping blank lines."""
    buffer = io.StringIO(text.strip())
    reader = csv.reader(buffer)
    for row in reader:
        # Trailing blank lines and stray separators carry no data.
        if all(cell.strip() == "" for cell in row):
            continue
        yield row


def parse_records(text: str, layout: DatasetLayout) -> list[MetricRecord]:
    """Parse an export into records of the layout's variant.

    The first line is a header and is ignored; cells are read by position.
    Short rows are padded with empty strings rather than rejected.
    """
    rows = iter(_read_rows(text))
    next(rows, None)
    return [layout.build_record(row) for row in rows]


__all__ = ["parse_records"]
