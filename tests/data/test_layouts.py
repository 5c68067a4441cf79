"""Unit tests for the export layouts."""

import pytest

from studio_metrics.data.layouts import (
    CLIENT_LAYOUT,
    LAYOUTS,
    STUDIO_LAYOUT,
    TRAINER_LAYOUT,
    DatasetLayout,
    get_layout,
)
from studio_metrics.data.models import StudioMetricRecord
from studio_metrics.periods import build_month_catalog


def test_column_positions():
    assert STUDIO_LAYOUT.column_count == 3 + 12 + 2
    assert STUDIO_LAYOUT.total_index == 15
    assert STUDIO_LAYOUT.metric_index == 16
    assert TRAINER_LAYOUT.total_index == 21
    assert CLIENT_LAYOUT.column_count == 23


def test_studio_columns_run_january_to_december():
    assert STUDIO_LAYOUT.period_columns[0] == "jan"
    assert STUDIO_LAYOUT.period_columns[-1] == "dec"
    assert STUDIO_LAYOUT.period_keys[0] == "dec"


def test_rolling_layouts_share_catalog():
    assert TRAINER_LAYOUT.period_keys == CLIENT_LAYOUT.period_keys
    assert TRAINER_LAYOUT.period_keys[0] == "jun-2025"
    assert TRAINER_LAYOUT.period_keys[-1] == "jan-2024"
    assert TRAINER_LAYOUT.period_columns == TRAINER_LAYOUT.period_keys


def test_build_record_maps_positions():
    cells = ["Kwality House", "Memberships", "Annual", *map(str, range(1, 13)), "78", "Gross Sales"]
    record = STUDIO_LAYOUT.build_record(cells)
    assert isinstance(record, StudioMetricRecord)
    assert record.value("jan") == "1"
    assert record.value("dec") == "12"
    assert record.total == "78"
    assert record.metric == "Gross Sales"


def test_get_layout():
    assert get_layout(" Trainer ") is TRAINER_LAYOUT
    assert set(LAYOUTS) == {"studio", "trainer", "client"}
    with pytest.raises(KeyError, match="Unknown layout"):
        get_layout("weekly")


def test_layout_validates_dimensions():
    with pytest.raises(ValueError, match="dimensions"):
        DatasetLayout(
            name="studio",
            filename="Metrics.csv",
            dimensions=("location", "trainer", "is_new"),
            catalog=build_month_catalog(2024, 12, 12),
            location_dimension="location",
            label_dimension="trainer",
            default_group_by="trainer",
        )


def test_layout_validates_period_columns():
    with pytest.raises(ValueError, match="period columns"):
        DatasetLayout(
            name="studio",
            filename="Metrics.csv",
            dimensions=("location", "category", "product"),
            catalog=build_month_catalog(2024, 12, 12),
            location_dimension="location",
            label_dimension="product",
            default_group_by="category",
            period_columns=("jan", "feb"),
        )
