"""Unit tests for the period catalog."""

import pytest

from studio_metrics.periods import (
    PeriodDescriptor,
    build_month_catalog,
    catalog_keys,
    month_key,
    month_label,
)


def test_catalog_is_descending_and_contiguous():
    catalog = build_month_catalog(2025, 6, 18, key_style="month-year")
    assert len(catalog) == 18
    assert catalog[0].key == "jun-2025"
    assert catalog[0].label == "Jun 2025"
    assert catalog[-1].key == "jan-2024"
    positions = [period.year * 12 + period.month for period in catalog]
    assert positions == sorted(positions, reverse=True)
    assert all(a - b == 1 for a, b in zip(positions, positions[1:]))


def test_single_year_catalog_uses_bare_month_keys():
    catalog = build_month_catalog(2024, 12, 12)
    assert catalog_keys(catalog)[:3] == ("dec", "nov", "oct")
    assert {period.year for period in catalog} == {2024}


def test_bare_month_keys_cannot_repeat():
    with pytest.raises(ValueError, match="keys repeat"):
        build_month_catalog(2025, 6, 13, key_style="month")


@pytest.mark.parametrize(
    "month, quarter",
    [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (12, 4)],
)
def test_quarter_derivation(month, quarter):
    assert PeriodDescriptor(key="k", label="l", year=2024, month=month).quarter == quarter


def test_invalid_month_rejected():
    with pytest.raises(ValueError):
        PeriodDescriptor(key="k", label="l", year=2024, month=13)
    with pytest.raises(ValueError):
        build_month_catalog(2024, 0, 3)
    with pytest.raises(ValueError):
        build_month_catalog(2024, 5, 0)


def test_key_and_label_styles():
    assert month_key(2025, 1) == "jan"
    assert month_key(2025, 1, "month-year") == "jan-2025"
    assert month_label(2025, 9) == "Sep"
    assert month_label(2025, 9, "month-year") == "Sep 2025"
