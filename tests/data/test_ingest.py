"""Unit tests for the data ingestor."""

import csv

import pytest
import requests

from studio_metrics.data import parser
from studio_metrics.data.client import ExportNotFoundError
from studio_metrics.data.ingest import DatasetLoadError, MetricsDatasetBuilder
from studio_metrics.data.layouts import CLIENT_LAYOUT, STUDIO_LAYOUT, TRAINER_LAYOUT
from tests.conftest import CannedResponse


def test_load_dataset_fetches_layout_file(mock_http_client, studio_csv):
    client = mock_http_client({"Metrics.csv": CannedResponse(text=studio_csv)})
    builder = MetricsDatasetBuilder(layout=STUDIO_LAYOUT, client=client)

    dataset = builder.load_dataset()

    assert dataset.layout == "studio"
    assert len(dataset) == 7
    assert dataset.metrics() == ["Gross Sales", "Retention Rate"]
    client.fetch_csv.assert_called_once_with("Metrics.csv")


def test_load_dataset_honours_filename_override(mock_http_client, trainer_csv):
    client = mock_http_client({"archive.csv": CannedResponse(text=trainer_csv)})
    dataset = MetricsDatasetBuilder(layout=TRAINER_LAYOUT, client=client).load_dataset(
        filename="archive.csv"
    )
    assert dataset.layout == "trainer"
    assert len(dataset) == 3


def test_load_dataset_wraps_http_errors(mock_http_client):
    client = mock_http_client(
        {"Metrics.csv": CannedResponse(text="", exception=requests.ConnectionError("refused"))}
    )
    builder = MetricsDatasetBuilder(client=client)
    with pytest.raises(DatasetLoadError, match="Metrics.csv"):
        builder.load_dataset()


def test_load_from_path(tmp_path, studio_csv):
    path = tmp_path / "Metrics.csv"
    path.write_text(studio_csv, encoding="utf-8")
    dataset = MetricsDatasetBuilder().load_from_path(path)
    assert len(dataset) == 7


def test_load_from_missing_path(tmp_path):
    with pytest.raises(DatasetLoadError, match="Failed to read"):
        MetricsDatasetBuilder().load_from_path(tmp_path / "missing.csv")


def test_header_only_export_is_empty():
    dataset = MetricsDatasetBuilder().load_from_text("Location,Category,Product\n")
    assert len(dataset) == 0
    assert dataset.metrics() == []


def test_csv_errors_become_load_errors(monkeypatch):
    def broken(text, layout):
        raise csv.Error("unexpected end of data")

    monkeypatch.setattr(parser, "parse_records", broken)
    with pytest.raises(DatasetLoadError, match="Malformed CSV"):
        MetricsDatasetBuilder().load_from_text("x")


def test_close_closes_client(mock_http_client):
    client = mock_http_client({})
    MetricsDatasetBuilder(client=client).close()
    client.close.assert_called_once()


def test_load_from_path_drops_byte_order_mark(tmp_path, studio_csv):
    path = tmp_path / "Metrics.csv"
    path.write_text("\ufeff" + studio_csv, encoding="utf-8")
    dataset = MetricsDatasetBuilder().load_from_path(path)
    assert len(dataset) == 7
    assert dataset.records[0].location == "Kwality House"


def test_html_page_instead_of_export_fails_load(mock_http_client):
    client = mock_http_client(
        {
            "ClientMetrics.csv": CannedResponse(
                text="", exception=ExportNotFoundError("returned an HTML page")
            )
        }
    )
    builder = MetricsDatasetBuilder(layout=CLIENT_LAYOUT, client=client)
    with pytest.raises(DatasetLoadError, match="ClientMetrics.csv"):
        builder.load_dataset()
