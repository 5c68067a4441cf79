"""Global test configuration and fixtures."""

import csv
import io
from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest
import requests

from studio_metrics.data.client import MetricsHttpClient
from studio_metrics.data.ingest import MetricsDatasetBuilder
from studio_metrics.data.layouts import STUDIO_LAYOUT, TRAINER_LAYOUT

STUDIO_MONTHS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]


def csv_text(header: list[str], rows: list[list[str]]) -> str:
    """Render rows as a comma-separated export with proper quoting."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def studio_row(
    location: str,
    category: str,
    product: str,
    metric: str,
    total: str = "",
    **months: str,
) -> list[str]:
    """Build one studio export row; months not given are left empty."""
    return [location, category, product, *(months.get(m, "") for m in STUDIO_MONTHS), total, metric]


def trainer_row(
    location: str,
    trainer: str,
    is_new: str,
    metric: str,
    total: str = "",
    **months: str,
) -> list[str]:
    """Build one trainer export row; keys use ``jun_2025`` spelling for ``jun-2025``."""
    cells = {key.replace("_", "-"): value for key, value in months.items()}
    return [
        location,
        trainer,
        is_new,
        *(cells.get(key, "") for key in TRAINER_LAYOUT.period_columns),
        total,
        metric,
    ]


STUDIO_HEADER = [
    "Location",
    "Category",
    "Product",
    *(m.title() for m in STUDIO_MONTHS),
    "Total",
    "Metric",
]

STUDIO_ROWS = [
    studio_row("Kwality House", "Memberships", "Annual Plan", "Gross Sales", "2200",
               dec="₹1,200", nov="1000"),
    studio_row("Kwality House", "Memberships", "Monthly Plan", "Gross Sales", "1200",
               dec="300", nov="500", oct="400"),
    studio_row("Kwality House", "Class Packs", "10 Pack", "Gross Sales", "-50", dec="-50"),
    studio_row("Supreme HQ", "", "Drop In", "Gross Sales", "100", dec="100"),
    studio_row("Kwality House", "Memberships", "Annual Plan", "Retention Rate", "80",
               dec="80", nov="0"),
    studio_row("Kwality House", "Memberships", "Monthly Plan", "Retention Rate", "55",
               dec="60", nov="50"),
    studio_row("Supreme HQ", "Class Packs", "10 Pack", "Retention Rate", "40", nov="40"),
]

TRAINER_HEADER = [
    "Location",
    "Trainer",
    "Is New",
    *(period.label for period in TRAINER_LAYOUT.catalog),
    "Total",
    "Metric",
]

TRAINER_ROWS = [
    trainer_row("Kenkere House", "Asha", "New", "Sessions", "310",
                jun_2025="120", may_2025="90", jun_2024="100"),
    trainer_row("Kenkere House", "Asha", "Returning", "Sessions", "60",
                jun_2025="30", jun_2024="30"),
    trainer_row("Supreme HQ", "Vik", "New", "Sessions", "50", jun_2025="50"),
]


@pytest.fixture
def studio_csv() -> str:
    return csv_text(STUDIO_HEADER, STUDIO_ROWS)


@pytest.fixture
def trainer_csv() -> str:
    return csv_text(TRAINER_HEADER, TRAINER_ROWS)


@pytest.fixture
def studio_dataset(studio_csv):
    return MetricsDatasetBuilder(layout=STUDIO_LAYOUT).load_from_text(studio_csv)


@pytest.fixture
def trainer_dataset(trainer_csv):
    return MetricsDatasetBuilder(layout=TRAINER_LAYOUT).load_from_text(trainer_csv)


@dataclass(slots=True)
class CannedResponse:
    """A canned HTTP response for testing."""

    text: str
    exception: requests.RequestException | None = None


@pytest.fixture
def mock_http_client():
    """Return a factory that primes a mocked client with canned responses per filename."""
    mock_client_instance = MagicMock(spec=MetricsHttpClient)

    def prime(responses: dict[str, CannedResponse]):
        def fetch_csv_side_effect(filename: str, *, encoding: str = "utf-8-sig"):
            if filename in responses:
                canned = responses[filename]
                if canned.exception:
                    raise canned.exception
                return canned.text
            raise requests.HTTPError(f"No canned response for filename: {filename}")

        mock_client_instance.fetch_csv.side_effect = fetch_csv_side_effect
        return mock_client_instance

    return prime
