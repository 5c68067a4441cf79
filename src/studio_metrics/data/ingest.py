"""Load metric exports into immutable datasets."""

import csv
from pathlib import Path

import requests
import structlog
from attrs import define, field
from structlog.types import FilteringBoundLogger

from . import parser
from .client import MetricsHttpClient
from .files import CSV_ENCODING
from .layouts import STUDIO_LAYOUT, DatasetLayout
from .models import Dataset

logger = structlog.get_logger(__name__)


class DatasetLoadError(RuntimeError):
    """Raised once when an export cannot be fetched, read, or parsed."""


@define(slots=True)
class MetricsDatasetBuilder:
    """Fetch a layout's export and parse it into a :class:`Dataset`."""

    layout: DatasetLayout = STUDIO_LAYOUT
    client: MetricsHttpClient = field(factory=MetricsHttpClient)

    def load_dataset(self, *, filename: str | None = None) -> Dataset:
        """Download the export over HTTP and parse every row."""
        target = filename or self.layout.filename
        log = logger.bind(layout=self.layout.name, filename=target, source="http")
        log.info("ingest.load_start")
        try:
            text = self.client.fetch_csv(target)
        except (requests.RequestException, UnicodeDecodeError) as exc:
            log.error("ingest.load_failed", error=str(exc))
            raise DatasetLoadError(f"Failed to fetch {target}: {exc}") from exc
        return self._parse(text, log)

    def load_from_path(self, path: str | Path, *, encoding: str = CSV_ENCODING) -> Dataset:
        """Read and parse an export stored on the local filesystem."""
        source = Path(path)
        log = logger.bind(layout=self.layout.name, path=str(source), source="file")
        log.info("ingest.load_start")
        try:
            text = source.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            log.error("ingest.load_failed", error=str(exc))
            raise DatasetLoadError(f"Failed to read {source}: {exc}") from exc
        return self._parse(text, log)

    def load_from_text(self, text: str) -> Dataset:
        """Parse an export already held in memory."""
        return self._parse(text, logger.bind(layout=self.layout.name, source="text"))

    def _parse(self, text: str, log: FilteringBoundLogger) -> Dataset:
        try:
            records = parser.parse_records(text, self.layout)
        except csv.Error as exc:
            log.error("ingest.parse_failed", error=str(exc))
            raise DatasetLoadError(f"Malformed CSV export: {exc}") from exc
        dataset = Dataset(layout=self.layout.name, records=records)
        if not dataset.records:
            log.warning("ingest.load_empty", reason="no rows parsed")
        log.info("ingest.load_complete", records=len(dataset), metrics=len(dataset.metrics()))
        return dataset

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()
        logger.debug("ingest.client_closed")


__all__ = ["DatasetLoadError", "MetricsDatasetBuilder"]
