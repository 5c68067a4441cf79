"""HTTP access to the CSV exports published next to the dashboard."""

from urllib.parse import urljoin

import requests
import structlog
from attrs import define, field

from .files import CSV_ENCODING, DEFAULT_BASE_URL, REQUEST_HEADERS

logger = structlog.get_logger(__name__)


def _directory_url(value: str) -> str:
    """Make the base URL name a directory so export files resolve beneath it."""
    value = value.strip()
    return value if value.endswith("/") else f"{value}/"


def _media_type(response: requests.Response) -> str:
    return response.headers.get("Content-Type", "").split(";")[0].strip().lower()


class ExportNotFoundError(requests.HTTPError):
    """The host answered with an HTML page where a CSV export was expected."""


@define(slots=True)
class MetricsHttpClient:
    """Download layout exports from a static file host.

    Single-page dashboard hosts answer unknown paths with their HTML shell and
    a 200 status, so a missing export shows up as ``text/html`` rather than a
    404. Such responses raise :class:`ExportNotFoundError`.
    """

    base_url: str = field(default=DEFAULT_BASE_URL, converter=_directory_url)
    timeout: float = 30.0
    session: requests.Session = field(factory=requests.Session)

    def export_url(self, filename: str) -> str:
        """Absolute URL of an export file under ``base_url``."""
        return urljoin(self.base_url, filename.lstrip("/"))

    def fetch_csv(self, filename: str, *, encoding: str = CSV_ENCODING) -> str:
        """Return the decoded text of one export, without a byte-order mark."""
        url = self.export_url(filename)
        log = logger.bind(filename=filename, url=url)
        log.debug("http.fetch_start", timeout=self.timeout)
        try:
            response = self.session.get(url, timeout=self.timeout, headers=REQUEST_HEADERS)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            log.error("http.fetch_failed", status=status)
            raise
        media_type = _media_type(response)
        if media_type == "text/html":
            log.error("http.not_csv", content_type=media_type)
            raise ExportNotFoundError(
                f"{url} returned an HTML page instead of a CSV export", response=response
            )
        payload = response.content
        log.debug("http.fetch_success", bytes=len(payload), content_type=media_type or None)
        return payload.decode(encoding)

    def close(self) -> None:
        self.session.close()
        logger.debug("http.session_closed")


__all__ = ["ExportNotFoundError", "MetricsHttpClient"]
