"""Partition metric records into ordered groups."""

from collections.abc import Callable, Iterable

from ..data.models import MetricRecord

UNCATEGORIZED = "Uncategorized"

KeyAccessor = Callable[[MetricRecord], str | None]


def dimension_accessor(name: str) -> KeyAccessor:
    """Return an accessor reading the named dimension of a record."""

    def _accessor(record: MetricRecord) -> str:
        return record.dimension(name)

    _accessor.__name__ = f"dimension_{name}"
    return _accessor


def _resolve(key: str | KeyAccessor) -> KeyAccessor:
    if isinstance(key, str):
        return dimension_accessor(key)
    return key


def partition_records(
    records: Iterable[MetricRecord],
    key: str | KeyAccessor,
) -> dict[str, tuple[MetricRecord, ...]]:
    """Bucket records by ``key`` keeping first-encounter order of the buckets.

    Empty or missing keys fall under :data:`UNCATEGORIZED`.
    """
    accessor = _resolve(key)
    buckets: dict[str, list[MetricRecord]] = {}
    for record in records:
        value = accessor(record)
        label = value.strip() if value else ""
        buckets.setdefault(label or UNCATEGORIZED, []).append(record)
    return {label: tuple(members) for label, members in buckets.items()}


def group_records(
    records: Iterable[MetricRecord],
    metric: str,
    key: str | KeyAccessor,
) -> dict[str, tuple[MetricRecord, ...]]:
    """Group the records reporting ``metric`` by ``key``.

    The metric match is exact and case-sensitive. Returns an empty mapping
    when no record carries the metric.
    """
    return partition_records((record for record in records if record.metric == metric), key)


__all__ = [
    "KeyAccessor",
    "UNCATEGORIZED",
    "dimension_accessor",
    "group_records",
    "partition_records",
]
