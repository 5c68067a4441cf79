"""Domain models for studio metric CSV exports."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

import marshmallow as ma
from attrs import define, field


def _strip(value: str | None) -> str:
    """Trim surrounding whitespace from a cell, mapping ``None`` to ``""``."""
    if value is None:
        return ""
    return str(value).strip()


def _frozen_values(values: Mapping[str, str]) -> Mapping[str, str]:
    """Copy period cells into a read-only mapping with trimmed text."""
    return MappingProxyType({str(key): _strip(value) for key, value in values.items()})


@define(slots=True, frozen=True, kw_only=True)
class MetricRecord:
    """One observation row: identity dimensions, period cells, and a total.

    Concrete variants list their dimension names in ``DIMENSIONS`` and their
    layout tag in ``LAYOUT``.
    """

    LAYOUT: ClassVar[str] = ""
    DIMENSIONS: ClassVar[tuple[str, ...]] = ()

    metric: str = field(converter=_strip)
    values: Mapping[str, str] = field(converter=_frozen_values, factory=dict, hash=False)
    total: str = field(converter=_strip, default="")

    def dimension(self, name: str) -> str:
        """Return the value of a grouping dimension carried by this variant."""
        if name not in self.DIMENSIONS:
            raise KeyError(
                f"{type(self).__name__} has no dimension {name!r}; "
                f"expected one of {', '.join(self.DIMENSIONS)}."
            )
        return getattr(self, name)

    def value(self, period_key: str) -> str:
        """Return the raw text of a period cell, ``""`` when missing."""
        return self.values.get(period_key, "")

    @property
    def layout(self) -> str:
        """Layout tag identifying the record variant."""
        return self.LAYOUT

    @property
    def dimensions(self) -> dict[str, str]:
        """All identity fields of the record keyed by dimension name."""
        return {name: getattr(self, name) for name in self.DIMENSIONS}


@define(slots=True, frozen=True, kw_only=True)
class StudioMetricRecord(MetricRecord):
    """Location/category/product row with one reporting year of months."""

    LAYOUT: ClassVar[str] = "studio"
    DIMENSIONS: ClassVar[tuple[str, ...]] = ("location", "category", "product")

    location: str = field(converter=_strip, default="")
    category: str = field(converter=_strip, default="")
    product: str = field(converter=_strip, default="")


@define(slots=True, frozen=True, kw_only=True)
class TrainerMetricRecord(MetricRecord):
    """Per-trainer row split by new versus returning clients."""

    LAYOUT: ClassVar[str] = "trainer"
    DIMENSIONS: ClassVar[tuple[str, ...]] = ("location", "trainer", "is_new")

    location: str = field(converter=_strip, default="")
    trainer: str = field(converter=_strip, default="")
    is_new: str = field(converter=_strip, default="")


@define(slots=True, frozen=True, kw_only=True)
class ClientMetricRecord(MetricRecord):
    """Client cohort row keyed by the studio of the first visit."""

    LAYOUT: ClassVar[str] = "client"
    DIMENSIONS: ClassVar[tuple[str, ...]] = ("first_visit_location", "membership", "is_new")

    first_visit_location: str = field(converter=_strip, default="")
    membership: str = field(converter=_strip, default="")
    is_new: str = field(converter=_strip, default="")


RECORD_TYPES: dict[str, type[MetricRecord]] = {
    cls.LAYOUT: cls for cls in (StudioMetricRecord, TrainerMetricRecord, ClientMetricRecord)
}


def record_type_for(layout: str) -> type[MetricRecord]:
    """Resolve the record variant registered for a layout tag."""
    try:
        return RECORD_TYPES[layout]
    except KeyError:
        valid = ", ".join(sorted(RECORD_TYPES))
        raise KeyError(f"Unknown layout {layout!r}; expected one of {valid}.") from None


class MetricRecordSchema(ma.Schema):
    """Marshmallow schema for any :class:`MetricRecord` variant."""

    layout = ma.fields.Str(required=True)
    metric = ma.fields.Str(required=True)
    dimensions = ma.fields.Dict(keys=ma.fields.Str(), values=ma.fields.Str(), required=True)
    values = ma.fields.Dict(keys=ma.fields.Str(), values=ma.fields.Str(), required=True)
    total = ma.fields.Str(load_default="", dump_default="")

    @ma.post_load
    def make_record(self, data: dict[str, Any], **kwargs: object) -> MetricRecord:
        """Instantiate the variant named by ``layout``."""
        record_cls = record_type_for(data["layout"])
        dimensions = data["dimensions"]
        unknown = set(dimensions) - set(record_cls.DIMENSIONS)
        if unknown:
            raise ma.ValidationError(
                f"Unknown dimensions for {data['layout']}: {', '.join(sorted(unknown))}",
                field_name="dimensions",
            )
        return record_cls(
            metric=data["metric"],
            values=data["values"],
            total=data.get("total", ""),
            **dimensions,
        )


@define(slots=True, frozen=True)
class Dataset:
    """Immutable, ordered set of records loaded from one CSV export."""

    layout: str
    records: tuple[MetricRecord, ...] = field(converter=tuple, factory=tuple)

    def __len__(self) -> int:
        return len(self.records)

    def metrics(self) -> list[str]:
        """Distinct metric names in first-encounter order."""
        return list(dict.fromkeys(record.metric for record in self.records if record.metric))

    def dimension_values(self, name: str) -> list[str]:
        """Distinct non-empty values of a dimension in first-encounter order."""
        return list(
            dict.fromkeys(
                value for value in (record.dimension(name) for record in self.records) if value
            )
        )

    def where(self, name: str, value: str) -> "Dataset":
        """Return a dataset restricted to records whose dimension equals ``value``."""
        return Dataset(
            layout=self.layout,
            records=tuple(record for record in self.records if record.dimension(name) == value),
        )

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation of the dataset."""
        return DatasetSchema().dump(self)


class DatasetSchema(ma.Schema):
    """Marshmallow schema for serializing :class:`Dataset` snapshots."""

    layout = ma.fields.Str(required=True)
    records = ma.fields.List(ma.fields.Nested(MetricRecordSchema), required=True)

    @ma.post_load
    def make_dataset(self, data: dict[str, Any], **kwargs: object) -> Dataset:
        """Instantiate :class:`Dataset` objects from validated payloads."""
        mismatched = [record for record in data["records"] if record.layout != data["layout"]]
        if mismatched:
            raise ma.ValidationError(
                f"Records must all use layout {data['layout']!r}.", field_name="records"
            )
        return Dataset(layout=data["layout"], records=data["records"])


__all__ = [
    "ClientMetricRecord",
    "Dataset",
    "DatasetSchema",
    "MetricRecord",
    "MetricRecordSchema",
    "RECORD_TYPES",
    "StudioMetricRecord",
    "TrainerMetricRecord",
    "record_type_for",
]
