"""Top-level data module for metric exports."""

from .models import (
    ClientMetricRecord,
    Dataset,
    DatasetSchema,
    MetricRecord,
    MetricRecordSchema,
    StudioMetricRecord,
    TrainerMetricRecord,
)
from .layouts import LAYOUTS, DatasetLayout, get_layout
from .client import ExportNotFoundError, MetricsHttpClient
from .ingest import DatasetLoadError, MetricsDatasetBuilder

__all__ = [
    "ClientMetricRecord",
    "Dataset",
    "DatasetLayout",
    "DatasetLoadError",
    "DatasetSchema",
    "ExportNotFoundError",
    "LAYOUTS",
    "MetricRecord",
    "MetricRecordSchema",
    "MetricsDatasetBuilder",
    "MetricsHttpClient",
    "StudioMetricRecord",
    "TrainerMetricRecord",
    "get_layout",
]
