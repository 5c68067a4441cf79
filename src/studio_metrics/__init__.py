"""Studio performance metrics: ingestion, grouping, and pivot views."""

__version__ = "0.1.0"

__all__ = ["__version__"]
