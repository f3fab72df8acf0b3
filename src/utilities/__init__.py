"""Cross-project utilities (config loading, output sinks, MLflow)."""

from utilities.config import load_parameters  # noqa: F401
from utilities.output import OutputSink, MemorySink, ZarrSink, TimeLayer  # noqa: F401

__all__ = [
    "load_parameters",
    "OutputSink",
    "MemorySink",
    "ZarrSink",
    "TimeLayer",
]
