"""MLflow utilities for experiment tracking and artifact management."""

from .io import setup_mlflow_tracking, log_params, log_metrics, log_fields

__all__ = [
    "setup_mlflow_tracking",
    "log_params",
    "log_metrics",
    "log_fields",
]
