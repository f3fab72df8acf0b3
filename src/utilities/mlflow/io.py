"""MLflow I/O utilities for experiment tracking."""

import logging
import os
from pathlib import Path

import mlflow
from omegaconf import DictConfig

log = logging.getLogger(__name__)


def setup_mlflow_tracking(cfg: DictConfig) -> str:
    """Configure MLflow tracking from the ``mlflow`` config group.

    Parameters
    ----------
    cfg : DictConfig
        Root config with ``experiment_name`` and an ``mlflow`` group
        (``tracking_uri``, ``mode``, optional ``project_prefix``).

    Returns
    -------
    str
        The experiment name in use.
    """
    tracking_uri = cfg.mlflow.get("tracking_uri", "./mlruns")
    mode = str(cfg.mlflow.get("mode", "files")).lower()
    if mode in ("files", "local"):
        # File backend: ignore any URI from the environment
        os.environ.pop("MLFLOW_TRACKING_URI", None)
        tracking_uri = f"file://{Path(tracking_uri).resolve()}"
    else:
        tracking_uri = os.environ.get("MLFLOW_TRACKING_URI", tracking_uri)
    os.environ["MLFLOW_TRACKING_URI"] = str(tracking_uri)
    mlflow.set_tracking_uri(tracking_uri)
    log.info(f"MLflow tracking URI: {tracking_uri}")

    experiment_name = cfg.experiment_name
    project_prefix = cfg.mlflow.get("project_prefix", "")
    if project_prefix and not experiment_name.startswith("/"):
        experiment_name = f"{project_prefix}/{experiment_name}"

    try:
        mlflow.set_experiment(experiment_name)
    except Exception as exc:
        # A previously deleted experiment name cannot be reused
        fallback = f"{experiment_name}-restored"
        log.warning(
            "MLflow set_experiment failed for '%s' (%s); falling back to '%s'",
            experiment_name,
            exc,
            fallback,
        )
        experiment_name = fallback
        mlflow.set_experiment(experiment_name)
    return experiment_name


def log_params(params):
    """Log solver parameters using the dataclass ``to_mlflow`` method."""
    mlflow.log_params(params.to_mlflow())


def log_metrics(metrics):
    """Log final run metrics using the dataclass ``to_mlflow`` method."""
    mlflow.log_metrics(metrics.to_mlflow())


def log_fields(save_file):
    """Upload the zarr snapshot store as a ``fields`` artifact directory."""
    path = Path(save_file)
    if not path.exists():
        log.warning(f"No snapshot store at {path}; skipping artifact upload")
        return
    mlflow.log_artifacts(str(path), artifact_path=f"fields/{path.name}")
    log.info(f"Logged fields: {path.name} (zarr)")
