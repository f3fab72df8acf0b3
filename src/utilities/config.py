"""Loading solver parameters from YAML or Hydra configs."""

from dataclasses import fields
import logging
from pathlib import Path

from omegaconf import DictConfig, OmegaConf

from solvers.datastructures import SolverParameters

log = logging.getLogger(__name__)


def load_parameters(source) -> SolverParameters:
    """Build validated ``SolverParameters``.

    Parameters
    ----------
    source : str, Path, dict or DictConfig
        YAML file path, plain mapping or OmegaConf config holding the
        ``SolverParameters`` fields. Interpolations are resolved.

    Raises
    ------
    ValueError
        On unknown keys or invalid values.
    """
    if isinstance(source, (str, Path)):
        cfg = OmegaConf.load(source)
    elif isinstance(source, DictConfig):
        cfg = source
    else:
        cfg = OmegaConf.create(dict(source))

    data = OmegaConf.to_container(cfg, resolve=True)
    known = {f.name for f in fields(SolverParameters)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown solver parameter(s): {', '.join(unknown)}")

    params = SolverParameters(**data)
    log.debug(f"Loaded parameters: {params.to_mlflow()}")
    return params
