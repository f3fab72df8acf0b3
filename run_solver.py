"""
DG Acoustics Runner - Hydra + MLflow integration for the explicit integrators.

Single runs:
    # Default: Gaussian pressure pulse, RK4
    uv run python run_solver.py

    # Forward Euler on a finer mesh
    uv run python run_solver.py solver.integrator=euler mesh.n_elements=400

    # Point source instead of an initial pulse
    uv run python run_solver.py +experiment=point_source

Sweeps (multirun mode):
    uv run python run_solver.py -m solver.integrator=euler,rk4 mesh.order=1,2,3

MLflow modes:
    files   - file-based ./mlruns (default)
    remote  - tracking server from MLFLOW_TRACKING_URI / mlflow.tracking_uri

Setup for remote MLflow:
    cp .env.template .env
    # Edit .env with your credentials
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import hydra
import mlflow
import numpy as np
from dotenv import load_dotenv
from hydra.core.hydra_config import HydraConfig
from omegaconf import DictConfig, OmegaConf

# Load .env file (for MLflow credentials)
load_dotenv()

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from meshing import create_interval_mesh  # noqa: E402
from solvers import NUM_EQUATIONS, get_integrator  # noqa: E402
from utilities import ZarrSink, load_parameters  # noqa: E402
from utilities.mlflow import log_fields, log_metrics, log_params, setup_mlflow_tracking  # noqa: E402

log = logging.getLogger(__name__)


# =============================================================================
# Problem Setup
# =============================================================================


def create_mesh(cfg: DictConfig):
    """Build the interval mesh from the ``mesh`` config group."""
    return create_interval_mesh(
        n_elements=cfg.mesh.n_elements,
        order=cfg.mesh.order,
        length=cfg.mesh.length,
        origin=cfg.mesh.origin,
    )


def initial_condition(mesh, cfg: DictConfig) -> np.ndarray:
    """Nodal initial state (4, num_nodes): zero or a Gaussian pressure pulse."""
    u = np.zeros((NUM_EQUATIONS, mesh.total_node_count()))
    kind = cfg.initial_condition.kind
    if kind == "zero":
        return u
    if kind == "gaussian":
        ic = cfg.initial_condition
        x = mesh.node_coords[:, 0]
        u[0] = ic.amplitude * np.exp(-(((x - ic.center) / ic.width) ** 2))
        return u
    raise ValueError(f"Unknown initial condition: {kind}. Use 'zero' or 'gaussian'")


# =============================================================================
# Main Entry Point
# =============================================================================


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Hydra entry point - runs one integration with MLflow tracking."""
    params = load_parameters(cfg.solver)
    integrator_cls = get_integrator(params.integrator)

    # Snapshots go next to the Hydra logs of this run
    output_dir = Path(HydraConfig.get().runtime.output_dir)
    params = replace(params, save_file=str(output_dir / params.save_file))

    mesh = create_mesh(cfg)
    u = initial_condition(mesh, cfg)
    log.info(
        f"Integrator: {integrator_cls.name}, elements={cfg.mesh.n_elements}, "
        f"order={cfg.mesh.order}, dt={params.time_step:g}"
    )

    integrator = integrator_cls(mesh, params, sink=ZarrSink())

    if not cfg.mlflow.get("enabled", True):
        metrics = integrator.solve(u)
        log.info(f"Done: {metrics.steps} steps, time={metrics.wall_time_seconds:.2f}s")
        return

    experiment_name = setup_mlflow_tracking(cfg)
    log.info(f"MLflow experiment: {experiment_name}")

    run_name = f"{integrator_cls.name}_E{cfg.mesh.n_elements}_N{cfg.mesh.order}"
    with mlflow.start_run(run_name=run_name, tags={"integrator": integrator_cls.name}):
        log_params(params)
        mlflow.log_params({f"mesh_{k}": v for k, v in cfg.mesh.items()})

        # Log Hydra config as artifact
        mlflow.log_dict(OmegaConf.to_container(cfg, resolve=True), "config.yaml")

        log.info("Starting solver...")
        metrics = integrator.solve(u)

        log_metrics(metrics)
        log_fields(params.save_file)

        log.info(
            f"Done: {metrics.steps} steps, {metrics.snapshots} snapshots, "
            f"time={metrics.wall_time_seconds:.2f}s"
        )


if __name__ == "__main__":
    main()
