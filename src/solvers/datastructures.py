"""Data structures for solver configuration, run state and results.

This module defines the configuration and result data structures
for the explicit DG acoustic integrators.

Structure:
- PointSource: Typed point source record (validated once at load time)
- SolverParameters: Input configuration (logged to MLflow at start)
- Metrics: Output results (logged to MLflow at end)
- SolverContext: Per-run scratch buffers owned by an integrator
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, asdict, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

# Pressure, velocity-x, velocity-y, velocity-z
NUM_EQUATIONS = 4

INTEGRATOR_ALIASES = {
    "euler": "euler",
    "forward_euler": "euler",
    "rk4": "rk4",
    "runge_kutta": "rk4",
}


# ========================================================
# Sources
# ========================================================


@dataclass
class PointSource:
    """Spherical pressure source driven by a sinusoid.

    Parameters
    ----------
    x, y, z : float
        Centre of the source region.
    radius : float
        Radius of the source region. Nodes strictly inside are driven.
    amplitude : float, optional
        Peak pressure. Default is 1.
    frequency : float, optional
        Frequency in Hz. Default is 0.
    phase : float, optional
        Phase offset in radians. Default is 0.
    duration : float, optional
        Simulated time after which the source stops. Default is infinite.
    """

    x: float
    y: float
    z: float
    radius: float
    amplitude: float = 1.0
    frequency: float = 0.0
    phase: float = 0.0
    duration: float = math.inf

    def __post_init__(self):
        for name in ("x", "y", "z", "radius", "amplitude", "frequency", "phase", "duration"):
            setattr(self, name, float(getattr(self, name)))
        if not self.radius > 0.0:
            raise ValueError(f"Source radius must be positive, got {self.radius}")
        if self.frequency < 0.0:
            raise ValueError(f"Source frequency must be non-negative, got {self.frequency}")

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "PointSource":
        """Build a source from a flat tuple.

        Accepts ``(x, y, z, radius, amplitude, frequency, phase, duration)`` or
        the legacy 9-value form with a leading tag, which is discarded since
        sources always drive the pressure field.
        """
        values = list(values)
        if len(values) == 9:
            values = values[1:]
        if len(values) != 8:
            raise ValueError(
                f"Source tuple must have 8 or 9 values, got {len(values)}"
            )
        return cls(*values)

    @property
    def center(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def is_active(self, t: float) -> bool:
        return t < self.duration

    def value(self, t: float) -> float:
        """Pressure imposed at simulated time t."""
        return self.amplitude * math.sin(2 * math.pi * self.frequency * t + self.phase)


# ========================================================
# Parameters (Input Configuration)
# ========================================================


@dataclass
class SolverParameters:
    """Physical, time-stepping and output parameters for one run.

    Parameters
    ----------
    c0 : float
        Reference speed of sound.
    rho0 : float
        Reference density.
    v0 : tuple of float
        Mean flow velocity (3 components).
    time_start, time_end : float
        Simulated time interval. Both ends are stepped.
    time_step : float
        Explicit time step. Stability is the caller's responsibility.
    time_rate : float
        Simulated time between two snapshots.
    num_threads : int
        Worker threads for the element loop.
    save_file : str
        Output path handed to the sink at the end of the run.
    integrator : str
        ``"euler"`` or ``"rk4"``.
    sources : list of PointSource
        Point sources. Sequences and mappings are converted on construction.
    """

    c0: float = 340.0
    rho0: float = 1.225
    v0: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    time_start: float = 0.0
    time_end: float = 1.0
    time_step: float = 1e-3
    time_rate: float = 1e-2
    num_threads: int = 1
    save_file: str = "results.zarr"
    integrator: str = "rk4"
    sources: List[PointSource] = field(default_factory=list)

    def __post_init__(self):
        self.v0 = tuple(float(v) for v in self.v0)
        self.sources = [self._as_source(src) for src in self.sources]
        self.integrator = str(self.integrator).lower()

        if len(self.v0) != 3:
            raise ValueError(f"v0 must have 3 components, got {len(self.v0)}")
        if not self.c0 > 0.0:
            raise ValueError(f"c0 must be positive, got {self.c0}")
        if not self.rho0 > 0.0:
            raise ValueError(f"rho0 must be positive, got {self.rho0}")
        if not self.time_step > 0.0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if self.time_rate < 0.0:
            raise ValueError(f"time_rate must be non-negative, got {self.time_rate}")
        if int(self.num_threads) < 1:
            raise ValueError(f"num_threads must be at least 1, got {self.num_threads}")
        self.num_threads = int(self.num_threads)
        if self.integrator not in INTEGRATOR_ALIASES:
            raise ValueError(
                f"Unknown integrator: {self.integrator}. Use 'euler' or 'rk4'"
            )

    @staticmethod
    def _as_source(src) -> PointSource:
        if isinstance(src, PointSource):
            return src
        if isinstance(src, dict):
            return PointSource(**src)
        return PointSource.from_sequence(src)

    def to_mlflow(self) -> dict:
        """Flat parameter dict for MLflow (sources are summarised)."""
        params = {k: v for k, v in asdict(self).items() if k not in ("v0", "sources")}
        params.update({f"v0_{axis}": v for axis, v in zip("xyz", self.v0)})
        params["num_sources"] = len(self.sources)
        return params

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([self.to_mlflow()])


# ========================================================
# Metrics (Output Results)
# ========================================================


@dataclass
class Metrics:
    """Run metrics - output results computed during/after time stepping."""

    integrator: str = ""
    steps: int = 0
    snapshots: int = 0
    final_time: float = 0.0
    wall_time_seconds: float = 0.0

    def to_mlflow(self) -> dict:
        return {k: v for k, v in asdict(self).items() if k != "integrator"}

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(self)])


# ========================================================
# Run Context (Per-run Scratch)
# ========================================================


@dataclass
class SolverContext:
    """Scratch state of one integrator call.

    Sized from the mesh once at the top of a run and discarded when the
    integrator returns, so consecutive runs share nothing. ``el_flux`` and
    ``el_stiffvector`` are templates: every worker copies them before use.
    """

    el_num: int
    el_num_nodes: int
    num_nodes: int
    el_tags: np.ndarray
    flux: np.ndarray
    el_flux: np.ndarray
    el_stiffvector: np.ndarray
    num_threads: int = 1
    chunks: List[Tuple[int, int]] = field(default_factory=list)
    executor: Optional[ThreadPoolExecutor] = None

    @classmethod
    def allocate(cls, mesh, params: SolverParameters) -> "SolverContext":
        """Allocate all buffers with proper sizes for ``mesh``."""
        el_num = mesh.element_count()
        el_num_nodes = mesh.nodes_per_element()
        num_nodes = mesh.total_node_count()

        # Static schedule: contiguous element ranges, one per worker
        bounds = np.linspace(0, el_num, params.num_threads + 1).astype(int)
        chunks = [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]

        executor = None
        if params.num_threads > 1:
            executor = ThreadPoolExecutor(
                max_workers=params.num_threads, thread_name_prefix="dg-element"
            )

        log.debug(
            f"Allocated run context: {el_num} elements x {el_num_nodes} nodes, "
            f"{params.num_threads} thread(s)"
        )
        return cls(
            el_num=el_num,
            el_num_nodes=el_num_nodes,
            num_nodes=num_nodes,
            el_tags=np.array([mesh.element_tag(i) for i in range(el_num)], dtype=np.int64),
            flux=np.zeros((NUM_EQUATIONS, num_nodes, 3)),
            el_flux=np.zeros(el_num_nodes),
            el_stiffvector=np.zeros(el_num_nodes),
            num_threads=params.num_threads,
            chunks=chunks,
            executor=executor,
        )

    def close(self):
        if self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
