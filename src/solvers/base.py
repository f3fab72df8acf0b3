"""Abstract base for the explicit DG time integrators."""

from abc import ABC, abstractmethod
import logging
import time

import numpy as np
import mlflow

from .datastructures import Metrics, SolverContext, SolverParameters
from .dg.snapshots import SnapshotScheduler, emit_snapshot
from .dg.sources import inject_sources, locate_source_nodes

log = logging.getLogger(__name__)


class TimeIntegrator(ABC):
    """Abstract explicit time integrator for the acoustic DG system.

    Handles:
    - Per-run context allocation and teardown
    - Mass matrix preparation and source location
    - The time loop (snapshot check, source injection, update, advance)
    - Final sink write and metrics

    Subclasses must:
    - Set ``name``
    - Implement step() - advance ``u`` by one time step in place
    """

    name = None

    def __init__(self, mesh, params: SolverParameters, sink=None):
        """Bind a mesh, parameters and output sink.

        Parameters
        ----------
        mesh : Mesh
            Mesh collaborator.
        params : SolverParameters
            Run configuration.
        sink : OutputSink, optional
            Snapshot destination. Defaults to a ``ZarrSink``.
        """
        if sink is None:
            from utilities.output import ZarrSink

            sink = ZarrSink()

        self.mesh = mesh
        self.params = params
        self.sink = sink
        self.metrics = Metrics(integrator=self.name)

    @abstractmethod
    def step(self, u: np.ndarray, context: SolverContext):
        """Advance ``u`` by one time step in place."""
        pass

    def solve(self, u: np.ndarray) -> Metrics:
        """March ``u`` from ``time_start`` to ``time_end``.

        ``u`` is updated in place and never reallocated. Snapshots are
        emitted before the sources are injected at each step, so a
        snapshot shows the state at the start of its step.

        Parameters
        ----------
        u : np.ndarray
            Nodal solution (4, num_nodes), C-contiguous float64.

        Returns
        -------
        Metrics
            Step and snapshot counts, final time and wall time.
        """
        p = self.params
        dt = p.time_step

        with SolverContext.allocate(self.mesh, p) as context:
            self.mesh.precompute_mass_matrices()
            source_nodes = locate_source_nodes(self.mesh, p.sources)
            scheduler = SnapshotScheduler(p.time_rate)

            log.info(
                f"Starting {self.name} integration: {context.el_num} elements, "
                f"{context.el_num_nodes} nodes/element, dt={dt:g}, "
                f"t=[{p.time_start:g}, {p.time_end:g}]"
            )

            wall_start = time.time()
            t = p.time_start
            final_time = t
            step = 0
            while t <= p.time_end:
                if scheduler.due(step):
                    emit_snapshot(self.sink, context, u, p, step, t, wall_start)
                    if mlflow.active_run() and u.size:
                        mlflow.log_metrics(
                            {"max_abs_pressure": float(np.max(np.abs(u[0])))}, step=step
                        )

                inject_sources(u, p.sources, source_nodes, t)
                self.step(u, context)
                final_time = t

                t += dt
                scheduler.advance(dt)
                step += 1

            wall_time = time.time() - wall_start

        self.sink.write(p.save_file)

        self.metrics = Metrics(
            integrator=self.name,
            steps=step,
            snapshots=scheduler.count,
            final_time=final_time,
            wall_time_seconds=wall_time,
        )
        log.info(f"Finished {step} steps in {wall_time:.2f}s ({scheduler.count} snapshots)")
        return self.metrics
