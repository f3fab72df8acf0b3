"""Explicit time integrators for the acoustic DG system.

Two schemes share the time loop of ``TimeIntegrator``:

- ``ForwardEuler``: first order, one flux refresh and one kernel call per step.
- ``RungeKutta``: four-stage scheme, four flux refreshes and kernel calls per
  step, combined as ``u += (k1 + 2 k2 + 2 k3 + k4) / 6``.
"""

import logging

import numpy as np

from solvers.base import TimeIntegrator
from solvers.datastructures import INTEGRATOR_ALIASES, NUM_EQUATIONS
from solvers.dg.kernel import num_step
from solvers.dg.linalg import plus_times

log = logging.getLogger(__name__)


class ForwardEuler(TimeIntegrator):
    """First-order explicit Euler: ``u <- u + dt * M^-1 (S - F)``."""

    name = "euler"

    def step(self, u, context):
        p = self.params
        self.mesh.update_flux(u, context.flux, p.v0, p.c0, p.rho0)
        num_step(self.mesh, p, u, context.flux, 1.0, context)


class RungeKutta(TimeIntegrator):
    """Four-stage Runge-Kutta in increment form.

    All four stage buffers start as copies of ``u``. After stage ``k_i`` has
    been turned into its increment by ``num_step(beta=0)``, it is added with
    weight 0.5, 0.5 and 1 to the next buffer, which therefore holds
    ``u + w * k_i`` when its own stage runs.
    """

    name = "rk4"

    def step(self, u, context):
        p = self.params
        k1 = u.copy()
        k2 = u.copy()
        k3 = u.copy()
        k4 = u.copy()

        stages = ((k1, k2, 0.5), (k2, k3, 0.5), (k3, k4, 1.0), (k4, None, None))
        for k, k_next, weight in stages:
            self.mesh.update_flux(k, context.flux, p.v0, p.c0, p.rho0)
            num_step(self.mesh, p, k, context.flux, 0.0, context)
            if k_next is not None:
                for eq in range(NUM_EQUATIONS):
                    plus_times(k_next[eq], k[eq], weight)

        u += (k1 + 2 * k2 + 2 * k3 + k4) / 6.0


INTEGRATORS = {
    "euler": ForwardEuler,
    "rk4": RungeKutta,
}


def get_integrator(name: str):
    """Resolve an integrator class by name.

    Accepts ``"euler"`` and ``"rk4"`` as well as the aliases
    ``"forward_euler"`` and ``"runge_kutta"``.
    """
    key = INTEGRATOR_ALIASES.get(str(name).lower())
    if key is None:
        raise ValueError(f"Unknown integrator: {name}. Use 'euler' or 'rk4'")
    return INTEGRATORS[key]


def forward_euler(u: np.ndarray, mesh, params, sink=None):
    """Advance ``u`` in place with forward Euler. Returns run ``Metrics``."""
    return ForwardEuler(mesh, params, sink).solve(u)


def runge_kutta(u: np.ndarray, mesh, params, sink=None):
    """Advance ``u`` in place with four-stage Runge-Kutta. Returns run ``Metrics``."""
    return RungeKutta(mesh, params, sink).solve(u)
