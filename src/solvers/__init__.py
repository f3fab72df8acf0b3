"""Explicit DG solver framework for linear acoustics.

Solver Hierarchy:
-----------------
TimeIntegrator (abstract base - owns the time loop)
├── ForwardEuler (first order)
└── RungeKutta (four stages)
"""

from .base import TimeIntegrator
from .datastructures import (
    NUM_EQUATIONS,
    PointSource,
    SolverParameters,
    Metrics,
    SolverContext,
)
from solvers.dg.integrators import (
    INTEGRATORS,
    ForwardEuler,
    RungeKutta,
    forward_euler,
    runge_kutta,
    get_integrator,
)


__all__ = [
    # Base solver
    "TimeIntegrator",
    # Data structures
    "NUM_EQUATIONS",
    "PointSource",
    "SolverParameters",
    "Metrics",
    "SolverContext",
    # Integrators
    "INTEGRATORS",
    "ForwardEuler",
    "RungeKutta",
    "forward_euler",
    "runge_kutta",
    "get_integrator",
]
