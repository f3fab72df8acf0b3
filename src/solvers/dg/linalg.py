"""Dense per-element vector and matrix-vector primitives.

All routines work in place on one element block of length ``n`` and are
compiled in nopython mode. ``nogil`` lets the element workers of
``num_step`` run them concurrently from a thread pool.
"""

import numpy as np
from numba import njit


@njit(cache=True, nogil=True)
def minus(a, b):
    """In-place element-wise difference: ``a <- a - b``."""
    for i in range(a.shape[0]):
        a[i] -= b[i]


@njit(cache=True, nogil=True)
def plus_times(a, b, c):
    """In-place scaled accumulation: ``a <- a + c * b``."""
    for i in range(a.shape[0]):
        a[i] += c * b[i]


@njit(cache=True, nogil=True)
def lin_eq(mass, rhs, out, dt, beta):
    """Solve one element system and blend it into ``out``.

    Computes ``x = mass^-1 rhs`` with an exact dense solve and then
    ``out <- dt * x + beta * out``.

    Parameters
    ----------
    mass : np.ndarray
        Element mass matrix (n, n), symmetric positive definite.
    rhs : np.ndarray
        Right-hand side (n,). Not modified.
    out : np.ndarray
        Element block of the solution (n,), updated in place.
    dt : float
        Scale applied to the solve result.
    beta : float
        Weight of the previous content of ``out`` (1 for an Euler
        update, 0 for a Runge-Kutta stage increment).
    """
    x = np.linalg.solve(mass, rhs)
    for i in range(out.shape[0]):
        out[i] = dt * x[i] + beta * out[i]
