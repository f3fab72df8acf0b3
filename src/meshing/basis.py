"""Legendre-Gauss-Lobatto nodal basis on the reference element [-1, 1]."""

from __future__ import annotations

import numpy as np
from numpy.polynomial import legendre


def legendre_gauss_lobatto_nodes(num_points: int) -> np.ndarray:
    """
    Return Legendre-Gauss-Lobatto nodes on [-1, 1].

    Parameters
    ----------
    num_points : int
        Number of nodes (N+1), at least 2.

    Returns
    -------
    np.ndarray
        The endpoints ±1 and the roots of :math:`P_N'`, in ascending order.
    """
    N = num_points - 1
    if N < 1:
        raise ValueError(f"LGL nodes need at least 2 points, got {num_points}")
    if N == 1:
        return np.array([-1.0, 1.0])
    interior = legendre.Legendre.basis(N).deriv().roots()
    return np.concatenate(([-1.0], np.sort(np.real(interior)), [1.0]))


def vandermonde_normalized(nodes: np.ndarray, N: int | None = None) -> np.ndarray:
    r"""
    Return the Vandermonde matrix of orthonormal Legendre polynomials.

    Column ``j`` holds :math:`\sqrt{(2j+1)/2}\,P_j` evaluated at the nodes.
    """
    if N is None:
        N = nodes.size - 1
    scale = np.sqrt((2.0 * np.arange(N + 1) + 1.0) / 2.0)
    return legendre.legvander(nodes, N) * scale


def vandermonde_x(nodes: np.ndarray, N: int | None = None) -> np.ndarray:
    """Return derivatives of the orthonormal Legendre polynomials at the nodes."""
    if N is None:
        N = nodes.size - 1
    Vx = np.zeros((nodes.size, N + 1))
    for j in range(N + 1):
        coeffs = np.zeros(j + 1)
        coeffs[j] = np.sqrt((2.0 * j + 1.0) / 2.0)
        Vx[:, j] = legendre.legval(nodes, legendre.legder(coeffs))
    return Vx


def legendre_diff_matrix(nodes: np.ndarray) -> np.ndarray:
    r"""
    Return the nodal differentiation matrix :math:`D = V_x V^{-1}`.

    :math:`D\mathbf{u}` is the exact derivative of the interpolant of
    :math:`\mathbf{u}` at the nodes.
    """
    V = vandermonde_normalized(nodes)
    Vx = vandermonde_x(nodes)
    identity = np.eye(nodes.size)
    return Vx @ np.linalg.solve(V, identity)


def legendre_mass_matrix(nodes: np.ndarray) -> np.ndarray:
    """Return the exact nodal mass matrix :math:`(V V^T)^{-1}` on [-1, 1]."""
    V_norm = vandermonde_normalized(nodes)
    return np.linalg.inv(V_norm @ V_norm.T)


class LegendreLobattoBasis:
    """Nodal basis of order ``order`` on [-1, 1].

    Attributes
    ----------
    nodes : np.ndarray
        The ``order + 1`` LGL nodes.
    mass : np.ndarray
        Reference mass matrix.
    diff : np.ndarray
        Reference differentiation matrix.
    stiffness : np.ndarray
        Weak-form stiffness ``D^T M``, entry (i, j) is the integral of
        ``phi_i' phi_j``.
    """

    def __init__(self, order: int):
        if order < 1:
            raise ValueError(f"Basis order must be at least 1, got {order}")
        self.order = order
        self.nodes = legendre_gauss_lobatto_nodes(order + 1)
        self.mass = legendre_mass_matrix(self.nodes)
        self.diff = legendre_diff_matrix(self.nodes)
        self.stiffness = self.diff.T @ self.mass

    @property
    def num_nodes(self) -> int:
        return self.nodes.size
