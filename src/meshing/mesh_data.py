"""
Mesh collaborator for the explicit DG acoustic solver.

The integrators see the mesh only through the ``Mesh`` interface: element
counts and tags, node coordinates, per-element mass matrices, and the
volume/surface terms of one equation.

Indexing Conventions:
- Every element owns a contiguous block of ``n = nodes_per_element()`` nodes;
  element ``el`` owns global nodes ``el*n .. el*n + n - 1``.
- Nodal arrays ``u`` have shape (4, num_nodes), rows pressure, vx, vy, vz.
- Flux tensors have shape (4, num_nodes, 3), the last axis is x, y, z.
- Interface records are one-sided: ``(node, neighbour, normal, weight)`` with
  ``neighbour = -1`` on the domain boundary.
"""

from abc import ABC, abstractmethod
import logging

import numpy as np

from solvers.dg.linalg import lin_eq

log = logging.getLogger(__name__)


class Mesh(ABC):
    """Abstract mesh collaborator.

    Subclasses must implement element/node queries, the mass matrices and
    the flux pipeline (``update_flux``, ``precompute_flux``,
    ``element_flux``, ``element_stiffness_vector``).
    """

    @abstractmethod
    def element_count(self) -> int:
        pass

    @abstractmethod
    def nodes_per_element(self) -> int:
        pass

    def total_node_count(self) -> int:
        return self.element_count() * self.nodes_per_element()

    @abstractmethod
    def element_tag(self, el: int) -> int:
        pass

    @abstractmethod
    def node_coordinates(self, node: int) -> np.ndarray:
        """Return the (3,) coordinates of a global node."""
        pass

    @abstractmethod
    def precompute_mass_matrices(self):
        pass

    @abstractmethod
    def element_mass_matrix(self, el: int) -> np.ndarray:
        """Return the (n, n) mass matrix of element ``el``."""
        pass

    def mass_matrix_inverse_apply(self, el: int, vec: np.ndarray) -> np.ndarray:
        """Return ``M_el^-1 vec`` without modifying ``vec``."""
        rhs = np.ascontiguousarray(vec, dtype=np.float64)
        out = np.zeros_like(rhs)
        lin_eq(self.element_mass_matrix(el), rhs, out, 1.0, 0.0)
        return out

    @abstractmethod
    def update_flux(self, u, flux, v0, c0, rho0):
        """Rewrite the physical flux tensor ``flux`` from the nodal solution ``u``."""
        pass

    @abstractmethod
    def precompute_flux(self, u_eq, flux_eq, eq: int):
        """Prepare the surface terms of equation ``eq`` before its element loop."""
        pass

    @abstractmethod
    def element_flux(self, el: int, out: np.ndarray):
        """Write the surface term of element ``el`` into ``out`` (n,)."""
        pass

    @abstractmethod
    def element_stiffness_vector(self, el: int, flux_eq, u_eq, out: np.ndarray):
        """Write the volume term of element ``el`` into ``out`` (n,)."""
        pass


class ArrayMesh(Mesh):
    """DG mesh defined entirely by precomputed arrays.

    Parameters
    ----------
    element_tags : array_like
        (E,) integer tags.
    node_coords : array_like
        (E*n, 3) node coordinates, element-major.
    mass_matrices : array_like
        (E, n, n) element mass matrices.
    stiffness_operators : array_like
        (E, 3, n, n) operators ``K`` with volume term
        ``S = sum_d K[el, d] @ F[block, d]``.
    interface_nodes : array_like
        (P, 2) pairs ``(node, neighbour)``; ``neighbour = -1`` on the boundary.
    interface_normals : array_like
        (P, 3) outward unit normals seen from ``node``.
    interface_weights : array_like, optional
        (P,) surface weights. Default is 1 (point interfaces in 1D).

    Notes
    -----
    The surface term uses the Rusanov flux with wave speed ``c0 + |v0|``.
    Boundary records see a ghost state equal to the interior state, which
    lets waves leave the domain.
    """

    def __init__(
        self,
        element_tags,
        node_coords,
        mass_matrices,
        stiffness_operators,
        interface_nodes,
        interface_normals,
        interface_weights=None,
    ):
        # --- Elements ---
        self.element_tags = np.asarray(element_tags, dtype=np.int64)
        self.mass_matrices = np.asarray(mass_matrices, dtype=np.float64)
        self.stiffness_operators = np.asarray(stiffness_operators, dtype=np.float64)
        self.node_coords = np.asarray(node_coords, dtype=np.float64)

        # --- Interfaces ---
        self.interface_nodes = np.asarray(interface_nodes, dtype=np.int64).reshape(-1, 2)
        self.interface_normals = np.asarray(interface_normals, dtype=np.float64).reshape(-1, 3)
        if interface_weights is None:
            interface_weights = np.ones(len(self.interface_nodes))
        self.interface_weights = np.asarray(interface_weights, dtype=np.float64)

        E = self.element_tags.size
        if self.mass_matrices.ndim != 3 or self.mass_matrices.shape[0] != E:
            raise ValueError(
                f"mass_matrices must have shape (E, n, n) with E={E}, got {self.mass_matrices.shape}"
            )
        n = self.mass_matrices.shape[1]
        if self.mass_matrices.shape[2] != n:
            raise ValueError(f"mass matrices must be square, got {self.mass_matrices.shape}")
        if self.stiffness_operators.shape != (E, 3, n, n):
            raise ValueError(
                f"stiffness_operators must have shape {(E, 3, n, n)}, "
                f"got {self.stiffness_operators.shape}"
            )
        if self.node_coords.shape != (E * n, 3):
            raise ValueError(
                f"node_coords must have shape {(E * n, 3)}, got {self.node_coords.shape}"
            )
        P = len(self.interface_nodes)
        if self.interface_normals.shape != (P, 3) or self.interface_weights.shape != (P,):
            raise ValueError("interface normals and weights must match interface_nodes")
        if P and (self.interface_nodes.max() >= E * n or self.interface_nodes[:, 0].min() < 0):
            raise ValueError("interface_nodes reference nodes outside the mesh")

        self._n = n
        self._surface = np.zeros(E * n)
        self._wave_speed = 0.0

    # --- Element / node queries ---

    def element_count(self) -> int:
        return self.element_tags.size

    def nodes_per_element(self) -> int:
        return self._n

    def element_tag(self, el: int) -> int:
        return int(self.element_tags[el])

    def node_coordinates(self, node: int) -> np.ndarray:
        return self.node_coords[node]

    # --- Mass matrices ---

    def precompute_mass_matrices(self):
        M = np.ascontiguousarray(self.mass_matrices, dtype=np.float64)
        if not np.allclose(M, M.transpose(0, 2, 1)):
            raise ValueError("Element mass matrices must be symmetric")
        self.mass_matrices = M
        log.debug(f"Prepared {M.shape[0]} element mass matrices of size {self._n}")

    def element_mass_matrix(self, el: int) -> np.ndarray:
        return self.mass_matrices[el]

    # --- Flux pipeline ---

    def update_flux(self, u, flux, v0, c0, rho0):
        v0 = np.asarray(v0, dtype=np.float64)
        p = u[0]
        vel = u[1:4].T

        # Pressure: v0 p + rho0 c0^2 v
        flux[0] = np.outer(p, v0) + rho0 * c0 * c0 * vel
        # Velocity component d: v0 v_d + (p / rho0) e_d
        for d in range(3):
            flux[1 + d] = np.outer(u[1 + d], v0)
            flux[1 + d, :, d] += p / rho0

        self._wave_speed = c0 + np.linalg.norm(v0)

    def precompute_flux(self, u_eq, flux_eq, eq):
        a = self.interface_nodes[:, 0]
        b = self.interface_nodes[:, 1]
        b = np.where(b < 0, a, b)

        fn_a = np.einsum("ij,ij->i", flux_eq[a], self.interface_normals)
        fn_b = np.einsum("ij,ij->i", flux_eq[b], self.interface_normals)
        num_flux = 0.5 * (fn_a + fn_b) - 0.5 * self._wave_speed * (u_eq[b] - u_eq[a])

        self._surface[:] = 0.0
        np.add.at(self._surface, a, self.interface_weights * num_flux)

    def element_flux(self, el, out):
        n = self._n
        out[:] = self._surface[el * n : (el + 1) * n]

    def element_stiffness_vector(self, el, flux_eq, u_eq, out):
        n = self._n
        block = flux_eq[el * n : (el + 1) * n]
        K = self.stiffness_operators[el]
        out[:] = K[0] @ block[:, 0] + K[1] @ block[:, 1] + K[2] @ block[:, 2]
