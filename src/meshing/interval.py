"""1D DG mesh generation on a line segment along x."""

import logging

import numpy as np

from .basis import LegendreLobattoBasis
from .mesh_data import ArrayMesh

log = logging.getLogger(__name__)


def create_interval_mesh(n_elements: int, order: int = 1, length: float = 1.0, origin: float = 0.0) -> ArrayMesh:
    """Create a uniform DG mesh of ``[origin, origin + length]``.

    Parameters
    ----------
    n_elements : int
        Number of elements.
    order : int, optional
        Polynomial order; each element carries ``order + 1`` LGL nodes.
    length : float, optional
        Length of the segment.
    origin : float, optional
        Left end of the segment.

    Returns
    -------
    ArrayMesh
        Mesh with tags ``1..n_elements``, mass ``(h/2) M_ref`` and
        stiffness ``D^T M_ref`` along x. Neighbouring elements are coupled
        through their shared end nodes with normals ``+x`` and ``-x``.
    """
    if n_elements < 1:
        raise ValueError(f"n_elements must be at least 1, got {n_elements}")
    if order < 1:
        raise ValueError(f"order must be at least 1, got {order}")
    if not length > 0:
        raise ValueError(f"length must be positive, got {length}")

    basis = LegendreLobattoBasis(order)
    E = n_elements
    n = basis.num_nodes
    h = length / E

    # Node coordinates (element-major)
    left = origin + h * np.arange(E)
    x = left[:, None] + 0.5 * h * (basis.nodes[None, :] + 1.0)
    node_coords = np.zeros((E * n, 3))
    node_coords[:, 0] = x.ravel()

    # Element operators
    mass = np.repeat((0.5 * h * basis.mass)[None, :, :], E, axis=0)
    stiffness = np.zeros((E, 3, n, n))
    stiffness[:, 0] = basis.stiffness

    # Interfaces: right end looks at the next element, left end at the previous one
    first = np.arange(E) * n
    last = first + n - 1
    right_neighbour = np.append(first[1:], -1)
    left_neighbour = np.insert(last[:-1], 0, -1)
    interface_nodes = np.concatenate(
        [np.column_stack([last, right_neighbour]), np.column_stack([first, left_neighbour])]
    )
    interface_normals = np.zeros((2 * E, 3))
    interface_normals[:E, 0] = 1.0
    interface_normals[E:, 0] = -1.0

    log.debug(f"Interval mesh: {E} elements of order {order}, h={h:g}")
    return ArrayMesh(
        element_tags=np.arange(1, E + 1),
        node_coords=node_coords,
        mass_matrices=mass,
        stiffness_operators=stiffness,
        interface_nodes=interface_nodes,
        interface_normals=interface_normals,
    )
