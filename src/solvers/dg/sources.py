"""Point-source location and injection."""

import logging
from typing import List, Sequence

import numpy as np

from solvers.datastructures import PointSource

log = logging.getLogger(__name__)


def locate_source_nodes(mesh, sources: Sequence[PointSource]) -> List[np.ndarray]:
    """Find the nodes driven by each source.

    A node belongs to a source when its squared distance to the source
    centre is strictly less than ``radius**2``. Nodes on the sphere itself
    are excluded.

    Returns
    -------
    list of np.ndarray
        One array of global node indices per source, in source order.
    """
    num_nodes = mesh.total_node_count()
    coords = np.array(
        [mesh.node_coordinates(node) for node in range(num_nodes)], dtype=np.float64
    ).reshape(num_nodes, 3)

    source_nodes = []
    for i, src in enumerate(sources):
        dist2 = np.sum((coords - src.center) ** 2, axis=1)
        nodes = np.flatnonzero(dist2 < src.radius**2)
        if nodes.size == 0:
            log.warning(f"Source {i} at {tuple(src.center)} covers no mesh node")
        else:
            log.debug(f"Source {i} drives {nodes.size} node(s)")
        source_nodes.append(nodes)
    return source_nodes


def inject_sources(u, sources, source_nodes, t):
    """Overwrite the pressure of every active source's nodes at time ``t``.

    Sources with ``t >= duration`` leave ``u`` untouched. The imposed value
    depends only on ``t``, so repeated calls at the same instant agree.
    """
    for src, nodes in zip(sources, source_nodes):
        if src.is_active(t):
            u[0, nodes] = src.value(t)
