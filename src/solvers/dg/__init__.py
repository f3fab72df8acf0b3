"""Building blocks of the explicit DG scheme for linear acoustics.

The integrators live in ``solvers.dg.integrators`` and are exported from
the ``solvers`` package.
"""

from .linalg import minus, plus_times, lin_eq
from .kernel import num_step
from .sources import locate_source_nodes, inject_sources
from .snapshots import FIELD_NAMES, SnapshotScheduler, pack_snapshot, emit_snapshot

__all__ = [
    # Primitives
    "minus",
    "plus_times",
    "lin_eq",
    # Kernel
    "num_step",
    # Sources and snapshots
    "locate_source_nodes",
    "inject_sources",
    "FIELD_NAMES",
    "SnapshotScheduler",
    "pack_snapshot",
    "emit_snapshot",
]
