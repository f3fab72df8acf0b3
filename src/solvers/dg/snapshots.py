"""Snapshot cadence and field packing."""

import logging
import time

import numpy as np

log = logging.getLogger(__name__)

FIELD_NAMES = ("Pressure", "Density", "Velocity")


class SnapshotScheduler:
    """Decides when to emit a snapshot.

    The first step always fires. Afterwards a snapshot fires once the time
    accumulated since the previous one reaches ``time_rate``; the
    accumulator is reset on every fire. With ``time_rate = 0`` every step
    fires.
    """

    def __init__(self, time_rate: float):
        self.time_rate = time_rate
        self.elapsed = 0.0
        self.count = 0

    def due(self, step: int) -> bool:
        if self.elapsed >= self.time_rate or step == 0:
            self.elapsed = 0.0
            self.count += 1
            return True
        return False

    def advance(self, dt: float):
        self.elapsed += dt


def pack_snapshot(u, el_num, el_num_nodes, c0):
    """Reshape the nodal solution into element-major output fields.

    Returns
    -------
    pressure : np.ndarray
        (el_num, n) pressure values.
    density : np.ndarray
        (el_num, n) acoustic density ``p / c0**2``.
    velocity : np.ndarray
        (el_num, 3n) velocity interleaved per node as ``vx, vy, vz``.
    """
    pressure = u[0].reshape(el_num, el_num_nodes).copy()
    density = pressure / (c0 * c0)
    velocity = np.stack((u[1], u[2], u[3]), axis=-1).reshape(el_num, 3 * el_num_nodes)
    return pressure, density, velocity


def emit_snapshot(sink, context, u, params, step, t, wall_start):
    """Hand the current fields to ``sink`` and log one progress line."""
    pressure, density, velocity = pack_snapshot(
        u, context.el_num, context.el_num_nodes, params.c0
    )
    for name, data, components in zip(FIELD_NAMES, (pressure, density, velocity), (1, 1, 3)):
        sink.add_time_layer(name, step, t, context.el_tags, data, components)

    elapsed = int(time.time() - wall_start)
    log.info(f"[{t:g}/{params.time_end:g}s] Step number : {step}, Elapsed time: {elapsed}s")
