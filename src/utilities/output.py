"""Snapshot output sinks.

A sink receives time layers of element-major fields during a run and
persists them once at the end via ``write(path)``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd
import zarr

log = logging.getLogger(__name__)


@dataclass
class TimeLayer:
    """One snapshot of one field."""

    step: int
    time: float
    element_tags: np.ndarray
    data: np.ndarray
    num_components: int


class OutputSink(ABC):
    """Destination of solver snapshots."""

    @abstractmethod
    def add_time_layer(self, field, step, time, element_tags, data, num_components):
        """Record ``data`` (el_num, n * num_components) of ``field`` at ``step``/``time``."""
        pass

    @abstractmethod
    def write(self, path):
        """Persist everything recorded so far to ``path``."""
        pass


class MemorySink(OutputSink):
    """Keeps every layer in memory. ``write`` only records the target path."""

    def __init__(self):
        self.layers: Dict[str, List[TimeLayer]] = {}
        self.written_to: List[str] = []

    def add_time_layer(self, field, step, time, element_tags, data, num_components):
        self.layers.setdefault(field, []).append(
            TimeLayer(
                step=int(step),
                time=float(time),
                element_tags=np.array(element_tags, copy=True),
                data=np.array(data, dtype=np.float64, copy=True),
                num_components=int(num_components),
            )
        )

    def write(self, path):
        self.written_to.append(str(path))

    def steps(self, field) -> List[int]:
        return [layer.step for layer in self.layers.get(field, [])]

    def times(self, field) -> List[float]:
        return [layer.time for layer in self.layers.get(field, [])]

    def values(self, field) -> np.ndarray:
        """Stack all layers of ``field`` into (n_layers, el_num, n * components)."""
        return np.stack([layer.data for layer in self.layers[field]])

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {"field": field, "step": layer.step, "time": layer.time}
            for field, layers in self.layers.items()
            for layer in layers
        ]
        return pd.DataFrame(rows, columns=["field", "step", "time"])


class ZarrSink(MemorySink):
    """Buffers layers and saves them as one zarr group on ``write``.

    Group layout, with ``<field>`` the lower-cased field name:

    - ``<field>``: (n_layers, el_num, n * components) values
    - ``<field>_steps``, ``<field>_times``: per-layer step and time
    - ``element_tags``: (el_num,) tags of the first layer
    """

    def write(self, path):
        if not self.layers:
            log.warning(f"No snapshots recorded, nothing written to {path}")
            return

        arrays = {}
        for field, layers in self.layers.items():
            key = field.lower()
            arrays[key] = np.stack([layer.data for layer in layers])
            arrays[f"{key}_steps"] = np.array([layer.step for layer in layers], dtype=np.int64)
            arrays[f"{key}_times"] = np.array([layer.time for layer in layers], dtype=np.float64)
        arrays["element_tags"] = next(iter(self.layers.values()))[0].element_tags

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        zarr.save_group(str(path), **arrays)
        self.written_to.append(str(path))
        log.info(f"Saved {len(self.layers)} field(s) to {path}")
