"""Per-edge coupling usage statistics."""

from __future__ import annotations

from typing import Dict, Hashable, Tuple

import numpy as np

from ..graph.topology import Topology


class EdgeStatisticsTracker:
    """Count how often each edge is the active coupling edge.

    Counters are reported after the run only; they never feed back into the
    dynamics.
    """

    def __init__(self, topology: Topology) -> None:
        self.topology = topology
        self.counts = np.zeros(topology.edge_count, dtype=np.int64)

    def record(self, v: int, w: int) -> None:
        """Count one coupling over edge ``{v, w}``."""

        self.counts[self.topology.edge_index(v, w)] += 1

    def normalized(self) -> np.ndarray:
        """Min-max scale the counters to ``[0, 1]``.

        All values are ``0`` when every edge was used equally often.
        """

        if self.counts.size == 0:
            return np.zeros(0, dtype=float)
        lo = self.counts.min()
        hi = self.counts.max()
        if hi == lo:
            return np.zeros(self.counts.size, dtype=float)
        return (self.counts - lo) / float(hi - lo)

    def as_mapping(self, normalized: bool = True) -> Dict[Tuple[Hashable, Hashable], float]:
        """Return edge statistics keyed by ``(vertex, vertex)`` id pairs."""

        values = self.normalized() if normalized else self.counts.astype(float)
        labels = self.topology.vertices
        return {
            (labels[a], labels[b]): float(values[k])
            for k, (a, b) in enumerate(self.topology.edges)
        }

    def reset(self) -> None:
        self.counts[:] = 0


__all__ = ["EdgeStatisticsTracker"]
