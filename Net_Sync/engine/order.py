"""Kuramoto order parameter.

For a set of vertices the order parameter is the magnitude of the circular
mean of their phases::

    r = sqrt(mean(sin φ)² + mean(cos φ)²)

It is ``1`` when all phases coincide and ``0`` for phases spread evenly
around the circle.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Sequence, Tuple

import numpy as np

from ..graph.topology import Topology
from .state import OscillatorState

PartialSums = Tuple[float, float, int]


def merge_partial_sums(partials: Iterable[PartialSums]) -> PartialSums:
    """Merge per-worker ``(Σsin, Σcos, n)`` triples in the given order."""

    sin_total = 0.0
    cos_total = 0.0
    count = 0
    for s, c, n in partials:
        sin_total += s
        cos_total += c
        count += n
    return sin_total, cos_total, count


def order_from_sums(sin_total: float, cos_total: float, count: int) -> float:
    """Order parameter from summed signals, clamped to ``[0, 1]``."""

    if count <= 0:
        raise ValueError("order parameter of an empty vertex set is undefined")
    r = math.hypot(sin_total / count, cos_total / count)
    return min(1.0, r)


def order_parameter(
    state: OscillatorState, vertices: Sequence[int] | np.ndarray | None = None
) -> float:
    """Order parameter of ``vertices`` (all vertices when ``None``).

    Raises
    ------
    ValueError
        If ``vertices`` is empty.
    """

    if vertices is None:
        sine, cosine = state.sine, state.cosine
    else:
        idx = np.asarray(vertices, dtype=np.int64)
        sine, cosine = state.sine[idx], state.cosine[idx]
    return order_from_sums(float(sine.sum()), float(cosine.sum()), int(sine.size))


def phase_order(phases: Sequence[float] | np.ndarray) -> float:
    """Order parameter of raw phases."""

    phases = np.asarray(phases, dtype=float)
    return order_from_sums(
        float(np.sin(phases).sum()), float(np.cos(phases).sum()), int(phases.size)
    )


def cluster_orders(state: OscillatorState, topology: Topology) -> Dict[int, float]:
    """Order parameter of every cluster of ``topology``.

    Member sets are re-read from the topology on each call.
    """

    return {
        cid: order_parameter(state, topology.nodes_in_cluster(cid))
        for cid in topology.cluster_ids
    }


__all__ = [
    "PartialSums",
    "merge_partial_sums",
    "order_from_sums",
    "order_parameter",
    "phase_order",
    "cluster_orders",
]
