"""Pairwise coupling of oscillators.

Both coupling policies share one law. For an interaction ``(v, w)`` the
*pull* on ``v`` is::

    adj_v = sin(phase[w] - phase[v]) * effective_strength(v, w)

and symmetrically for ``w``. A positive pull means ``v`` lags behind ``w``.
The Kuramoto policy adds the pull to the angular velocity of the vertex,
while the gossip policy shortens (or lengthens) the period by it, which is
the same correction expressed for an oscillator whose phase is derived from
a clock and a period.

The coupling phase of a step runs on a single thread in fixed vertex order:
a vertex may take part in several interactions of the same step and every
adjustment reads the result of the previous one.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, MutableMapping, Protocol, Tuple

from ..config import Weighting
from ..errors import DegenerateWeightingError, TopologyError
from ..graph.topology import Topology
from .edge_stats import EdgeStatisticsTracker
from .selection import NeighborSelector
from .state import OscillatorState

Pair = Tuple[int, int]


class CouplingStrengths(MutableMapping[Pair, float]):
    """Directed coupling strengths keyed by ``(source, target)``.

    ``strengths[v, w]`` is the weight by which ``v`` is influenced when it
    couples with ``w``. Both orientations of every edge are present.
    """

    def __init__(self, topology: Topology, strength: float) -> None:
        self.topology = topology
        self._data: Dict[Pair, float] = {
            pair: float(strength) for pair in topology.directed_pairs()
        }

    def __getitem__(self, pair: Pair) -> float:
        try:
            return self._data[pair]
        except KeyError:
            raise TopologyError(f"no coupling strength for {pair!r}") from None

    def __setitem__(self, pair: Pair, value: float) -> None:
        if pair not in self._data:
            raise TopologyError(f"{pair!r} is not an edge of the topology")
        self._data[pair] = float(value)

    def __delitem__(self, pair: Pair) -> None:
        raise TypeError("coupling strengths cannot be removed")

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def density(self) -> float:
        """Sum of all directed coupling strengths."""

        return math.fsum(self._data.values())


def effective_strength(
    strengths: CouplingStrengths,
    topology: Topology,
    v: int,
    w: int,
    weighting: Weighting = Weighting.UNWEIGHTED,
    compensation: float = 1.0,
) -> float:
    """Return the weighted strength by which ``v`` is influenced by ``w``.

    Parameters
    ----------
    weighting:
        ``UNWEIGHTED`` keeps ``s(v→w)``; ``DEGREE`` divides by ``deg(v)``;
        ``DOUBLE_DEGREE`` multiplies by ``deg(w) / avg_degree`` and divides
        by ``deg(v)``.
    compensation:
        Multiplier applied before weighting, ``1 / p`` when coupling is
        sparse-sampled with probability ``p``.

    Raises
    ------
    DegenerateWeightingError
        If a degree-weighted strength is requested for a vertex of degree
        zero (or for a graph whose average degree is zero).
    """

    if weighting is Weighting.UNWEIGHTED:
        return strengths[v, w] * compensation
    deg_v = topology.degree(v)
    if deg_v == 0:
        raise DegenerateWeightingError(
            f"vertex {topology.vertices[v]!r} has no neighbours to weight by"
        )
    s = strengths[v, w] * compensation
    if weighting is Weighting.DEGREE:
        return s / deg_v
    avg = topology.avg_degree
    if avg == 0:
        raise DegenerateWeightingError("average degree is zero")
    return s * (topology.degree(w) / avg) / deg_v


def pull(state: OscillatorState, v: int, w: int, strength: float) -> float:
    """Phase attraction of ``v`` toward ``w``: ``sin(φ_w − φ_v) · strength``."""

    return math.sin(state.phase[w] - state.phase[v]) * strength


class CouplingPolicy(Protocol):
    """Apply one coupling interaction between two vertices."""

    def interact(self, state: OscillatorState, v: int, w: int) -> None:
        ...


class GossipCoupling:
    """Degree-weighted period adjustment between clock oscillators.

    A lagging vertex (positive pull) shortens its period so that it runs
    faster; a leading vertex lengthens it. Adjustments that would make a
    period non-positive are discarded.
    """

    def __init__(
        self,
        topology: Topology,
        strengths: CouplingStrengths,
        weighting: Weighting = Weighting.DEGREE,
        compensation: float = 1.0,
    ) -> None:
        self.topology = topology
        self.strengths = strengths
        self.weighting = weighting
        self.compensation = compensation
        self.discarded = 0

    def adjustments(self, state: OscillatorState, v: int, w: int) -> Tuple[float, float]:
        """Return the period changes ``(Δperiod_v, Δperiod_w)``."""

        s_v = effective_strength(
            self.strengths, self.topology, v, w, self.weighting, self.compensation
        )
        s_w = effective_strength(
            self.strengths, self.topology, w, v, self.weighting, self.compensation
        )
        return -pull(state, v, w, s_v), -pull(state, w, v, s_w)

    def interact(self, state: OscillatorState, v: int, w: int) -> None:
        adj_v, adj_w = self.adjustments(state, v, w)
        if state.period[v] + adj_v > 0:
            state.period[v] += adj_v
        else:
            self.discarded += 1
        if state.period[w] + adj_w > 0:
            state.period[w] += adj_w
        else:
            self.discarded += 1


class KuramotoCoupling:
    """Phase coupling at per-edge strengths (uniform ``K`` initially).

    The pulls are accumulated in ``state.drive`` and integrated together
    with the natural frequencies during the advance phase.
    """

    def __init__(
        self,
        topology: Topology,
        strengths: CouplingStrengths,
        weighting: Weighting = Weighting.UNWEIGHTED,
    ) -> None:
        self.topology = topology
        self.strengths = strengths
        self.weighting = weighting

    def interact(self, state: OscillatorState, v: int, w: int) -> None:
        s_v = effective_strength(self.strengths, self.topology, v, w, self.weighting)
        s_w = effective_strength(self.strengths, self.topology, w, v, self.weighting)
        state.drive[v] += pull(state, v, w, s_v)
        state.drive[w] += pull(state, w, v, s_w)


class CouplingEngine:
    """Run the coupling phase of a step.

    Every vertex, in index order, asks ``selector`` for a partner and hands
    the pair to ``policy``. ``None`` partners are skipped. Each performed
    interaction is counted by ``tracker``.
    """

    def __init__(
        self,
        topology: Topology,
        policy: CouplingPolicy,
        selector: NeighborSelector,
        tracker: EdgeStatisticsTracker | None = None,
    ) -> None:
        self.topology = topology
        self.policy = policy
        self.selector = selector
        self.tracker = tracker
        self.interactions = 0

    def couple(self, state: OscillatorState, v: int, w: int | None) -> None:
        """Perform one interaction between ``v`` and ``w``; ``None`` is a no-op."""

        if w is None:
            return
        if not self.topology.is_neighbor(v, w):
            raise TopologyError(
                f"selected partner {self.topology.vertices[w]!r} is not a "
                f"neighbour of {self.topology.vertices[v]!r}"
            )
        if self.tracker is not None:
            self.tracker.record(v, w)
        self.policy.interact(state, v, w)
        self.interactions += 1

    def coupling_phase(self, state: OscillatorState) -> None:
        for v in range(self.topology.vertex_count):
            self.couple(state, v, self.selector(v))


__all__ = [
    "CouplingStrengths",
    "effective_strength",
    "pull",
    "CouplingPolicy",
    "GossipCoupling",
    "KuramotoCoupling",
    "CouplingEngine",
]
