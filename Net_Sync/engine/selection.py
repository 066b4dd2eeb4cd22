"""Neighbour selection policies.

A selector maps a vertex index to the index of the partner it couples with
in the current step, or ``None`` to skip coupling. Selectors draw from the
topology's random generator so a seeded run stays reproducible.
"""

from __future__ import annotations

from typing import Callable

from ..graph.topology import Topology

NeighborSelector = Callable[[int], "int | None"]


def random_neighbor(topology: Topology) -> NeighborSelector:
    """Select a uniformly random neighbour; isolated vertices yield ``None``."""

    return topology.random_neighbor


def sampled_neighbor(topology: Topology, probability: float) -> NeighborSelector:
    """Couple with probability ``probability`` to a random neighbour.

    This is the sparse-sampling regime in which only a random subset of the
    edges is active per step; pair it with ``compensate_sampling`` to keep
    the expected coupling per step unchanged.
    """

    if not 0.0 < probability <= 1.0:
        raise ValueError("probability must lie in (0, 1]")

    def _select(v: int) -> int | None:
        if topology.next_random_double() >= probability:
            return None
        return topology.random_neighbor(v)

    return _select


def fixed_partner(partners: dict[int, int | None]) -> NeighborSelector:
    """Select a predetermined partner per vertex (useful for scripted runs)."""

    return lambda v: partners.get(v)


__all__ = ["NeighborSelector", "random_neighbor", "sampled_neighbor", "fixed_partner"]
