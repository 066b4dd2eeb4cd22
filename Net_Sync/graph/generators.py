"""Random clustered networks with a prescribed Newman modularity."""

from __future__ import annotations

import logging

import networkx as nx
import numpy as np

from ..errors import TopologyError
from .topology import CLUSTER_ATTR, Topology

logger = logging.getLogger(__name__)


def intra_fraction(modularity_tgt: float, clusters: int) -> float:
    """Fraction of edges that must stay inside clusters.

    For ``clusters`` equally sized groups with homogeneous degrees the
    Newman modularity equals ``f_in - 1 / clusters``.
    """

    return float(np.clip(modularity_tgt + 1.0 / clusters, 0.0, 1.0))


def cluster_network(
    nodes: int,
    edges: int,
    clusters: int,
    modularity_tgt: float,
    rng: np.random.Generator,
) -> nx.Graph:
    """Return a random graph partitioned into ``clusters`` groups.

    Vertices are assigned to clusters round-robin. ``edges`` distinct edges
    are then placed, each one inside a random cluster with probability
    :func:`intra_fraction` and between two random clusters otherwise.

    Raises
    ------
    TopologyError
        If the requested number of edges cannot be placed.
    """

    g = nx.Graph()
    members = [list(range(c, nodes, clusters)) for c in range(clusters)]
    for v in range(nodes):
        g.add_node(v, **{CLUSTER_ATTR: v % clusters})

    p_in = intra_fraction(modularity_tgt, clusters)
    intra_capacity = sum(len(m) * (len(m) - 1) // 2 for m in members)
    inter_capacity = nodes * (nodes - 1) // 2 - intra_capacity
    n_in = int(round(edges * p_in))
    n_in = min(n_in, intra_capacity)
    n_out = edges - n_in
    if n_out > inter_capacity:
        raise TopologyError(
            f"cannot place {edges} edges on {nodes} vertices in {clusters} clusters"
        )

    candidates = [m for m in members if len(m) > 1]
    if n_in and not candidates:
        raise TopologyError("clusters are too small for intra-cluster edges")

    placed = 0
    while placed < n_in:
        group = candidates[rng.integers(len(candidates))]
        a, b = rng.choice(len(group), size=2, replace=False)
        u, v = group[a], group[b]
        if not g.has_edge(u, v):
            g.add_edge(u, v)
            placed += 1

    placed = 0
    while placed < n_out:
        ca, cb = rng.choice(clusters, size=2, replace=False)
        u = members[ca][rng.integers(len(members[ca]))]
        v = members[cb][rng.integers(len(members[cb]))]
        if not g.has_edge(u, v):
            g.add_edge(u, v)
            placed += 1

    logger.debug(
        "Generated clustered network: %d vertices, %d intra / %d inter edges",
        nodes,
        n_in,
        n_out,
    )
    return g


def cluster_topology(
    nodes: int,
    edges: int,
    clusters: int,
    modularity_tgt: float,
    *,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> Topology:
    """Generate a clustered network and wrap it in a :class:`Topology`."""

    rng = rng if rng is not None else np.random.default_rng(seed)
    graph = cluster_network(nodes, edges, clusters, modularity_tgt, rng)
    return Topology(graph, rng=rng)


__all__ = ["intra_fraction", "cluster_network", "cluster_topology"]
