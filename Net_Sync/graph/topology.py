"""Read-only view of a networkx graph used by the synchronization engine.

The engine works in a dense index space ``0..N-1`` that follows the order of
``graph.nodes``. :class:`Topology` precomputes neighbour arrays, degrees,
edge indices and cluster membership once so that per-step queries are cheap
and never touch the networkx structures.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, List, Tuple

import networkx as nx
from networkx.algorithms.community import modularity as newman_modularity
import numpy as np

from ..errors import TopologyError

CLUSTER_ATTR = "cluster"


class Topology:
    """Index-based topology with cluster membership and a random source.

    Parameters
    ----------
    graph:
        Undirected networkx graph. Self-loops and multi-edges are rejected.
    rng:
        Random generator used for neighbour draws and probabilistic
        decisions. A new generator seeded with ``seed`` is created when
        omitted.
    seed:
        Seed for the generator when ``rng`` is not supplied.
    cluster_attr:
        Node attribute holding the integer cluster id. Either every vertex
        carries it or none does.
    """

    def __init__(
        self,
        graph: nx.Graph,
        *,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        cluster_attr: str = CLUSTER_ATTR,
    ) -> None:
        if graph.is_directed() or graph.is_multigraph():
            raise TopologyError("topology must be a simple undirected graph")
        if nx.number_of_selfloops(graph):
            raise TopologyError("self-loops are not allowed")

        self.graph = graph
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.vertices: List[Hashable] = list(graph.nodes)
        self.index: Dict[Hashable, int] = {v: i for i, v in enumerate(self.vertices)}

        self.edges: List[Tuple[int, int]] = []
        self._edge_index: Dict[Tuple[int, int], int] = {}
        for u, v in graph.edges:
            a, b = sorted((self.index[u], self.index[v]))
            self._edge_index[(a, b)] = len(self.edges)
            self.edges.append((a, b))

        self.neighbors: List[np.ndarray] = [
            np.fromiter((self.index[w] for w in graph.adj[v]), dtype=np.int64)
            for v in self.vertices
        ]
        self.degrees = np.array([len(n) for n in self.neighbors], dtype=np.int64)
        self._neighbor_sets = [frozenset(n.tolist()) for n in self.neighbors]

        self.cluster_of: np.ndarray | None = None
        self._members: Dict[int, np.ndarray] = {}
        self._boundary = np.zeros(len(self.vertices), dtype=bool)
        self._load_clusters(cluster_attr)

    # ------------------------------------------------------------------
    def _load_clusters(self, attr: str) -> None:
        labels = [self.graph.nodes[v].get(attr) for v in self.vertices]
        present = [lab is not None for lab in labels]
        if not any(present):
            return
        if not all(present):
            missing = [v for v, p in zip(self.vertices, present) if not p][:5]
            raise TopologyError(f"vertices without cluster id: {missing}")
        self.cluster_of = np.array([int(lab) for lab in labels], dtype=np.int64)
        for cid in sorted(set(self.cluster_of.tolist())):
            self._members[cid] = np.flatnonzero(self.cluster_of == cid)
        for a, b in self.edges:
            if self.cluster_of[a] != self.cluster_of[b]:
                self._boundary[a] = True
                self._boundary[b] = True

    # ------------------------------------------------------------------
    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def avg_degree(self) -> float:
        """Mean vertex degree, ``0.0`` for an empty graph."""

        if not self.vertices:
            return 0.0
        return float(self.degrees.mean())

    def degree(self, v: int) -> int:
        return int(self.degrees[v])

    def is_neighbor(self, v: int, w: int) -> bool:
        return w in self._neighbor_sets[v]

    def edge_index(self, v: int, w: int) -> int:
        """Return the index of edge ``{v, w}``.

        Raises
        ------
        TopologyError
            If ``v`` and ``w`` are not adjacent.
        """

        key = (v, w) if v < w else (w, v)
        try:
            return self._edge_index[key]
        except KeyError:
            raise TopologyError(
                f"no edge between {self.vertices[v]!r} and {self.vertices[w]!r}"
            ) from None

    def directed_pairs(self) -> Iterable[Tuple[int, int]]:
        """Yield both orientations of every edge."""

        for a, b in self.edges:
            yield a, b
            yield b, a

    # ---- random draws ----------------------------------------------
    def random_neighbor(self, v: int) -> int | None:
        """Return a uniformly chosen neighbour of ``v`` or ``None``."""

        nbrs = self.neighbors[v]
        if nbrs.size == 0:
            return None
        return int(nbrs[self.rng.integers(nbrs.size)])

    def next_random_double(self) -> float:
        """Uniform draw from ``[0, 1)``."""

        return float(self.rng.random())

    # ---- clusters -----------------------------------------------------
    @property
    def has_clusters(self) -> bool:
        return self.cluster_of is not None

    @property
    def cluster_ids(self) -> List[int]:
        return list(self._members)

    def nodes_in_cluster(self, cid: int) -> np.ndarray:
        """Indices of the members of cluster ``cid``."""

        try:
            return self._members[cid]
        except KeyError:
            raise TopologyError(f"unknown cluster id {cid!r}") from None

    def has_inter_cluster_connection(self, v: int) -> bool:
        """Return ``True`` if ``v`` has an edge into another cluster."""

        return bool(self._boundary[v])

    @property
    def modularity(self) -> float:
        """Newman modularity of the cluster partition.

        Returns ``0.0`` for graphs without clusters or edges.
        """

        if not self.has_clusters or not self.edges:
            return 0.0
        communities = [
            {self.vertices[i] for i in members} for members in self._members.values()
        ]
        return float(newman_modularity(self.graph, communities))

    # ---- validation ---------------------------------------------------
    def indices_of(self, vertices: Iterable[Hashable]) -> List[int]:
        """Map vertex ids to indices rejecting unknown ids."""

        out = []
        for v in vertices:
            try:
                out.append(self.index[v])
            except KeyError:
                raise TopologyError(f"unknown vertex {v!r}") from None
        return out

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return (
            f"Topology(vertices={self.vertex_count}, edges={self.edge_count}, "
            f"clusters={len(self._members)})"
        )


def from_edges(
    edges: Iterable[Tuple[Any, Any]],
    *,
    vertices: Iterable[Any] = (),
    clusters: Dict[Any, int] | None = None,
    seed: int | None = None,
) -> Topology:
    """Build a :class:`Topology` from an edge list.

    ``vertices`` adds isolated vertices; ``clusters`` assigns cluster ids.
    """

    g = nx.Graph()
    g.add_nodes_from(vertices)
    g.add_edges_from(edges)
    if clusters is not None:
        nx.set_node_attributes(g, clusters, CLUSTER_ATTR)
    return Topology(g, seed=seed)


__all__ = ["CLUSTER_ATTR", "Topology", "from_edges"]
