import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import networkx as nx
import pytest

from Net_Sync.graph import Topology, from_edges


@pytest.fixture
def path_topology() -> Topology:
    """Path ``0 - 1 - 2`` with degrees 1, 2, 1."""

    return from_edges([(0, 1), (1, 2)], seed=0)


@pytest.fixture
def two_triangles() -> Topology:
    """Two triangle clusters joined by the bridge ``2 - 3``."""

    edges = [(0, 1), (1, 2), (0, 2), (3, 4), (4, 5), (3, 5), (2, 3)]
    clusters = {0: 0, 1: 0, 2: 0, 3: 1, 4: 1, 5: 1}
    return from_edges(edges, clusters=clusters, seed=0)


@pytest.fixture
def complete_topology() -> Topology:
    """Complete graph on 20 vertices forming a single cluster."""

    g = nx.complete_graph(20)
    nx.set_node_attributes(g, 0, "cluster")
    return Topology(g, seed=3)
