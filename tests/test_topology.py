import networkx as nx
import numpy as np
import pytest
from networkx.algorithms.community import modularity

from Net_Sync.errors import TopologyError
from Net_Sync.graph import Topology, cluster_network, cluster_topology, from_edges
from Net_Sync.graph.generators import intra_fraction


def test_rejects_self_loops_and_directed_graphs():
    g = nx.Graph()
    g.add_edge(0, 0)
    with pytest.raises(TopologyError):
        Topology(g)
    with pytest.raises(TopologyError):
        Topology(nx.DiGraph([(0, 1)]))


def test_partial_cluster_labels_are_rejected():
    g = nx.path_graph(3)
    g.nodes[0]["cluster"] = 0
    with pytest.raises(TopologyError):
        Topology(g)


def test_degrees_and_edges(path_topology):
    assert path_topology.degrees.tolist() == [1, 2, 1]
    assert path_topology.avg_degree == pytest.approx(4 / 3)
    assert path_topology.edge_index(2, 1) == path_topology.edge_index(1, 2) == 1
    with pytest.raises(TopologyError):
        path_topology.edge_index(0, 2)
    assert sorted(path_topology.directed_pairs()) == [(0, 1), (1, 0), (1, 2), (2, 1)]


def test_cluster_queries(two_triangles):
    assert two_triangles.cluster_ids == [0, 1]
    assert two_triangles.nodes_in_cluster(1).tolist() == [3, 4, 5]
    boundary = [two_triangles.has_inter_cluster_connection(v) for v in range(6)]
    assert boundary == [False, False, True, True, False, False]
    with pytest.raises(TopologyError):
        two_triangles.nodes_in_cluster(7)


def test_modularity_matches_networkx(two_triangles):
    expected = modularity(two_triangles.graph, [{0, 1, 2}, {3, 4, 5}])
    assert two_triangles.modularity == pytest.approx(expected)
    assert from_edges([(0, 1)]).modularity == 0.0


def test_indices_of_rejects_unknown_vertices():
    topo = from_edges([("a", "b")])
    assert topo.indices_of(["b", "a"]) == [1, 0]
    with pytest.raises(TopologyError):
        topo.indices_of(["c"])


def test_intra_fraction():
    assert intra_fraction(0.5, 10) == pytest.approx(0.6)
    assert intra_fraction(0.99, 2) == 1.0


def test_generator_hits_target_modularity():
    topo = cluster_topology(400, 3000, 10, 0.5, seed=1)
    assert topo.vertex_count == 400
    assert topo.edge_count == 3000
    assert topo.cluster_ids == list(range(10))
    assert topo.modularity == pytest.approx(0.5, abs=0.05)


def test_generator_rejects_impossible_requests():
    with pytest.raises(TopologyError):
        cluster_network(4, 10, 2, 0.0, np.random.default_rng(0))
