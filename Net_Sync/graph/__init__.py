"""Topology collaborators used by the synchronization engine."""

from .generators import cluster_network, cluster_topology
from .topology import CLUSTER_ATTR, Topology, from_edges

__all__ = [
    "CLUSTER_ATTR",
    "Topology",
    "from_edges",
    "cluster_network",
    "cluster_topology",
]
