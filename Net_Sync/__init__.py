"""Net_Sync: synchronization of coupled oscillators on networks."""

from .config import ClusterSyncConfig, EpidemicConfig, Weighting, load_config
from .engine import ClusterSync, ClusterSyncResults, EpidemicSynchronization, SyncResults
from .graph import Topology, cluster_topology, from_edges

__all__ = [
    "ClusterSyncConfig",
    "EpidemicConfig",
    "Weighting",
    "load_config",
    "ClusterSync",
    "ClusterSyncResults",
    "EpidemicSynchronization",
    "SyncResults",
    "Topology",
    "cluster_topology",
    "from_edges",
]
