"""Synchronization engine: state, coupling, order, convergence and dynamics."""

from .advance import PartitionedAdvancer, clock_advance, frequency_advance, partition
from .cluster_sync import ClusterSync, ClusterSyncResults
from .convergence import ConvergenceMonitor, ConvergenceSummary, RunState, StopReason
from .coupling import (
    CouplingEngine,
    CouplingStrengths,
    GossipCoupling,
    KuramotoCoupling,
    effective_strength,
    pull,
)
from .distributions import NormalDistribution
from .edge_stats import EdgeStatisticsTracker
from .epidemic import EpidemicSynchronization, SyncResults
from .lifecycle import Dynamics, SimulationLifecycle, run_dynamics
from .order import cluster_orders, order_parameter, phase_order
from .pacemaker import PacemakerSwitch
from .selection import fixed_partner, random_neighbor, sampled_neighbor
from .state import OscillatorState

__all__ = [
    "PartitionedAdvancer",
    "clock_advance",
    "frequency_advance",
    "partition",
    "ClusterSync",
    "ClusterSyncResults",
    "ConvergenceMonitor",
    "ConvergenceSummary",
    "RunState",
    "StopReason",
    "CouplingEngine",
    "CouplingStrengths",
    "GossipCoupling",
    "KuramotoCoupling",
    "effective_strength",
    "pull",
    "NormalDistribution",
    "EdgeStatisticsTracker",
    "EpidemicSynchronization",
    "SyncResults",
    "Dynamics",
    "SimulationLifecycle",
    "run_dynamics",
    "cluster_orders",
    "order_parameter",
    "phase_order",
    "PacemakerSwitch",
    "fixed_partner",
    "random_neighbor",
    "sampled_neighbor",
    "OscillatorState",
]
