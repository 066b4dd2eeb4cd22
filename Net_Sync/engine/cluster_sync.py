"""Cluster synchronization experiment.

Kuramoto oscillators on a clustered network whose natural frequencies are
homogeneous inside a cluster and heterogeneous between clusters. Once a
cluster is internally synchronized it may switch to pacemaker mode and stop
listening to the rest of the network (see :mod:`.pacemaker`).

Per step the experiment records the global order (series ``GlobalOrder``)
and the order of every cluster (series ``ClusterOrder_<id>``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from invariants import checks
from telemetry import TimeSeriesRecorder

from ..config import ClusterSyncConfig, Weighting
from ..errors import TopologyError
from ..graph.generators import cluster_topology
from ..graph.topology import Topology
from .advance import PartitionedAdvancer, frequency_advance
from .convergence import ConvergenceMonitor, ConvergenceSummary
from .coupling import CouplingEngine, CouplingStrengths, KuramotoCoupling
from .distributions import NormalDistribution
from .lifecycle import enforce_invariants, run_dynamics
from .order import cluster_orders, order_from_sums, order_parameter
from .pacemaker import PacemakerSwitch
from .selection import random_neighbor
from .state import OscillatorState

logger = logging.getLogger(__name__)


@dataclass
class ClusterSyncResults:
    """Final scalars of a cluster synchronization run."""

    final_order: float
    normalized_integrated_order: float
    initial_density: float
    final_density: float
    modularity_real: float
    time: float
    pacemaker_clusters: List[int] = field(default_factory=list)

    def as_row(self) -> Dict[str, float]:
        row = {k: v for k, v in self.__dict__.items() if k != "pacemaker_clusters"}
        row["pacemakers"] = len(self.pacemaker_clusters)
        return row


class ClusterSync:
    """Run the cluster-Kuramoto experiment described by ``config``.

    Parameters
    ----------
    config:
        Experiment parameters.
    topology:
        Optional prebuilt clustered topology. When omitted a network with
        ``config.nodes`` vertices, ``config.edges`` edges and
        ``config.clusters`` clusters at ``config.modularity_tgt`` is
        generated from ``config.seed``.
    """

    def __init__(self, config: ClusterSyncConfig | None = None, topology: Topology | None = None) -> None:
        self.config = config or ClusterSyncConfig()
        self.topology = topology
        self.recorder = TimeSeriesRecorder()
        self.state: OscillatorState | None = None
        self.order = 0.0
        self.time = 0.0
        self._summary: ConvergenceSummary | None = None

    # ------------------------------------------------------------------
    def _natural_frequencies(self) -> None:
        cfg = self.config
        topo = self.topology
        group_avgs = NormalDistribution(
            cfg.global_mean, cfg.global_mean * cfg.global_mean_width_factor, topo.rng
        )
        for cid in topo.cluster_ids:
            group_avg = group_avgs.sample()
            group = NormalDistribution(group_avg, group_avg * cfg.cluster_width_factor, topo.rng)
            for v in topo.nodes_in_cluster(cid):
                self.state.natural_frequency[v] = group.sample()

    def init(self) -> None:
        cfg = self.config
        if self.topology is None:
            self.topology = cluster_topology(
                cfg.nodes, cfg.edges, cfg.clusters, cfg.modularity_tgt, seed=cfg.seed
            )
        topo = self.topology
        if topo.vertex_count == 0:
            raise TopologyError("cannot synchronize an empty network")
        if not topo.has_clusters:
            raise TopologyError("cluster synchronization needs cluster ids on every vertex")

        self.state = OscillatorState(topo.vertex_count)
        self._natural_frequencies()
        self.state.randomize_phases(topo.rng)

        self.strengths = CouplingStrengths(topo, cfg.K)
        policy = KuramotoCoupling(topo, self.strengths, Weighting.UNWEIGHTED)
        self.coupling = CouplingEngine(topo, policy, random_neighbor(topo))
        self.advancer = PartitionedAdvancer(
            frequency_advance(cfg.dt), topo.vertex_count, cfg.thread_count
        )
        self.pacemaker = PacemakerSwitch(
            topo, self.strengths, cfg.order_threshold, cfg.pacemaker_prob
        )
        self.monitor = ConvergenceMonitor(cfg.order_threshold, cfg.time_threshold)
        self.monitor.start(self.strengths.density())
        logger.info(
            "Cluster synchronization on %d vertices / %d edges / %d clusters, K=%s",
            topo.vertex_count,
            topo.edge_count,
            len(topo.cluster_ids),
            cfg.K,
        )

    def step(self, step: int) -> bool:
        assert self.state is not None
        topo = self.topology
        self.coupling.coupling_phase(self.state)
        self.order = order_from_sums(*self.advancer.advance(self.state))
        self.time = step * self.config.dt

        self.recorder.add_data_point("GlobalOrder", self.time, self.order)
        stop = self.monitor.observe(self.time, self.order)
        logger.debug("Time %s, Order = %.2f", self.time, self.order)

        before = dict(self.pacemaker.mode)
        local = cluster_orders(self.state, topo)
        for cid, r in local.items():
            self.recorder.add_data_point(f"ClusterOrder_{cid}", self.time, r)
            self.pacemaker.evaluate(cid, r, self.time)

        if self.config.check_invariants:
            results = checks.from_state(
                self.state.phase, self.state.period, [self.order, *local.values()]
            )
            results["inv_pacemaker_monotonic_ok"] = checks.pacemaker_monotonic(
                [before, self.pacemaker.mode]
            )
            enforce_invariants(results)
        return stop

    def finish(self) -> None:
        self._summary = self.monitor.finish(self.strengths.density())
        if self.config.dynamics:
            path = self.recorder.write(self.config.dynamics)
            logger.info("Order time series written to %s", path)

    def collect(self) -> ClusterSyncResults:
        if self._summary is None:
            raise RuntimeError("collect() called before the run finished")
        s = self._summary
        return ClusterSyncResults(
            final_order=order_parameter(self.state),
            normalized_integrated_order=s.normalized_integrated_order,
            initial_density=s.initial_density,
            final_density=s.final_density,
            modularity_real=self.topology.modularity,
            time=s.elapsed_time,
            pacemaker_clusters=self.pacemaker.switched,
        )

    def run(self, max_steps: int | None = None) -> ClusterSyncResults:
        """Run to completion; ``max_steps`` caps the number of steps."""

        return run_dynamics(self, max_steps=max_steps)


__all__ = ["ClusterSyncResults", "ClusterSync"]
