"""Gossip ("epidemic") synchronization of clock oscillators.

Every vertex keeps an integer clock and a period. Its phase is the position
of the clock inside the current period. In each step every vertex gossips
with one neighbour and both adjust their periods toward each other; then
all clocks tick and the global order parameter is measured.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Tuple

from invariants import checks

from ..config import EpidemicConfig
from ..errors import TopologyError
from ..graph.topology import Topology
from .advance import PartitionedAdvancer, clock_advance
from .convergence import ConvergenceMonitor, ConvergenceSummary
from .coupling import CouplingEngine, CouplingStrengths, GossipCoupling
from .distributions import NormalDistribution
from .edge_stats import EdgeStatisticsTracker
from .lifecycle import enforce_invariants, run_dynamics
from .order import order_from_sums
from .selection import NeighborSelector, random_neighbor, sampled_neighbor
from .state import OscillatorState

logger = logging.getLogger(__name__)


@dataclass
class SyncResults:
    """Outcome of one gossip synchronization run.

    ``time`` is the number of simulated steps. ``edge_frequency`` holds the
    min-max normalised number of times each edge was used for coupling.
    """

    order: float
    time: int
    integrated_order: float = 0.0
    initial_density: float = 0.0
    final_density: float = 0.0
    edge_frequency: Dict[Tuple[Hashable, Hashable], float] = field(default_factory=dict)


class EpidemicSynchronization:
    """Gossip clock synchronization on ``topology``.

    Parameters
    ----------
    topology:
        Network to synchronize. Its random generator drives neighbour
        selection, period sampling and the initial clock skew.
    config:
        Run parameters; defaults to :class:`EpidemicConfig`.
    selector:
        Neighbour selection policy. Defaults to a uniformly random
        neighbour, or to :func:`.sampled_neighbor` at
        ``config.coupling_probability`` when ``compensate_sampling`` is set.
    """

    def __init__(
        self,
        topology: Topology,
        config: EpidemicConfig | None = None,
        selector: NeighborSelector | None = None,
    ) -> None:
        self.topology = topology
        self.config = config or EpidemicConfig()
        if selector is None:
            if self.config.compensate_sampling:
                selector = sampled_neighbor(topology, self.config.coupling_probability)
            else:
                selector = random_neighbor(topology)
        self.selector = selector
        self.state: OscillatorState | None = None
        self.strengths: CouplingStrengths | None = None
        self.order = 0.0
        self._summary: ConvergenceSummary | None = None

    # ------------------------------------------------------------------
    def _overrides(self, values) -> Dict[int, float]:
        idx = self.topology.indices_of(values.keys())
        return dict(zip(idx, values.values()))

    def init(self) -> None:
        topo = self.topology
        cfg = self.config
        if topo.vertex_count == 0:
            raise TopologyError("cannot synchronize an empty network")

        self.state = OscillatorState(topo.vertex_count)
        dist = NormalDistribution(cfg.mu_period, cfg.sigma_period, topo.rng)
        self.state.sample_periods(
            dist,
            cfg.mu_period,
            cfg.sigma_period,
            self._overrides(cfg.mu_periods),
            self._overrides(cfg.sigma_periods),
        )
        self.state.seed_clocks(topo.rng, cfg.skew)

        self.strengths = CouplingStrengths(topo, cfg.coupling_strength)
        self.policy = GossipCoupling(topo, self.strengths, cfg.weighting, cfg.compensation)
        self.tracker = EdgeStatisticsTracker(topo)
        self.coupling = CouplingEngine(topo, self.policy, self.selector, self.tracker)
        self.advancer = PartitionedAdvancer(clock_advance, topo.vertex_count, cfg.thread_count)
        self.monitor = ConvergenceMonitor(cfg.order_threshold, cfg.max_time)
        self.monitor.start(self.strengths.density())
        logger.info(
            "Gossip synchronization on %d vertices / %d edges (weighting=%s)",
            topo.vertex_count,
            topo.edge_count,
            cfg.weighting.value,
        )

    def step(self, step: int) -> bool:
        assert self.state is not None
        self.coupling.coupling_phase(self.state)
        self.order = order_from_sums(*self.advancer.advance(self.state))
        logger.debug("Time %s, Order = %.2f", step, self.order)
        if self.config.check_invariants:
            enforce_invariants(
                checks.from_state(self.state.phase, self.state.period, [self.order])
            )
        return self.monitor.observe(step, self.order)

    def finish(self) -> None:
        assert self.strengths is not None
        self._summary = self.monitor.finish(self.strengths.density(), self.order)
        if self.policy.discarded:
            logger.debug("%d period adjustments discarded", self.policy.discarded)

    def collect(self) -> SyncResults:
        if self._summary is None:
            raise RuntimeError("collect() called before the run finished")
        s = self._summary
        return SyncResults(
            order=s.final_order,
            time=s.steps,
            integrated_order=s.integrated_order,
            initial_density=s.initial_density,
            final_density=s.final_density,
            edge_frequency=self.tracker.as_mapping(normalized=True),
        )

    def run(self, max_steps: int | None = None) -> SyncResults:
        """Run to completion; ``max_steps`` caps the number of steps."""

        return run_dynamics(self, max_steps=max_steps)


__all__ = ["SyncResults", "EpidemicSynchronization"]
