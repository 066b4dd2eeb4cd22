"""Cluster pacemaker switch.

Once the local order of a cluster exceeds the threshold for the first time,
its boundary vertices (members with at least one inter-cluster edge)
probabilistically stop listening to neighbours that are not boundary
vertices themselves: ``strength(v→w)`` is set to zero with independent
probability ``pacemaker_prob`` per edge. The switch happens once per
cluster and is never undone.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Tuple

from ..graph.topology import Topology
from .coupling import CouplingStrengths

logger = logging.getLogger(__name__)


class PacemakerSwitch:
    """Track and apply the one-way pacemaker mode of every cluster.

    Parameters
    ----------
    topology:
        Clustered topology; also the random source for the per-edge draws.
    strengths:
        Coupling strengths mutated by the switch.
    threshold:
        Local order a cluster must exceed to switch.
    probability:
        Per-edge probability of decoupling.
    """

    def __init__(
        self,
        topology: Topology,
        strengths: CouplingStrengths,
        threshold: float,
        probability: float,
    ) -> None:
        self.topology = topology
        self.strengths = strengths
        self.threshold = threshold
        self.probability = probability
        self.mode: Dict[int, bool] = {cid: False for cid in topology.cluster_ids}
        self.switched_at: Dict[int, float] = {}
        self.decoupled: List[Tuple[int, int]] = []

    def evaluate(self, cid: int, local_order: float, time: float = 0.0) -> bool:
        """Switch cluster ``cid`` if its order exceeds the threshold.

        Returns ``True`` if the cluster switched during this call.
        """

        if self.mode[cid] or not local_order > self.threshold:
            return False
        self.mode[cid] = True
        self.switched_at[cid] = time
        removed = self._decouple(cid)
        logger.info(
            "Cluster %s switched to pacemaker mode at time %s (%d couplings removed)",
            cid,
            time,
            removed,
        )
        return True

    def evaluate_all(self, orders: Mapping[int, float], time: float = 0.0) -> List[int]:
        """Evaluate every cluster in ``orders``; return the ids that switched."""

        return [cid for cid, r in orders.items() if self.evaluate(cid, r, time)]

    def _decouple(self, cid: int) -> int:
        topo = self.topology
        removed = 0
        for v in topo.nodes_in_cluster(cid):
            v = int(v)
            if not topo.has_inter_cluster_connection(v):
                continue
            for w in topo.neighbors[v]:
                w = int(w)
                if topo.has_inter_cluster_connection(w):
                    continue
                if topo.next_random_double() < self.probability:
                    self.strengths[v, w] = 0.0
                    self.decoupled.append((v, w))
                    removed += 1
                    logger.debug(
                        "Vertex %r switched to pacemaker mode", topo.vertices[v]
                    )
        return removed

    @property
    def switched(self) -> List[int]:
        return [cid for cid, on in self.mode.items() if on]


__all__ = ["PacemakerSwitch"]
