"""Stop conditions and final aggregate metrics of a run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    INITIALIZED = "initialized"
    RUNNING = "running"
    STOPPED = "stopped"
    FINISHED = "finished"


class StopReason(str, Enum):
    NONE = "none"
    ORDER = "order_threshold"
    TIME = "time_threshold"
    STEP_LIMIT = "step_limit"


@dataclass(frozen=True)
class ConvergenceSummary:
    """Aggregate metrics produced when a run finishes."""

    final_order: float
    integrated_order: float
    normalized_integrated_order: float
    initial_density: float
    final_density: float
    elapsed_time: float
    steps: int
    reason: StopReason


class ConvergenceMonitor:
    """Decide after every step whether the run stops.

    The monitor moves through ``INITIALIZED → RUNNING → STOPPED →
    FINISHED``. A run stops once the global order reaches
    ``order_threshold`` or the simulated time exceeds ``time_threshold``;
    both conditions are terminal.

    Parameters
    ----------
    order_threshold:
        Global order at which the population counts as synchronized.
    time_threshold:
        Maximum simulated time, ``None`` for no limit.
    """

    def __init__(self, order_threshold: float, time_threshold: float | None = None) -> None:
        self.order_threshold = order_threshold
        self.time_threshold = time_threshold
        self.state = RunState.INITIALIZED
        self.reason = StopReason.NONE
        self.integrated_order = 0.0
        self.last_order = 0.0
        self.time = 0.0
        self.steps = 0
        self.initial_density = 0.0

    def _expect(self, *states: RunState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise RuntimeError(
                f"monitor is {self.state.value}, expected one of: {allowed}"
            )

    def start(self, initial_density: float) -> None:
        """Record the initial coupling density and begin running."""

        self._expect(RunState.INITIALIZED)
        self.initial_density = initial_density
        self.state = RunState.RUNNING

    def observe(self, time: float, order: float) -> bool:
        """Account for one completed step and return ``True`` to stop."""

        self._expect(RunState.RUNNING)
        self.steps += 1
        self.time = time
        self.last_order = order
        self.integrated_order += order
        if order >= self.order_threshold:
            self.reason = StopReason.ORDER
        elif self.time_threshold is not None and time > self.time_threshold:
            self.reason = StopReason.TIME
        else:
            return False
        self.state = RunState.STOPPED
        logger.info(
            "Run stopped at time %s with order %.4f (%s)",
            time,
            order,
            self.reason.value,
        )
        return True

    def halt(self) -> None:
        """Stop a running monitor because an external step cap was reached."""

        self._expect(RunState.RUNNING)
        self.reason = StopReason.STEP_LIMIT
        self.state = RunState.STOPPED

    @property
    def stopped(self) -> bool:
        return self.state in (RunState.STOPPED, RunState.FINISHED)

    def finish(self, final_density: float, final_order: float | None = None) -> ConvergenceSummary:
        """Produce the final aggregate metrics.

        ``normalized_integrated_order`` is the running sum of per-step order
        divided by the elapsed simulated time (``0`` if no time elapsed).
        """

        if self.state is RunState.RUNNING:
            self.halt()
        self._expect(RunState.STOPPED)
        self.state = RunState.FINISHED
        normalized = self.integrated_order / self.time if self.time > 0 else 0.0
        return ConvergenceSummary(
            final_order=self.last_order if final_order is None else final_order,
            integrated_order=self.integrated_order,
            normalized_integrated_order=normalized,
            initial_density=self.initial_density,
            final_density=final_density,
            elapsed_time=self.time,
            steps=self.steps,
            reason=self.reason,
        )


__all__ = ["RunState", "StopReason", "ConvergenceSummary", "ConvergenceMonitor"]
