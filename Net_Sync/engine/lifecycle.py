"""Generic Init → Step → Finish → Collect driver for discrete dynamics."""

from __future__ import annotations

import logging
from typing import Generic, Mapping, Protocol, TypeVar

from ..errors import InvariantViolation

logger = logging.getLogger(__name__)

R = TypeVar("R", covariant=True)
T = TypeVar("T")


class Dynamics(Protocol[R]):
    """Discrete-time dynamics driven by :class:`SimulationLifecycle`."""

    def init(self) -> None:
        """Prepare all state; raise on inconsistent setup."""

    def step(self, step: int) -> bool:
        """Advance by one step; return ``True`` to request a stop."""

    def finish(self) -> None:
        """Produce final aggregates once the step loop has exited."""

    def collect(self) -> R:
        """Return the results of the run."""


class SimulationLifecycle(Generic[T]):
    """Own the stop flag and step counter of one run.

    Parameters
    ----------
    dynamics:
        The dynamics to drive.
    max_steps:
        Optional hard cap on the number of steps.
    """

    def __init__(self, dynamics: Dynamics[T], max_steps: int | None = None) -> None:
        self.dynamics = dynamics
        self.max_steps = max_steps
        self.step_count = 0
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True

    def run(self) -> T:
        """Drive the dynamics to completion and return their results."""

        self.dynamics.init()
        logger.info("Simulation initialised: %s", type(self.dynamics).__name__)
        while not self.stopped:
            if self.max_steps is not None and self.step_count >= self.max_steps:
                logger.info("Step limit %d reached", self.max_steps)
                break
            self.step_count += 1
            if self.dynamics.step(self.step_count):
                self.stop()
        self.dynamics.finish()
        logger.info("Simulation finished after %d steps", self.step_count)
        return self.dynamics.collect()


def run_dynamics(dynamics: Dynamics[T], *, max_steps: int | None = None) -> T:
    """Run ``dynamics`` through its full lifecycle."""

    return SimulationLifecycle(dynamics, max_steps=max_steps).run()


def enforce_invariants(results: Mapping[str, bool]) -> None:
    """Raise :class:`InvariantViolation` naming every failed invariant."""

    bad = sorted(name for name, ok in results.items() if not ok)
    if bad:
        raise InvariantViolation(f"invariants violated: {', '.join(bad)}")


__all__ = ["Dynamics", "SimulationLifecycle", "run_dynamics", "enforce_invariants"]
