"""Advance-and-measure phase of a step.

Every vertex's update depends only on its own state, so the index range is
split into static contiguous chunks, one per worker. A worker writes only
the slots of its chunk and returns the partial sums of sine and cosine over
it; the partial sums are merged in chunk order once all workers are done.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Protocol, Tuple

import numpy as np

from .order import PartialSums, merge_partial_sums
from .state import OscillatorState, clock_phase, wrap_phase


class AdvanceRule(Protocol):
    """Update the state of the vertices in ``chunk`` by one step."""

    def __call__(self, state: OscillatorState, chunk: slice) -> None:
        ...


def clock_advance(state: OscillatorState, chunk: slice) -> None:
    """Tick the local clock and derive the phase from clock and period."""

    state.local_clock[chunk] += 1
    state.phase[chunk] = clock_phase(state.local_clock[chunk], state.period[chunk])


def frequency_advance(dt: float) -> AdvanceRule:
    """Euler step ``phase += dt · (natural_frequency + drive)``.

    The coupling drive of the chunk is consumed and reset to zero.
    """

    def _advance(state: OscillatorState, chunk: slice) -> None:
        velocity = state.natural_frequency[chunk] + state.drive[chunk]
        state.phase[chunk] = wrap_phase(state.phase[chunk] + dt * velocity)
        state.drive[chunk] = 0.0
        state.local_clock[chunk] += 1

    return _advance


def partition(size: int, workers: int) -> List[slice]:
    """Split ``range(size)`` into at most ``workers`` contiguous slices."""

    workers = max(1, min(workers, size)) if size else 1
    bounds = np.linspace(0, size, workers + 1).astype(int)
    return [slice(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:])]


class PartitionedAdvancer:
    """Apply an :class:`AdvanceRule` over a static vertex partition.

    Parameters
    ----------
    rule:
        Per-chunk update.
    size:
        Number of vertices.
    workers:
        Number of worker threads; ``1`` runs inline on the caller's thread.
    """

    def __init__(self, rule: AdvanceRule, size: int, workers: int = 1) -> None:
        self.rule = rule
        self.workers = workers
        self.chunks = partition(size, workers)

    def _work(self, state: OscillatorState) -> Callable[[slice], PartialSums]:
        def _run(chunk: slice) -> PartialSums:
            self.rule(state, chunk)
            state.refresh_signal(chunk)
            count = chunk.stop - chunk.start
            return (
                float(state.sine[chunk].sum()),
                float(state.cosine[chunk].sum()),
                count,
            )

        return _run

    def advance(self, state: OscillatorState) -> Tuple[float, float, int]:
        """Advance all vertices and return the merged ``(Σsin, Σcos, n)``."""

        work = self._work(state)
        if self.workers <= 1 or len(self.chunks) <= 1:
            partials = [work(chunk) for chunk in self.chunks]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as ex:
                partials = list(ex.map(work, self.chunks))
        return merge_partial_sums(partials)


__all__ = [
    "AdvanceRule",
    "clock_advance",
    "frequency_advance",
    "partition",
    "PartitionedAdvancer",
]
