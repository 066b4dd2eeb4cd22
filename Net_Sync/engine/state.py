"""Per-vertex oscillator state.

The store follows the struct-of-arrays layout: one numpy array per
quantity, indexed by the dense vertex index of the topology. Each array is
owned by the engine for the lifetime of one simulation instance.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping

import numpy as np

from .distributions import NormalDistribution

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def clock_phase(clock: np.ndarray, period: np.ndarray) -> np.ndarray:
    """Phase ``2π · ((clock mod period) / period)`` wrapped into ``[0, 2π)``."""

    cycle = np.mod(np.mod(clock, period) / period, 1.0)
    return wrap_phase(TWO_PI * cycle)


def wrap_phase(phase: np.ndarray) -> np.ndarray:
    """Wrap ``phase`` into ``[0, 2π)``.

    ``np.mod`` may round tiny negative inputs up to exactly ``2π``; those
    values are folded back to ``0``.
    """

    phase = np.mod(phase, TWO_PI)
    return np.where(phase >= TWO_PI, 0.0, phase)


@dataclass
class OscillatorState:
    """Struct-of-arrays container of oscillator state.

    Attributes
    ----------
    phase:
        Current phase in ``[0, 2π)``.
    period:
        Current period, strictly positive. Only the gossip policy evolves it.
    local_clock:
        Integer tick counter of every vertex.
    sine, cosine:
        Cached ``sin`` and ``cos`` of ``phase``; refreshed every step.
    natural_frequency:
        Intrinsic angular velocity used by the Kuramoto policy.
    drive:
        Coupling contribution to the angular velocity accumulated during the
        coupling phase of the current step.
    """

    size: int
    phase: np.ndarray = field(init=False)
    period: np.ndarray = field(init=False)
    local_clock: np.ndarray = field(init=False)
    sine: np.ndarray = field(init=False)
    cosine: np.ndarray = field(init=False)
    natural_frequency: np.ndarray = field(init=False)
    drive: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        n = self.size
        self.phase = np.zeros(n, dtype=float)
        self.period = np.ones(n, dtype=float)
        self.local_clock = np.zeros(n, dtype=np.int64)
        self.sine = np.zeros(n, dtype=float)
        self.cosine = np.ones(n, dtype=float)
        self.natural_frequency = np.zeros(n, dtype=float)
        self.drive = np.zeros(n, dtype=float)

    def __len__(self) -> int:
        return self.size

    # ---- accessors ----------------------------------------------------
    def get_phase(self, v: int) -> float:
        return float(self.phase[v])

    def set_phase(self, v: int, value: float) -> None:
        self.phase[v] = float(wrap_phase(np.asarray(value)))
        self.refresh_signal(v)

    def get_period(self, v: int) -> float:
        return float(self.period[v])

    def set_period(self, v: int, value: float) -> None:
        if not value > 0:
            raise ValueError(f"period must be positive, got {value!r}")
        self.period[v] = value

    def get_clock(self, v: int) -> int:
        return int(self.local_clock[v])

    def set_clock(self, v: int, value: int) -> None:
        if value < 0:
            raise ValueError("local clock must not be negative")
        self.local_clock[v] = value

    def get_sine(self, v: int) -> float:
        return float(self.sine[v])

    def get_cosine(self, v: int) -> float:
        return float(self.cosine[v])

    def refresh_signal(self, v: int | slice | np.ndarray = slice(None)) -> None:
        """Recompute the cached sine and cosine of ``v`` from its phase."""

        self.sine[v] = np.sin(self.phase[v])
        self.cosine[v] = np.cos(self.phase[v])

    # ---- initialisation -------------------------------------------------
    def sample_periods(
        self,
        distribution: NormalDistribution,
        mean: float,
        std: float,
        mean_overrides: Mapping[int, float] | None = None,
        std_overrides: Mapping[int, float] | None = None,
    ) -> None:
        """Draw the period of every vertex from ``distribution``.

        ``mean_overrides`` and ``std_overrides`` map vertex indices to
        per-vertex shape parameters taking precedence over ``mean`` and
        ``std``. Non-positive draws are redrawn.
        """

        mean_overrides = mean_overrides or {}
        std_overrides = std_overrides or {}
        for v in range(self.size):
            distribution.mean = mean_overrides.get(v, mean)
            distribution.std = std_overrides.get(v, std)
            self.period[v] = distribution.sample_positive()

    def seed_clocks(self, rng: np.random.Generator, max_skew: int) -> None:
        """Give every vertex a random clock in ``[0, max_skew)``.

        Phases and cached signals are derived from the new clocks.
        """

        self.local_clock[:] = rng.integers(0, max_skew, size=self.size)
        self.phase[:] = clock_phase(self.local_clock, self.period)
        self.refresh_signal()

    def randomize_phases(self, rng: np.random.Generator) -> None:
        """Draw phases uniformly from ``[0, 2π)``."""

        self.phase[:] = wrap_phase(rng.uniform(0.0, TWO_PI, size=self.size))
        self.refresh_signal()

    def snapshot(self) -> dict[str, np.ndarray]:
        """Return copies of all arrays keyed by name."""

        return {
            "phase": self.phase.copy(),
            "period": self.period.copy(),
            "local_clock": self.local_clock.copy(),
            "sine": self.sine.copy(),
            "cosine": self.cosine.copy(),
            "natural_frequency": self.natural_frequency.copy(),
        }


__all__ = ["TWO_PI", "OscillatorState", "clock_phase", "wrap_phase"]
