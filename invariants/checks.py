"""Invariant checks used by the dynamics when ``check_invariants`` is on."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Mapping, Sequence

import numpy as np

TWO_PI = 2.0 * math.pi


def phases_in_range(phase: np.ndarray) -> bool:
    """Every phase lies in ``[0, 2π)``."""

    return bool(np.all((phase >= 0.0) & (phase < TWO_PI)))


def periods_positive(period: np.ndarray) -> bool:
    """Every period is strictly positive."""

    return bool(np.all(period > 0.0))


def order_in_bounds(order: float) -> bool:
    """The order parameter lies in ``[0, 1]``."""

    return 0.0 <= order <= 1.0


def pacemaker_monotonic(history: Sequence[Mapping[int, bool]]) -> bool:
    """Pacemaker flags never revert from ``True`` to ``False``.

    ``history`` holds one snapshot of the flags per step.
    """

    seen: set[int] = set()
    for flags in history:
        current = {cid for cid, on in flags.items() if on}
        if not seen <= current:
            return False
        seen = current
    return True


def from_state(phase: np.ndarray, period: np.ndarray, orders: Iterable[float]) -> Dict[str, bool]:
    """Evaluate the per-step invariants and return them by name."""

    return {
        "inv_phase_range_ok": phases_in_range(phase),
        "inv_period_positive_ok": periods_positive(period),
        "inv_order_bounds_ok": all(order_in_bounds(r) for r in orders),
    }
