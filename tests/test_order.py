import math

import numpy as np
import pytest

from Net_Sync.engine.order import (
    cluster_orders,
    merge_partial_sums,
    order_from_sums,
    order_parameter,
    phase_order,
)
from Net_Sync.engine.state import OscillatorState


def test_identical_phases_are_fully_ordered():
    assert phase_order([1.3] * 7) == pytest.approx(1.0)


def test_evenly_spread_phases_are_disordered():
    phases = [0.0, 2 * math.pi / 3, 4 * math.pi / 3]
    assert phase_order(phases) == pytest.approx(0.0, abs=1e-12)


def test_order_is_clamped_to_unit_interval():
    assert order_from_sums(3.0000000001, 0.0, 3) == 1.0


def test_empty_vertex_set_raises():
    state = OscillatorState(2)
    with pytest.raises(ValueError):
        order_parameter(state, [])


def test_order_of_subset(two_triangles):
    state = OscillatorState(6)
    for v in range(3):
        state.set_phase(v, 0.4)
    for v, phi in zip(range(3, 6), (0.0, 2 * math.pi / 3, 4 * math.pi / 3)):
        state.set_phase(v, phi)
    orders = cluster_orders(state, two_triangles)
    assert orders[0] == pytest.approx(1.0)
    assert orders[1] == pytest.approx(0.0, abs=1e-12)
    assert 0.0 <= order_parameter(state) <= 1.0


def test_merge_partial_sums_in_order():
    assert merge_partial_sums([(1.0, 2.0, 3), (0.5, -1.0, 2)]) == (1.5, 1.0, 5)


def test_random_phases_stay_in_bounds():
    rng = np.random.default_rng(9)
    for _ in range(20):
        r = phase_order(rng.uniform(0, 2 * math.pi, size=11))
        assert 0.0 <= r <= 1.0
