import numpy as np
import pytest

from Net_Sync.engine.advance import (
    PartitionedAdvancer,
    clock_advance,
    frequency_advance,
    partition,
)
from Net_Sync.engine.state import TWO_PI, OscillatorState


def test_partition_covers_range_in_order():
    chunks = partition(10, 3)
    assert len(chunks) == 3
    covered = [i for c in chunks for i in range(c.start, c.stop)]
    assert covered == list(range(10))
    assert partition(2, 8) == [slice(0, 1), slice(1, 2)]


def test_clock_advance_ticks_and_derives_phase():
    state = OscillatorState(4)
    state.period[:] = 4.0
    s, c, n = PartitionedAdvancer(clock_advance, 4, workers=2).advance(state)
    assert state.local_clock.tolist() == [1, 1, 1, 1]
    assert np.allclose(state.phase, TWO_PI / 4)
    assert n == 4
    assert s == pytest.approx(4.0)
    assert c == pytest.approx(0.0, abs=1e-12)


def test_frequency_advance_consumes_drive():
    state = OscillatorState(3)
    state.natural_frequency[:] = 1.0
    state.drive[:] = [0.0, 1.0, -1.0]
    PartitionedAdvancer(frequency_advance(0.5), 3).advance(state)
    assert state.phase.tolist() == pytest.approx([0.5, 1.0, 0.0])
    assert np.all(state.drive == 0.0)


def test_worker_count_does_not_change_result():
    rng = np.random.default_rng(0)
    a = OscillatorState(101)
    a.natural_frequency[:] = rng.normal(1.0, 0.2, size=101)
    a.randomize_phases(rng)
    b = OscillatorState(101)
    b.natural_frequency[:] = a.natural_frequency
    b.phase[:] = a.phase
    rule = frequency_advance(0.01)
    sums_a = PartitionedAdvancer(rule, 101, workers=1).advance(a)
    sums_b = PartitionedAdvancer(rule, 101, workers=4).advance(b)
    assert np.array_equal(a.phase, b.phase)
    assert sums_a[0] == pytest.approx(sums_b[0])
    assert sums_a[2] == sums_b[2] == 101
