import pytest

from Net_Sync.engine.lifecycle import SimulationLifecycle, enforce_invariants, run_dynamics
from Net_Sync.errors import InvariantViolation


class _Countdown:
    def __init__(self, stop_at):
        self.stop_at = stop_at
        self.calls = []

    def init(self):
        self.calls.append("init")

    def step(self, step):
        self.calls.append(step)
        return step >= self.stop_at

    def finish(self):
        self.calls.append("finish")

    def collect(self):
        return self.calls


def test_run_drives_init_steps_finish_collect():
    assert run_dynamics(_Countdown(3)) == ["init", 1, 2, 3, "finish"]


def test_step_cap_ends_the_run():
    lifecycle = SimulationLifecycle(_Countdown(100), max_steps=2)
    assert lifecycle.run() == ["init", 1, 2, "finish"]
    assert lifecycle.step_count == 2
    assert not lifecycle.stopped


def test_enforce_invariants_names_failures():
    enforce_invariants({"inv_a_ok": True})
    with pytest.raises(InvariantViolation, match="inv_b_ok"):
        enforce_invariants({"inv_a_ok": True, "inv_b_ok": False})
