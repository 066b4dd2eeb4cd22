import math

import numpy as np
import pytest

from Net_Sync.config import ClusterSyncConfig
from Net_Sync.engine.cluster_sync import ClusterSync
from Net_Sync.engine.order import cluster_orders
from Net_Sync.errors import TopologyError
from Net_Sync.graph import from_edges
from telemetry import read_time_series

SMALL = dict(nodes=40, edges=120, clusters=4, modularity_tgt=0.4, K=5.0, time_threshold=100.0)


def test_complete_graph_synchronizes_within_bounded_time(complete_topology):
    cfg = ClusterSyncConfig(
        K=10.0,
        order_threshold=0.95,
        time_threshold=50.0,
        global_mean_width_factor=1e-3,
        cluster_width_factor=1e-3,
    )
    result = ClusterSync(cfg, complete_topology).run()
    assert result.final_order >= 0.95 - 1e-9
    assert result.time < 20.0


def test_records_global_and_cluster_order_series():
    cfg = ClusterSyncConfig(**SMALL)
    sync = ClusterSync(cfg)
    sync.run(max_steps=10)
    names = set(sync.recorder.names())
    assert names == {"GlobalOrder"} | {f"ClusterOrder_{c}" for c in range(4)}
    series = sync.recorder["GlobalOrder"]
    assert len(series) == 10
    assert series.times[0] == pytest.approx(0.01)
    assert series.times[-1] == pytest.approx(0.1)


def test_time_series_written_on_finish(tmp_path):
    out = tmp_path / "dynamics.csv"
    cfg = ClusterSyncConfig(dynamics=str(out), **SMALL)
    result = ClusterSync(cfg).run(max_steps=5)
    recorded = read_time_series(out)
    assert len(recorded["GlobalOrder"]) == 5
    assert recorded["GlobalOrder"].last() == pytest.approx(result.final_order)


def test_failed_setup_writes_no_file(tmp_path):
    out = tmp_path / "dynamics.csv"
    cfg = ClusterSyncConfig(dynamics=str(out))
    with pytest.raises(TopologyError):
        ClusterSync(cfg, from_edges([(0, 1)])).run()
    assert not out.exists()


def test_identical_config_reproduces_results():
    cfg = ClusterSyncConfig(seed=7, **SMALL)
    assert ClusterSync(cfg).run(max_steps=50) == ClusterSync(cfg).run(max_steps=50)


def test_thread_count_does_not_change_phases():
    phases = []
    for threads in (1, 4):
        cfg = ClusterSyncConfig(order_threshold=1.0, thread_count=threads, **SMALL)
        sync = ClusterSync(cfg)
        sync.run(max_steps=50)
        phases.append(sync.state.phase)
    assert np.array_equal(phases[0], phases[1])


def test_synchronized_cluster_switches_to_pacemaker(two_triangles):
    cfg = ClusterSyncConfig(
        K=1.0, order_threshold=0.95, pacemaker_prob=1.0, check_invariants=True
    )
    sync = ClusterSync(cfg, two_triangles)
    sync.init()
    sync.state.natural_frequency[:] = 1.0
    sync.state.phase[:3] = 0.3
    sync.state.phase[3:] = [0.3 + 2 * math.pi / 3, 0.3 + 4 * math.pi / 3, 0.3]
    sync.state.refresh_signal()

    assert not sync.step(1)

    assert sync.pacemaker.mode == {0: True, 1: False}
    assert sync.strengths[2, 0] == sync.strengths[2, 1] == 0.0
    assert sync.strengths[2, 3] == 1.0

    sync.step(2)
    sync.finish()
    result = sync.collect()
    assert result.pacemaker_clusters[0] == 0
    assert result.final_density < result.initial_density


def test_modularity_is_reported():
    cfg = ClusterSyncConfig(**SMALL)
    sync = ClusterSync(cfg)
    result = sync.run(max_steps=1)
    assert result.modularity_real == pytest.approx(sync.topology.modularity)
    assert result.modularity_real > 0.1


def test_cluster_series_match_cluster_orders():
    sync = ClusterSync(ClusterSyncConfig(**SMALL))
    sync.run(max_steps=3)
    expected = cluster_orders(sync.state, sync.topology)
    for cid, r in expected.items():
        assert sync.recorder[f"ClusterOrder_{cid}"].last() == pytest.approx(r)
