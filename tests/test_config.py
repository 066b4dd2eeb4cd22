import json

import pytest

from Net_Sync.config import (
    ClusterSyncConfig,
    EpidemicConfig,
    Weighting,
    load_config,
    read_mapping,
    with_overrides,
)
from Net_Sync.errors import ConfigError, DistributionError


def test_defaults():
    cfg = EpidemicConfig()
    assert cfg.weighting is Weighting.DEGREE
    assert cfg.skew == 100
    assert cfg.compensation == 1.0
    assert cfg.max_time == 100000.0
    cluster = ClusterSyncConfig()
    assert (cluster.nodes, cluster.edges, cluster.clusters) == (500, 4000, 20)
    assert cluster.order_threshold == 0.95


def test_compensation_is_inverse_probability():
    cfg = EpidemicConfig(compensate_sampling=True, coupling_probability=0.25)
    assert cfg.compensation == pytest.approx(4.0)


def test_from_mapping_converts_weighting_and_rejects_unknown_keys():
    cfg = EpidemicConfig.from_mapping({"weighting": "double_degree"})
    assert cfg.weighting is Weighting.DOUBLE_DEGREE
    with pytest.raises(ConfigError, match="bogus"):
        ClusterSyncConfig.from_mapping({"bogus": 1})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dt": 0.0},
        {"clusters": 600},
        {"order_threshold": 1.5},
        {"pacemaker_prob": -0.1},
        {"thread_count": 0},
    ],
)
def test_invalid_cluster_values(kwargs):
    with pytest.raises(ConfigError):
        ClusterSyncConfig(**kwargs)


def test_non_positive_widths_are_distribution_errors():
    with pytest.raises(DistributionError):
        EpidemicConfig(sigma_period=0.0)
    with pytest.raises(DistributionError):
        ClusterSyncConfig(global_mean_width_factor=0.0)


def test_with_overrides_ignores_none():
    cfg = ClusterSyncConfig()
    assert with_overrides(cfg, seed=None) is cfg
    assert with_overrides(cfg, seed=3, thread_count=None).seed == 3
    with pytest.raises(ConfigError):
        with_overrides(cfg, dt=-1.0)


def test_load_yaml_toml_and_json(tmp_path):
    yml = tmp_path / "gossip.yaml"
    yml.write_text("mu_period: 50\nweighting: unweighted\n")
    assert load_config(yml, kind="gossip").weighting is Weighting.UNWEIGHTED

    toml = tmp_path / "cluster.toml"
    toml.write_text("nodes = 30\nclusters = 3\n")
    assert load_config(toml).nodes == 30

    js = tmp_path / "cluster.json"
    js.write_text(json.dumps({"K": 2.5}))
    assert load_config(js, kind="cluster").K == 2.5


def test_loader_errors(tmp_path):
    bad = tmp_path / "cfg.ini"
    bad.write_text("")
    with pytest.raises(ConfigError):
        read_mapping(bad)
    lst = tmp_path / "list.yaml"
    lst.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigError):
        read_mapping(lst)
    with pytest.raises(ConfigError):
        load_config(lst, kind="unknown")


def test_to_dict_round_trips():
    cfg = EpidemicConfig(weighting=Weighting.DOUBLE_DEGREE, mu_periods={1: 5.0})
    data = cfg.to_dict()
    assert data["weighting"] == "double_degree"
    assert EpidemicConfig.from_mapping(data) == cfg
