import networkx as nx
import yaml

from Net_Sync.main import main

CLUSTER_CFG = {
    "nodes": 30,
    "edges": 60,
    "clusters": 3,
    "modularity_tgt": 0.3,
    "time_threshold": 0.2,
}


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


def test_cluster_prints_tab_separated_results(tmp_path, capsys):
    cfg = _write(tmp_path, "cluster.yaml", CLUSTER_CFG)
    out = tmp_path / "dynamics.csv"
    assert main(["cluster", "--config", str(cfg), "--out", str(out), "--threads", "2"]) == 0
    fields = capsys.readouterr().out.strip().split("\t")
    assert len(fields) == 6
    assert 0.0 <= float(fields[0]) <= 1.0
    assert out.read_text().startswith("series,time,value")


def test_gossip_on_random_graph(tmp_path, capsys):
    out = tmp_path / "gossip.yaml"
    argv = ["gossip", "--nodes", "20", "--edges", "40", "--max-steps", "10", "--out", str(out)]
    assert main(argv) == 0
    fields = capsys.readouterr().out.strip().split("\t")
    assert len(fields) == 5
    assert int(fields[1]) <= 10
    data = yaml.safe_load(out.read_text())
    assert len(data["edge_frequency"]) == 40


def test_gossip_reads_edge_list(tmp_path, capsys):
    graph = tmp_path / "ring.edges"
    nx.write_edgelist(nx.cycle_graph(8), graph, data=False)
    cfg = _write(tmp_path, "gossip.yaml", {"mu_periods": {0: 80.0}})
    argv = ["gossip", "--graph", str(graph), "--config", str(cfg), "--max-steps", "5", "--check"]
    assert main(argv) == 0
    assert len(capsys.readouterr().out.strip().split("\t")) == 5


def test_check_validates_configuration(tmp_path, capsys):
    good = _write(tmp_path, "good.yaml", CLUSTER_CFG)
    assert main(["check", "cluster", "--config", str(good)]) == 0
    assert yaml.safe_load(capsys.readouterr().out)["nodes"] == 30

    bad = _write(tmp_path, "bad.yaml", {"dt": -1})
    assert main(["check", "cluster", "--config", str(bad)]) == 1
    assert "dt" in capsys.readouterr().err
