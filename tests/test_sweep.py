import pandas as pd
import pytest
import yaml

from tools import sweep


def test_sweep_writes_one_row_per_grid_point(tmp_path):
    config = {
        "cluster": {
            "nodes": 20,
            "edges": 40,
            "clusters": 2,
            "time_threshold": 0.1,
            "K": [1.0, 5.0],
            "seed": [0, 1],
        }
    }
    path = tmp_path / "grid.yaml"
    path.write_text(yaml.safe_dump(config))

    written = sweep.main(str(path), str(tmp_path))

    df = pd.read_csv(written["cluster"])
    assert len(df) == 4
    assert {"K", "seed", "final_order", "modularity_real", "pacemakers"} <= set(df.columns)
    assert df["final_order"].between(0.0, 1.0).all()


def test_unknown_experiment_is_rejected():
    with pytest.raises(ValueError):
        sweep.sweep({"nope": {"a": [1]}})
