"""Parameter sweeps over the cluster synchronization experiment.

The sweep file maps an experiment name to its parameters. List-valued
parameters span the grid; scalar parameters are held fixed::

    cluster:
      nodes: 100
      edges: 400
      clusters: 5
      K: [1.0, 5.0, 10.0]
      modularity_tgt: [0.0, 0.4]
      seed: [0, 1, 2]

Each experiment writes ``<name>_sweep.csv`` with one row per grid point.
"""

from __future__ import annotations

import argparse
import itertools
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator

import pandas as pd
import yaml

from Net_Sync.config import ClusterSyncConfig
from Net_Sync.engine import ClusterSync

logger = logging.getLogger(__name__)


def _run_experiment(name: str, params: Dict[str, Any]) -> Dict[str, Any]:
    """Run one grid point of experiment ``name`` and return its outputs."""

    if name == "cluster":
        cfg = ClusterSyncConfig.from_mapping(params)
        return ClusterSync(cfg).run().as_row()
    raise ValueError(f"unknown experiment {name}")


def _iter_grid(grid: Dict[str, Iterable[Any]]) -> Iterator[Dict[str, Any]]:
    keys = list(grid)
    for values in itertools.product(*(grid[k] for k in keys)):
        yield dict(zip(keys, values))


def sweep(config: Dict[str, Any], out_dir: str | Path = ".") -> Dict[str, Path]:
    """Execute the sweeps defined in ``config``; return the CSV paths."""

    out_dir = Path(out_dir)
    written: Dict[str, Path] = {}
    for name, entry in config.items():
        grid = {k: v for k, v in entry.items() if isinstance(v, list)}
        fixed = {k: v for k, v in entry.items() if not isinstance(v, list)}
        rows = []
        for combo in _iter_grid(grid):
            params = {**fixed, **combo}
            logger.info("%s sweep point %s", name, combo)
            rows.append({**combo, **_run_experiment(name, params)})
        df = pd.DataFrame(rows)
        csv_path = out_dir / f"{name}_sweep.csv"
        df.to_csv(csv_path, index=False)
        written[name] = csv_path
    return written


def main(path: str, out_dir: str = ".") -> Dict[str, Path]:
    with open(path) as fh:
        config = yaml.safe_load(fh)
    return sweep(config or {}, out_dir)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run parameter sweeps")
    parser.add_argument("config", type=str, help="YAML sweep file")
    parser.add_argument("--out-dir", default=".", help="Directory for the CSV files")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    main(args.config, args.out_dir)
