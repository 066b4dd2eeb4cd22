"""Append-only named time series written at the end of a run."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np


@dataclass
class TimeSeries:
    """Ordered ``(time, value)`` samples of one named quantity."""

    name: str
    times: List[float] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def append(self, time: float, value: float) -> None:
        self.times.append(float(time))
        self.values.append(float(value))

    def as_pairs(self) -> List[Tuple[float, float]]:
        return list(zip(self.times, self.values))

    def as_array(self) -> np.ndarray:
        """Return the samples as an ``(n, 2)`` array."""

        return np.array(self.as_pairs(), dtype=float).reshape(-1, 2)

    def last(self) -> float | None:
        return self.values[-1] if self.values else None

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self.values)


@dataclass
class TimeSeriesRecorder:
    """Collect any number of named series.

    Samples are only held in memory until :meth:`write` is called, so a run
    that fails before finishing leaves no output file behind.
    """

    series: Dict[str, TimeSeries] = field(default_factory=dict)

    def add_data_point(self, name: str, time: float, value: float) -> None:
        """Append ``(time, value)`` to the series ``name``."""

        self.series.setdefault(name, TimeSeries(name)).append(time, value)

    def __getitem__(self, name: str) -> TimeSeries:
        return self.series[name]

    def __contains__(self, name: str) -> bool:
        return name in self.series

    def names(self) -> List[str]:
        return list(self.series)

    def to_dict(self) -> Dict[str, List[Tuple[float, float]]]:
        """Return all series as plain lists of pairs."""

        return {name: s.as_pairs() for name, s in self.series.items()}

    def write(self, path: str | Path) -> Path:
        """Write all samples as CSV rows ``series,time,value``."""

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="") as fh:
            writer = csv.writer(fh)
            writer.writerow(["series", "time", "value"])
            for name, s in self.series.items():
                for t, v in zip(s.times, s.values):
                    writer.writerow([name, repr(t), repr(v)])
        return path


def read_time_series(path: str | Path) -> TimeSeriesRecorder:
    """Load a file written by :meth:`TimeSeriesRecorder.write`."""

    recorder = TimeSeriesRecorder()
    with Path(path).open(newline="") as fh:
        for row in csv.DictReader(fh):
            recorder.add_data_point(row["series"], float(row["time"]), float(row["value"]))
    return recorder


__all__ = ["TimeSeries", "TimeSeriesRecorder", "read_time_series"]
