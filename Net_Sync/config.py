# config.py

"""Run configuration for the synchronization experiments.

Configurations are immutable values handed to the dynamics at construction
time. They can be built directly, from a plain mapping, or loaded from a
YAML, TOML or JSON file::

    cfg = load_config("cluster.yaml", kind="cluster")
    results = ClusterSync(cfg).run()
"""

from __future__ import annotations

import json
import math
import pathlib
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Type, TypeVar

import yaml

from .errors import ConfigError, DistributionError


class Weighting(str, Enum):
    """How a coupling strength is scaled by vertex degrees."""

    UNWEIGHTED = "unweighted"
    DEGREE = "degree"
    DOUBLE_DEGREE = "double_degree"


def _require_std(name: str, value: float) -> None:
    if not value > 0:
        raise DistributionError(f"{name} must be positive, got {value!r}")


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")


def _require_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigError(f"{name} must lie in [0, 1], got {value!r}")


@dataclass(frozen=True)
class EpidemicConfig:
    """Parameters of the gossip (epidemic) clock synchronization.

    Attributes
    ----------
    mu_period, sigma_period:
        Mean and standard deviation of the normal distribution that the
        initial period of every vertex is drawn from.
    coupling_strength:
        Strength assigned to both directions of every edge.
    weighting:
        Degree weighting mode, see :class:`Weighting`.
    compensate_sampling:
        Run in the sparse regime: each vertex couples in a step only with
        probability ``coupling_probability`` and strengths are multiplied by
        ``1 / coupling_probability`` to keep the expected coupling unchanged.
    coupling_probability:
        Per-step coupling probability of a vertex when
        ``compensate_sampling`` is set; also the compensation denominator.
    order_threshold:
        Stop as soon as the global order reaches this value.
    max_time:
        Stop once more than this many steps were simulated. ``None`` runs
        until the order threshold is reached, which may never happen.
    clock_skew:
        Exclusive upper bound of the random initial local clock. Defaults to
        ``mu_period``.
    mu_periods, sigma_periods:
        Per-vertex overrides of ``mu_period`` and ``sigma_period`` keyed by
        vertex id.
    """

    mu_period: float = 100.0
    sigma_period: float = 20.0
    coupling_strength: float = 2.0
    weighting: Weighting = Weighting.DEGREE
    compensate_sampling: bool = False
    coupling_probability: float = 0.05
    order_threshold: float = 0.9
    max_time: float | None = 100000.0
    clock_skew: int | None = None
    mu_periods: Mapping[Any, float] = field(default_factory=dict)
    sigma_periods: Mapping[Any, float] = field(default_factory=dict)
    seed: int = 0
    thread_count: int = 1
    check_invariants: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "weighting", Weighting(self.weighting))
        _require_positive("mu_period", self.mu_period)
        _require_std("sigma_period", self.sigma_period)
        for vertex, sigma in self.sigma_periods.items():
            _require_std(f"sigma_periods[{vertex!r}]", sigma)
        for vertex, mu in self.mu_periods.items():
            _require_positive(f"mu_periods[{vertex!r}]", mu)
        if self.coupling_strength < 0:
            raise ConfigError("coupling_strength must not be negative")
        if not 0.0 < self.coupling_probability <= 1.0:
            raise ConfigError("coupling_probability must lie in (0, 1]")
        _require_unit("order_threshold", self.order_threshold)
        if self.max_time is not None:
            _require_positive("max_time", self.max_time)
        if self.clock_skew is not None and self.clock_skew < 1:
            raise ConfigError("clock_skew must be at least 1")
        if self.thread_count < 1:
            raise ConfigError("thread_count must be at least 1")

    @property
    def skew(self) -> int:
        """Exclusive upper bound of the initial clock skew."""

        if self.clock_skew is not None:
            return int(self.clock_skew)
        return max(1, int(self.mu_period))

    @property
    def compensation(self) -> float:
        """Strength multiplier compensating for sparse coupling."""

        return 1.0 / self.coupling_probability if self.compensate_sampling else 1.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EpidemicConfig":
        """Construct an :class:`EpidemicConfig` from a generic mapping."""

        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain ``dict`` suitable for YAML or JSON."""

        return _to_dict(self)


@dataclass(frozen=True)
class ClusterSyncConfig:
    """Parameters of the cluster synchronization experiment.

    Natural frequencies are drawn hierarchically: every cluster draws a mean
    from ``Normal(global_mean, global_mean * global_mean_width_factor)`` and
    each member draws its frequency from
    ``Normal(cluster_mean, cluster_mean * cluster_width_factor)``.
    """

    nodes: int = 500
    edges: int = 4000
    clusters: int = 20
    modularity_tgt: float = 0.0
    K: float = 10.0
    order_threshold: float = 0.95
    time_threshold: float = 100.0
    pacemaker_prob: float = 0.0
    global_mean: float = 1.0
    global_mean_width_factor: float = 1.0 / 5.0
    cluster_width_factor: float = 1.0 / 5.0
    dt: float = 0.01
    seed: int = 0
    thread_count: int = 1
    dynamics: str | None = None
    check_invariants: bool = False

    def __post_init__(self) -> None:
        if self.nodes < 1:
            raise ConfigError("nodes must be at least 1")
        if self.edges < 0:
            raise ConfigError("edges must not be negative")
        if not 1 <= self.clusters <= self.nodes:
            raise ConfigError("clusters must lie in [1, nodes]")
        if not -0.5 <= self.modularity_tgt < 1.0:
            raise ConfigError("modularity_tgt must lie in [-0.5, 1)")
        if self.K < 0:
            raise ConfigError("K must not be negative")
        _require_unit("order_threshold", self.order_threshold)
        _require_positive("time_threshold", self.time_threshold)
        _require_unit("pacemaker_prob", self.pacemaker_prob)
        _require_std(
            "global_mean * global_mean_width_factor",
            self.global_mean * self.global_mean_width_factor,
        )
        _require_positive("cluster_width_factor", self.cluster_width_factor)
        if not (self.dt > 0 and math.isfinite(self.dt)):
            raise ConfigError("dt must be a positive finite number")
        if self.thread_count < 1:
            raise ConfigError("thread_count must be at least 1")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClusterSyncConfig":
        """Construct a :class:`ClusterSyncConfig` from a generic mapping."""

        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain ``dict`` suitable for YAML or JSON."""

        return _to_dict(self)


C = TypeVar("C", EpidemicConfig, ClusterSyncConfig)

CONFIG_KINDS: Dict[str, Type[Any]] = {
    "gossip": EpidemicConfig,
    "cluster": ClusterSyncConfig,
}


def _from_mapping(cls: Type[C], data: Mapping[str, Any]) -> C:
    """Build ``cls`` from ``data`` rejecting unknown keys.

    Raises
    ------
    ConfigError
        If ``data`` contains keys that are not fields of ``cls`` or a value
        cannot be converted.
    """

    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(
            f"Unknown {cls.__name__} keys: {', '.join(sorted(map(str, unknown)))}"
        )
    try:
        return cls(**dict(data))
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc


def _to_dict(cfg: Any) -> Dict[str, Any]:
    data = asdict(cfg)
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
        elif isinstance(value, Mapping):
            data[key] = dict(value)
    return data


def with_overrides(cfg: C, **overrides: Any) -> C:
    """Return a copy of ``cfg`` with ``overrides`` applied and revalidated."""

    clean = {k: v for k, v in overrides.items() if v is not None}
    return replace(cfg, **clean) if clean else cfg


def read_mapping(path: str | pathlib.Path) -> Dict[str, Any]:
    """Read a configuration mapping from a YAML, TOML or JSON file."""

    path = pathlib.Path(path)
    if path.suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(path.read_text())
    elif path.suffix == ".toml":
        import tomllib

        data = tomllib.loads(path.read_text())
    elif path.suffix == ".json":
        data = json.loads(path.read_text())
    else:
        raise ConfigError(f"Unsupported config extension: {path.suffix}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} does not contain a mapping")
    return data


def load_config(path: str | pathlib.Path, kind: str = "cluster") -> Any:
    """Load the configuration of ``kind`` (``"gossip"`` or ``"cluster"``)."""

    try:
        cls = CONFIG_KINDS[kind]
    except KeyError:
        raise ConfigError(f"Unknown configuration kind: {kind}") from None
    return cls.from_mapping(read_mapping(path))


__all__ = [
    "Weighting",
    "EpidemicConfig",
    "ClusterSyncConfig",
    "CONFIG_KINDS",
    "with_overrides",
    "read_mapping",
    "load_config",
]
