"""Exception types raised by the synchronization engine.

Setup failures (inconsistent topology, invalid distribution parameters,
bad configuration) are raised before the first step executes. A period
adjustment that would drive a period non-positive is not an error; the
engine discards it silently.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for all engine errors."""


class ConfigError(SyncError, ValueError):
    """A configuration value is missing or out of range."""


class TopologyError(SyncError, ValueError):
    """The topology does not match the per-vertex or per-edge state."""


class DegenerateWeightingError(SyncError, ValueError):
    """Degree weighting was requested for a vertex without neighbours."""


class DistributionError(SyncError, ValueError):
    """A sampling distribution received invalid shape parameters."""


class InvariantViolation(SyncError, RuntimeError):
    """A state invariant failed while invariant checking was enabled."""


__all__ = [
    "SyncError",
    "ConfigError",
    "TopologyError",
    "DegenerateWeightingError",
    "DistributionError",
    "InvariantViolation",
]
