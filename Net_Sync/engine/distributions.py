"""Normal distribution sampling on top of :class:`numpy.random.Generator`."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..errors import DistributionError

logger = logging.getLogger(__name__)


@dataclass
class NormalDistribution:
    """Normal distribution with mutable mean and standard deviation.

    The standard deviation is validated whenever it is assigned so that a
    non-positive value is rejected before any sample is drawn.
    """

    mean: float
    std: float
    rng: np.random.Generator

    def __setattr__(self, name: str, value) -> None:
        if name == "std":
            self._check(value)
        super().__setattr__(name, value)

    @staticmethod
    def _check(std: float) -> None:
        if not std > 0:
            raise DistributionError(
                f"standard deviation must be positive, got {std!r}"
            )

    def sample(self) -> float:
        """Draw a single value."""

        return float(self.rng.normal(self.mean, self.std))

    def sample_positive(self, max_tries: int = 1000) -> float:
        """Draw until a strictly positive value is obtained.

        Raises
        ------
        DistributionError
            If no positive value was drawn within ``max_tries`` attempts.
        """

        for _ in range(max_tries):
            value = self.sample()
            if value > 0:
                return value
            logger.debug("Redrawing non-positive sample %s", value)
        raise DistributionError(
            f"no positive sample from Normal({self.mean}, {self.std}) "
            f"in {max_tries} draws"
        )


__all__ = ["NormalDistribution"]
