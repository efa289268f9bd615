"""Random sampling for task arrivals and service times."""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

ARRIVAL_MODELS = ("power", "poisson")


class DistributionSampler:
    """Provides the random draws used by the task generator and dispatcher."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the sampler with optional random seed.

        Args:
            seed: Random seed for reproducibility
        """
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Draw a value from [low, high). Returns ``low`` when the range is empty."""
        if high <= low:
            return float(low)
        return float(self.rng.uniform(low, high))

    def choice_index(self, size: int) -> int:
        """Pick an index in [0, size) uniformly."""
        return int(self.rng.integers(0, size))

    def arrival_count(self, expected: float, model: str = "power") -> int:
        """Sample the number of arrivals for one time slice.

        Args:
            expected: Mean number of arrivals in the slice (rate * delta)
            model: Count model:
                - 'power': floor(u ** (1 / expected)) for u ~ U[0, 1)
                - 'poisson': numpy Poisson draw with mean ``expected``

        Returns:
            Non-negative arrival count, 0 when ``expected`` is not positive
        """
        if not expected > 0:
            return 0

        if model == "power":
            u = self.rng.random()
            return int(np.floor(u ** (1.0 / expected)))

        if model == "poisson":
            return int(self.rng.poisson(expected))

        raise ValueError(f"Unknown arrival model: {model}")

    def processing_time(self, mean: float, variance: float, minimum: float = 0.1) -> float:
        """Sample a service duration as mean +/- U(variance), clamped at ``minimum``."""
        value = mean + self.uniform(-variance, variance)
        return max(value, minimum)
