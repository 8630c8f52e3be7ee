"""Random sampling source backed by numpy"""

from dataclasses import dataclass, field
from typing import Optional, Union
import numpy as np

from .definitions import Distribution

@dataclass
class Sampler:
    """Sequential, stateful sampling source. Not thread-safe."""
    seed: Optional[int] = None
    rng: np.random.Generator = field(init=False)

    def __post_init__(self):
        self.rng = np.random.default_rng(self.seed)

    def sample_uniform(self, n: int) -> int:
        """Draw an index uniformly from [0, n)"""
        if n <= 0:
            raise ValueError(f"Cannot sample from an empty range ({n})")
        return int(self.rng.integers(n))

    def sample_exponential(self, rate: float,
                           size: Optional[int] = None) -> Union[float, np.ndarray]:
        """Draw durations from the exponential distribution with the given rate"""
        if rate <= 0:
            raise ValueError(f"Exponential rate must be positive, got {rate}")
        if size is None:
            return float(self.rng.exponential(1.0 / rate))
        return self.rng.exponential(1.0 / rate, size=size)

    def sample_distribution(self, distribution: Distribution,
                            size: Optional[int] = None) -> Union[int, np.ndarray]:
        """Draw successors according to the weights of distribution"""
        if distribution.is_empty():
            raise ValueError("Cannot sample from an empty distribution")
        targets = np.array([target for target, _ in distribution], dtype=np.int64)
        weights = np.array([weight for _, weight in distribution], dtype=float)
        weights = weights / weights.sum()
        if size is None:
            return int(self.rng.choice(targets, p=weights))
        return self.rng.choice(targets, size=size, p=weights)
