"""Implementation of Distribution and DistributionBuilder for sparse successor maps"""

from typing import Callable, Dict, Iterable, Iterator, Optional, Set, Tuple
import numpy as np
from .definitions import Distribution, DistributionBuilder

PRECISION = 1e-9

def is_one(value: float) -> bool:
    """Check a probability mass against 1 within PRECISION"""
    return abs(value - 1.0) <= PRECISION

class DistributionImplementation:
    """Implementation class for Distribution operations"""

    @staticmethod
    def validate(distribution: Distribution) -> None:
        """Validate targets and weights"""
        previous = -1
        for target, weight in distribution.weights:
            if target < 0:
                raise ValueError(f"Invalid target {target}")
            if weight < 0:
                raise ValueError(f"Negative weight {weight} for target {target}")
            if target <= previous:
                raise ValueError("Targets must be unique and sorted")
            previous = target

    @staticmethod
    def from_mapping(mapping: Dict[int, float]) -> Distribution:
        """Freeze a plain mapping without rescaling"""
        return Distribution(tuple(sorted((int(t), float(w)) for t, w in mapping.items())))

    @staticmethod
    def support(distribution: Distribution) -> Set[int]:
        return {target for target, _ in distribution.weights}

    @staticmethod
    def get(distribution: Distribution, target: int) -> float:
        for t, weight in distribution.weights:
            if t == target:
                return weight
        return 0.0

    @staticmethod
    def total(distribution: Distribution) -> float:
        return float(np.sum([weight for _, weight in distribution.weights]))

    @staticmethod
    def contains_one_of(distribution: Distribution, states: Iterable[int]) -> bool:
        """Check whether any target is among the given states"""
        states = states if isinstance(states, (set, frozenset)) else set(states)
        return any(target in states for target, _ in distribution.weights)

    @staticmethod
    def map(distribution: Distribution,
            mapping: Callable[[int], Optional[int]]) -> DistributionBuilder:
        """
        Rewrite every target through mapping into a fresh builder.
        Targets mapped to None are dropped, targets mapped onto the same id
        are summed.
        """
        builder = DistributionBuilder()
        for target, weight in distribution.weights:
            mapped = mapping(target)
            if mapped is not None:
                builder.add(mapped, weight)
        return builder

    @staticmethod
    def format_distribution(distribution: Distribution) -> str:
        parts = [f"{target}: {weight:.6g}" for target, weight in distribution.weights]
        return "{" + ", ".join(parts) + "}"

class DistributionBuilderImplementation:
    """Implementation class for DistributionBuilder operations"""

    @staticmethod
    def add(builder: DistributionBuilder, target: int, weight: float) -> None:
        builder.entries[target] = builder.entries.get(target, 0.0) + weight

    @staticmethod
    def set(builder: DistributionBuilder, target: int, weight: float) -> None:
        builder.entries[target] = weight

    @staticmethod
    def build(builder: DistributionBuilder) -> Distribution:
        return DistributionImplementation.from_mapping(builder.entries)

    @staticmethod
    def scaled(builder: DistributionBuilder) -> Distribution:
        """Freeze the builder with its weights rescaled to sum to one"""
        total = float(np.sum(list(builder.entries.values()))) if builder.entries else 0.0
        if total <= 0.0:
            return Distribution()
        return DistributionImplementation.from_mapping(
            {target: weight / total for target, weight in builder.entries.items()})

# Add implementation methods to Distribution class
def _distribution_validate(self):
    """Post-init validation"""
    DistributionImplementation.validate(self)

def _distribution_iter(self) -> Iterator[Tuple[int, float]]:
    return iter(self.weights)

def _distribution_len(self) -> int:
    return len(self.weights)

def _distribution_is_empty(self) -> bool:
    return not self.weights

def _distribution_support(self):
    return DistributionImplementation.support(self)

def _distribution_get(self, target):
    return DistributionImplementation.get(self, target)

def _distribution_sum(self):
    return DistributionImplementation.total(self)

def _distribution_contains_one_of(self, states):
    return DistributionImplementation.contains_one_of(self, states)

def _distribution_map(self, mapping):
    return DistributionImplementation.map(self, mapping)

def _distribution_format(self):
    return DistributionImplementation.format_distribution(self)

@classmethod
def _distribution_of(cls, mapping):
    """Create from a {target: weight} mapping"""
    return DistributionImplementation.from_mapping(mapping)

Distribution._validate = _distribution_validate
Distribution.__iter__ = _distribution_iter
Distribution.__len__ = _distribution_len
Distribution.__str__ = _distribution_format
Distribution.is_empty = _distribution_is_empty
Distribution.support = _distribution_support
Distribution.get = _distribution_get
Distribution.sum = _distribution_sum
Distribution.contains_one_of = _distribution_contains_one_of
Distribution.map = _distribution_map
Distribution.of = _distribution_of
Distribution.size = property(_distribution_len)

# Add implementation methods to DistributionBuilder class
def _builder_add(self, target, weight):
    DistributionBuilderImplementation.add(self, target, weight)

def _builder_set(self, target, weight):
    DistributionBuilderImplementation.set(self, target, weight)

def _builder_build(self):
    return DistributionBuilderImplementation.build(self)

def _builder_scaled(self):
    return DistributionBuilderImplementation.scaled(self)

def _builder_is_empty(self):
    return not self.entries

DistributionBuilder.add = _builder_add
DistributionBuilder.set = _builder_set
DistributionBuilder.build = _builder_build
DistributionBuilder.scaled = _builder_scaled
DistributionBuilder.is_empty = _builder_is_empty
