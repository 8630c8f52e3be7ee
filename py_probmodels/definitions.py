"""Core dataclass definitions for partial probabilistic model exploration"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Set, Tuple

@dataclass(frozen=True)
class Distribution:
    """Immutable sparse map from successor id to weight"""
    weights: Tuple[Tuple[int, float], ...] = ()  # (target, weight) pairs sorted by target

    def __post_init__(self):
        # Validation is attached by distribution.py
        self._validate()

@dataclass
class DistributionBuilder:
    """Accumulates (target, weight) pairs before freezing them"""
    entries: Dict[int, float] = field(default_factory=dict)

@dataclass(frozen=True)
class Action:
    """One choice of an explored state"""
    distribution: Distribution
    label: Optional[Any] = None  # Opaque, may be absent

@dataclass
class Choice:
    """A choice as reported by a generator, over external state objects"""
    transitions: Dict[Hashable, float]  # Probabilities, or rates for continuous time
    label: Optional[Any] = None

@dataclass
class StateIndex:
    """Bijection between external states and dense integer ids"""
    state_to_id: Dict[Hashable, int] = field(default_factory=dict)
    id_to_state_list: List[Hashable] = field(default_factory=list)

@dataclass(eq=False)
class Mec:
    """End component: a state set and the retained actions of each state"""
    states: Set[int]
    actions: Dict[int, Set[int]] = field(default_factory=dict)
