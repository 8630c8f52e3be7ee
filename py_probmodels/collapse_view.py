"""Quotient view merging groups of states of a model into representatives"""

import logging
from dataclasses import dataclass, field
from typing import Any, Collection, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from .definitions import Action, Distribution

logger = logging.getLogger(__name__)

@dataclass
class UnionFind:
    """Array-backed union-find; ids beyond the capacity are their own root"""
    parent: np.ndarray = field(default_factory=lambda: np.arange(0, dtype=np.int64))
    rank: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))

    @property
    def capacity(self) -> int:
        return len(self.parent)

    def ensure_capacity(self, size: int):
        """Grow to hold at least size ids, at least doubling the current capacity"""
        if size <= self.capacity:
            return
        new_capacity = max(size, 2 * self.capacity + 1)
        self.parent = np.concatenate(
            [self.parent, np.arange(self.capacity, new_capacity, dtype=np.int64)])
        self.rank = np.concatenate(
            [self.rank, np.zeros(new_capacity - len(self.rank), dtype=np.int64)])

    def find(self, element: int) -> int:
        if element < 0:
            raise ValueError(f"Invalid id {element}")
        if element >= self.capacity:
            return element
        root = element
        while self.parent[root] != root:
            root = int(self.parent[root])
        # Path compression
        while self.parent[element] != root:
            self.parent[element], element = root, int(self.parent[element])
        return root

    def union(self, first: int, second: int) -> int:
        """Merge the sets of both elements and return the new root"""
        self.ensure_capacity(max(first, second) + 1)
        first, second = self.find(first), self.find(second)
        if first == second:
            return first
        if self.rank[first] < self.rank[second]:
            first, second = second, first
        self.parent[second] = first
        if self.rank[first] == self.rank[second]:
            self.rank[first] += 1
        return first

@dataclass
class CollapseView:
    """
    Read-only quotient of a model.

    collapse() merges groups of states into single representatives whose
    choices are the outgoing choices of the group. Choices of other states
    are remapped lazily: every collapse starts a new generation and cached
    choices computed in an earlier generation are recomputed when read.
    """
    model: Any
    _union_find: UnionFind = field(init=False, default_factory=UnionFind)
    # Merged choices of representatives, before remapping by later collapses
    _overwrite: Dict[int, List[Distribution]] = field(init=False, default_factory=dict)
    _cache: Dict[int, Tuple[int, List[Distribution]]] = field(init=False, default_factory=dict)
    _removed: Set[int] = field(init=False, default_factory=set)
    generation: int = field(init=False, default=0)

    def representative(self, state: int) -> int:
        return self._union_find.find(state)

    def is_removed(self, state: int) -> bool:
        return self.representative(state) != state

    def removed_states(self) -> Set[int]:
        return set(self._removed)

    def _check_present(self, state: int):
        if self.is_removed(state):
            raise ValueError(f"State {state} was merged into {self.representative(state)}")

    def _base_choices(self, state: int) -> List[Distribution]:
        if state in self._overwrite:
            return self._overwrite[state]
        return self.model.get_choices(state)

    def _remap(self, distributions: Iterable[Distribution], own: int,
               touched: Set[int]) -> List[Distribution]:
        """
        Rewrite distributions reaching touched states: successors become their
        representatives and those equal to own are dropped. Distributions
        emptied by this are dropped, duplicates removed.
        """
        def mapping(successor):
            representative = self.representative(successor)
            return None if representative == own else representative

        result = []
        seen = set()
        for distribution in distributions:
            if distribution.contains_one_of(touched):
                builder = distribution.map(mapping)
                if builder.is_empty():
                    continue
                distribution = builder.scaled()
            if distribution not in seen:
                seen.add(distribution)
                result.append(distribution)
        return result

    def get_choices(self, state: int) -> List[Distribution]:
        self._check_present(state)
        cached = self._cache.get(state)
        if cached is not None and cached[0] == self.generation:
            return list(cached[1])

        distributions = self._remap(self._base_choices(state), state, self._removed)
        self._cache[state] = (self.generation, distributions)
        return list(distributions)

    def get_choice(self, state: int, index: int) -> Distribution:
        return self.get_choices(state)[index]

    def get_actions(self, state: int) -> List[Action]:
        return [Action(distribution) for distribution in self.get_choices(state)]

    def get_num_choices(self, state: int) -> int:
        return len(self.get_choices(state))

    def get_successors(self, state: int) -> Set[int]:
        successors = set()
        for distribution in self.get_choices(state):
            successors |= distribution.support()
        return successors

    def get_num_states(self) -> int:
        return self.model.get_num_states() - len(self._removed)

    def get_initial_states(self) -> List[int]:
        return sorted({self.representative(state) for state in self.model.get_initial_states()})

    def is_initial_state(self, state: int) -> bool:
        representative = self.representative(state)
        return any(self.representative(initial) == representative
                   for initial in self.model.get_initial_states())

    def collapse(self, groups: List[Collection[int]]) -> List[int]:
        """Merge every group into one state and return the representatives in order"""
        if not groups:
            return []

        groups = [set(group) for group in groups]
        seen = set()
        for group in groups:
            if not group:
                raise ValueError("Cannot collapse an empty group")
            if group & seen:
                raise ValueError(f"Group {sorted(group)} overlaps another group")
            if group & self._removed:
                raise ValueError(f"Group {sorted(group)} contains already merged states")
            seen |= group
        logger.debug("Collapsing state sets %s", [sorted(group) for group in groups])

        # Choices of all members, read before any union
        member_choices = [[self._base_choices(state) for state in sorted(group)]
                          for group in groups]

        representatives = [self._merge(group) for group in groups]
        self.generation += 1

        for group, choices, representative in zip(groups, member_choices, representatives):
            merged = self._remap((d for distributions in choices for d in distributions),
                                 representative, self._removed | group)
            for state in group:
                self._overwrite.pop(state, None)
                self._cache.pop(state, None)
            self._overwrite[representative] = merged
            self._cache[representative] = (self.generation, merged)

        self._log_statistics(representatives)
        return representatives

    def _merge(self, group: Set[int]) -> int:
        if len(group) == 1:
            return next(iter(group))

        members = sorted(group)
        self._union_find.ensure_capacity(
            max(self.model.get_num_states(), members[-1] + 1))
        anchor = self.representative(members[0])
        for state in members[1:]:
            anchor = self._union_find.union(anchor, state)

        self._removed |= group
        self._removed.discard(anchor)
        return anchor

    def _log_statistics(self, representatives: List[int]):
        if not logger.isEnabledFor(logging.INFO):
            return
        actions = [len(self._overwrite[r]) for r in representatives]
        transitions = [len(d) for r in representatives for d in self._overwrite[r]]
        count = len(representatives)
        logger.info("Collapsed states: %d, Actions: %.2f avg/%d max, Transitions %.2f avg/%d max",
                    count, sum(actions) / count, max(actions, default=0),
                    sum(transitions) / count, max(transitions, default=0))

    # Mutators

    def add_state(self) -> int:
        raise NotImplementedError("CollapseView is read-only")

    def add_states(self, count: int):
        raise NotImplementedError("CollapseView is read-only")

    def add_choice(self, state: int, choice, label: Optional[Any] = None):
        raise NotImplementedError("CollapseView is read-only")

    def set_choice(self, state: int, index: int, distribution: Distribution):
        raise NotImplementedError("CollapseView is read-only")

    def set_actions(self, state: int, actions: List[Action]):
        raise NotImplementedError("CollapseView is read-only")

    def clear_state(self, state: int):
        raise NotImplementedError("CollapseView is read-only")

    def set_initial_states(self, states: Collection[int]):
        raise NotImplementedError("CollapseView is read-only")

    def add_initial_state(self, state: int):
        raise NotImplementedError("CollapseView is read-only")
