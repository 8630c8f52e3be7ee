"""Implementation of end component computation over an explored model"""

import logging
from typing import Dict, List, Set

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from .definitions import Mec

logger = logging.getLogger(__name__)

class MecImplementation:
    """Implementation class for Mec operations"""

    @staticmethod
    def create(model, states: Set[int]) -> Mec:
        """
        Restrict states to the largest subset closed under some of its actions.

        Each pass drops the actions leaving the candidate set and then the
        states left without actions, until a pass removes nothing. The
        candidate set is modified in place and becomes the states of the
        result.
        """
        actions: Dict[int, Set[int]] = {}
        changed = True

        while changed:
            changed = False
            to_remove = set()

            for state in states:
                distributions = model.get_choices(state)
                if not distributions:
                    to_remove.add(state)
                    changed = True
                    continue

                state_actions = actions.setdefault(state, set(range(len(distributions))))
                leaving = {action for action in state_actions
                           if not distributions[action].support() <= states}
                if leaving:
                    state_actions -= leaving
                    changed = True

                if not state_actions:
                    to_remove.add(state)
                    changed = True

            states -= to_remove
            for state in to_remove:
                actions.pop(state, None)

        return Mec(states, actions)

    @staticmethod
    def equals(mec: Mec, other) -> bool:
        """Mecs are equal iff their state sets are"""
        if not isinstance(other, Mec):
            return NotImplemented
        return mec.states == other.states

    @staticmethod
    def hash_mec(mec: Mec) -> int:
        return hash(frozenset(mec.states)) * 31

    @staticmethod
    def strongly_connected_components(model, mec: Mec) -> List[Set[int]]:
        """Split the states of mec along the edges of their retained actions"""
        nodes = sorted(mec.states)
        position = {state: i for i, state in enumerate(nodes)}
        rows, cols = [], []
        for state in nodes:
            distributions = model.get_choices(state)
            for action in mec.actions[state]:
                for successor in distributions[action].support():
                    rows.append(position[state])
                    cols.append(position[successor])

        graph = csr_matrix((np.ones(len(rows)), (rows, cols)), shape=(len(nodes), len(nodes)))
        count, labels = connected_components(graph, directed=True, connection='strong')
        components = [set() for _ in range(count)]
        for state, label in zip(nodes, labels):
            components[label].add(state)
        return components

    @staticmethod
    def find_mecs(model, states: Set[int]) -> List[Mec]:
        """
        Decompose states into maximal end components.

        Alternates the closure fixpoint with a strongly connected component
        split until every candidate is closed and strongly connected.
        """
        mecs = []
        candidates = [set(states)]
        while candidates:
            mec = MecImplementation.create(model, candidates.pop())
            if not mec.states:
                continue

            components = MecImplementation.strongly_connected_components(model, mec)
            if len(components) == 1:
                mecs.append(mec)
            else:
                candidates.extend(components)

        logger.debug("Found %d maximal end components in %d states", len(mecs), len(states))
        return sorted(mecs, key=lambda m: min(m.states))

# Add implementation methods to Mec class
@classmethod
def _mec_create(cls, model, states):
    """Compute the end component closure of states"""
    return MecImplementation.create(model, states)

def _mec_eq(self, other):
    return MecImplementation.equals(self, other)

def _mec_hash(self):
    return MecImplementation.hash_mec(self)

def _mec_size(self):
    return len(self.states)

def _mec_str(self):
    return str(sorted(self.states))

Mec.create = _mec_create
Mec.__eq__ = _mec_eq
Mec.__hash__ = _mec_hash
Mec.size = _mec_size
Mec.__len__ = _mec_size
Mec.__str__ = _mec_str

def find_mecs(model, states: Set[int]) -> List[Mec]:
    """Maximal end components within states, ordered by smallest member"""
    return MecImplementation.find_mecs(model, states)
