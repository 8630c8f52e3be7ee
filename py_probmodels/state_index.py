"""Implementation of StateIndex mapping external states to dense ids"""

from typing import Hashable
from .definitions import StateIndex

class StateIndexImplementation:
    """Implementation class for StateIndex operations"""

    @staticmethod
    def get_or_create_id(index: StateIndex, state: Hashable) -> int:
        """Return the id of state, allocating the next sequential id if unseen"""
        if state is None:
            raise ValueError("State must not be None")
        state_id = index.state_to_id.get(state)
        if state_id is not None:
            return state_id
        state_id = len(index.id_to_state_list)
        index.state_to_id[state] = state_id
        index.id_to_state_list.append(state)
        return state_id

    @staticmethod
    def get_id(index: StateIndex, state: Hashable) -> int:
        """Return the id of state or -1 if it was never seen"""
        return index.state_to_id.get(state, -1)

    @staticmethod
    def id_to_state(index: StateIndex, state_id: int) -> Hashable:
        if not StateIndexImplementation.check(index, state_id):
            raise ValueError(f"Unknown state id {state_id}")
        return index.id_to_state_list[state_id]

    @staticmethod
    def check(index: StateIndex, state_id: int) -> bool:
        return 0 <= state_id < len(index.id_to_state_list)

# Add implementation methods to StateIndex class
def _index_get_or_create_id(self, state):
    return StateIndexImplementation.get_or_create_id(self, state)

def _index_get_id(self, state):
    return StateIndexImplementation.get_id(self, state)

def _index_id_to_state(self, state_id):
    return StateIndexImplementation.id_to_state(self, state_id)

def _index_check(self, state_id):
    return StateIndexImplementation.check(self, state_id)

def _index_contains(self, state):
    return state in self.state_to_id

def _index_size(self):
    return len(self.id_to_state_list)

StateIndex.get_or_create_id = _index_get_or_create_id
StateIndex.get_id = _index_get_id
StateIndex.id_to_state = _index_id_to_state
StateIndex.check = _index_check
StateIndex.contains = _index_contains
StateIndex.__contains__ = _index_contains
StateIndex.size = _index_size
StateIndex.__len__ = _index_size
