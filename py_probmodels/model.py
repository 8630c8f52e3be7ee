"""In-memory explicit model storing per-state action lists"""

from dataclasses import dataclass, field
from typing import Any, Collection, List, Optional, Set, Union

from .definitions import Action, Distribution

@dataclass
class ExplicitModel:
    """Explicit MDP storage: an ordered action list per state id"""
    actions: List[List[Action]] = field(default_factory=list)
    initial_states: List[int] = field(default_factory=list)

    def _check_state(self, state: int):
        if not 0 <= state < len(self.actions):
            raise ValueError(f"Unknown state {state}")

    def add_state(self) -> int:
        """Add a state without actions and return its id"""
        self.actions.append([])
        return len(self.actions) - 1

    def add_states(self, count: int):
        for _ in range(count):
            self.add_state()

    def add_choice(self, state: int, choice: Union[Action, Distribution],
                   label: Optional[Any] = None):
        """Append an action, given either as Action or as distribution plus label"""
        self._check_state(state)
        if isinstance(choice, Distribution):
            choice = Action(choice, label)
        self.actions[state].append(choice)

    def set_choice(self, state: int, index: int, distribution: Distribution):
        """Replace the distribution of one action, keeping its label"""
        self._check_state(state)
        action = self.actions[state][index]
        self.actions[state][index] = Action(distribution, action.label)

    def get_actions(self, state: int) -> List[Action]:
        self._check_state(state)
        return list(self.actions[state])

    def set_actions(self, state: int, actions: List[Action]):
        self._check_state(state)
        self.actions[state] = list(actions)

    def clear_state(self, state: int):
        self._check_state(state)
        self.actions[state] = []

    def get_choices(self, state: int) -> List[Distribution]:
        self._check_state(state)
        return [action.distribution for action in self.actions[state]]

    def get_choice(self, state: int, index: int) -> Distribution:
        self._check_state(state)
        return self.actions[state][index].distribution

    def get_num_choices(self, state: int) -> int:
        self._check_state(state)
        return len(self.actions[state])

    def get_num_states(self) -> int:
        return len(self.actions)

    def get_num_transitions(self) -> int:
        """Count (state, action, successor) entries"""
        return sum(len(action.distribution) for state_actions in self.actions
                   for action in state_actions)

    def get_successors(self, state: int) -> Set[int]:
        """Union of the supports of all actions of state"""
        successors = set()
        for distribution in self.get_choices(state):
            successors |= distribution.support()
        return successors

    def get_initial_states(self) -> List[int]:
        return list(self.initial_states)

    def set_initial_states(self, states: Collection[int]):
        for state in states:
            self._check_state(state)
        self.initial_states = list(states)

    def add_initial_state(self, state: int):
        self._check_state(state)
        if state not in self.initial_states:
            self.initial_states.append(state)

    def is_initial_state(self, state: int) -> bool:
        return state in self.initial_states
