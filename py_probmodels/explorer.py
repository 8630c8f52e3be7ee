"""Full-information exploration of a model discovered on demand from a generator"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Hashable, List, Set

from .definitions import Action, Choice, Distribution, DistributionBuilder, StateIndex
from .distribution import is_one
from .generator import Generator
from . import state_index  # noqa: F401  attaches StateIndex methods

logger = logging.getLogger(__name__)

@dataclass
class Explorer:
    """
    Explorer which writes the true generator distributions into the model.

    States get ids on first reference and are explored at most once;
    exploring fixes the action structure of a state forever.
    """
    model: Any
    generator: Generator
    remove_self_loops: bool = False
    state_index: StateIndex = field(init=False, default_factory=StateIndex)
    num_explored_actions: int = field(init=False, default=0)
    _explored: Set[int] = field(init=False, default_factory=set)

    @classmethod
    def of(cls, model, generator: Generator, remove_self_loops: bool = False,
           **options) -> 'Explorer':
        """Create an explorer and explore all initial states of the generator"""
        explorer = cls(model, generator, remove_self_loops, **options)
        initial_ids = []
        for initial_state in generator.initial_states():
            state_id = explorer.get_state_id(initial_state)
            explorer.explore_state(state_id)
            initial_ids.append(state_id)
        model.set_initial_states(initial_ids)
        return explorer

    def get_state_id(self, state: Hashable) -> int:
        """Id of state, adding it to the model if it was never seen"""
        state_id = self.state_index.get_id(state)
        if state_id != -1:
            return state_id

        new_id = self.model.add_state()
        if new_id != self.state_index.size():
            raise ValueError(
                f"Model assigned id {new_id}, expected {self.state_index.size()}")
        return self.state_index.get_or_create_id(state)

    def get_state(self, state_id: int) -> Hashable:
        return self.state_index.id_to_state(state_id)

    def explore_state(self, state_id: int) -> Hashable:
        """Query the generator for state_id and register one action per choice"""
        if not self.state_index.check(state_id):
            raise ValueError(f"Unknown state id {state_id}")
        if state_id in self._explored:
            raise ValueError(f"State {state_id} is already explored")

        state = self.state_index.id_to_state(state_id)
        choices = list(self.generator.choices(state))
        self._explored.add(state_id)
        self._begin_state(state_id)

        for choice in choices:
            self._add_choice(state_id, choice)
        self.num_explored_actions += len(choices)

        logger.debug("Explored state %d (%s) with %d actions", state_id, state, len(choices))
        return state

    def _begin_state(self, state_id: int):
        pass

    def _add_choice(self, state_id: int, choice: Choice):
        distribution = self._build_distribution(state_id, choice.transitions)
        self.model.add_choice(state_id, Action(distribution, choice.label))

    def _build_distribution(self, state_id: int, transitions: Dict[Hashable, float]) -> Distribution:
        """Distribution over successor ids, dropping and rescaling self loops if configured"""
        builder = DistributionBuilder()
        skipped_any = False
        for successor, probability in transitions.items():
            target = self.get_state_id(successor)
            if self.remove_self_loops and target == state_id:
                skipped_any = True
            else:
                builder.add(target, probability)

        distribution = builder.scaled() if skipped_any else builder.build()
        if not (distribution.is_empty() or is_one(distribution.sum())):
            raise ValueError(f"Choice of state {state_id} does not sum to one: {distribution}")
        return distribution

    def _check_explored(self, state_id: int):
        if state_id not in self._explored:
            raise ValueError(f"State {state_id} is not explored")

    def explored_states(self) -> FrozenSet[int]:
        return frozenset(self._explored)

    def is_explored_state(self, state_id: int) -> bool:
        return state_id in self._explored

    def explored_state_count(self) -> int:
        return len(self._explored)

    def initial_states(self) -> List[int]:
        return self.model.get_initial_states()

    def get_choices(self, state_id: int) -> List[Distribution]:
        self._check_explored(state_id)
        return self.model.get_choices(state_id)

    def get_actions(self, state_id: int) -> List[Action]:
        self._check_explored(state_id)
        return self.model.get_actions(state_id)

    def print_summary(self):
        """Print explorer settings and exploration statistics"""
        print("Option settings:")
        print(f"Explorer: {type(self).__name__}")
        print(f"Remove self loops: {'YES' if self.remove_self_loops else 'NO'}")
        print(f"\nStates known: {self.state_index.size()}")
        print(f"States explored: {self.explored_state_count()}")
        print(f"Actions explored: {self.num_explored_actions}")

    def __str__(self):
        return (f"{type(self).__name__}({type(self.model).__name__}, {self.generator}, "
                f"{'inline' if self.remove_self_loops else 'normal'})")
