"""Eager model construction and restriction of a model to a state subset"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Collection, List

from .definitions import Action, DistributionBuilder, StateIndex
from .generator import Generator
from . import distribution  # noqa: F401  attaches Distribution methods
from . import state_index  # noqa: F401  attaches StateIndex methods

def build_model(model, generator: Generator) -> StateIndex:
    """Breadth-first construction of every state reachable in the generator"""
    index = StateIndex()
    queue = deque()
    for initial_state in generator.initial_states():
        if index.contains(initial_state):
            continue
        state_id = model.add_state()
        if state_id != index.get_or_create_id(initial_state):
            raise ValueError(f"Model assigned unexpected id {state_id}")
        model.add_initial_state(state_id)
        queue.append(initial_state)

    while queue:
        state = queue.popleft()
        state_id = index.get_id(state)

        for choice in generator.choices(state):
            builder = DistributionBuilder()
            for successor, probability in choice.transitions.items():
                if not index.contains(successor):
                    if model.add_state() != index.get_or_create_id(successor):
                        raise ValueError("Model and index disagree on state ids")
                    queue.append(successor)
                builder.add(index.get_id(successor), probability)
            model.add_choice(state_id, Action(builder.build(), choice.label))
    return index

@dataclass
class RestrictedModel:
    """A model over a subset of states of another model"""
    model: Any
    state_mapping: List[int]  # Restricted state -> original state
    state_actions: List[List[int]]  # Restricted state -> kept original action indices

    def original_state(self, state: int) -> int:
        return self.state_mapping[state]

    def original_action(self, state: int, index: int) -> int:
        return self.state_actions[state][index]

def build_restricted_model(model, new_model, states: Collection[int],
                           omit_self_loops: bool = False) -> RestrictedModel:
    """
    Copy the sub-model induced by states into the empty new_model.

    Transitions leaving the subset (and self loops, if omitted) are dropped
    and the remainder rescaled. Actions left without successors are dropped.
    """
    if new_model.get_num_states() != 0:
        raise ValueError("Restricted model must be empty")

    original_to_restricted = {}
    for state in sorted(states):
        original_to_restricted[state] = new_model.add_state()

    state_mapping = [0] * len(original_to_restricted)
    state_actions = [[] for _ in range(len(original_to_restricted))]
    for original, restricted in original_to_restricted.items():
        state_mapping[restricted] = original

        for index, action in enumerate(model.get_actions(original)):
            builder = DistributionBuilder()
            for target, probability in action.distribution:
                destination = original_to_restricted.get(target)
                if destination is None or (omit_self_loops and target == original):
                    continue
                builder.add(destination, probability)
            if builder.is_empty():
                continue
            new_model.add_choice(restricted, Action(builder.scaled(), action.label))
            state_actions[restricted].append(index)

    new_model.set_initial_states([original_to_restricted[state]
                                  for state in model.get_initial_states()
                                  if state in original_to_restricted])
    return RestrictedModel(new_model, state_mapping, state_actions)
