"""Sampling-based exploration: black box, grey box and continuous-time learning"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from .config import action_count_threshold
from .definitions import Action, Choice, Distribution, DistributionBuilder
from .distribution import is_one
from .explorer import Explorer
from .sampling import Sampler

logger = logging.getLogger(__name__)

def _grow(arena: List, state_id: int):
    """Extend a per-state arena so that state_id is a valid index"""
    if len(arena) <= state_id:
        arena.extend([None] * (state_id + 1 - len(arena)))

class CountThresholdVisibility:
    """Actions are visible once their sample count exceeds the explorer's threshold"""

    def is_visible(self, explorer: 'SamplingExplorer', state: int, index: int) -> bool:
        return explorer._total_count(state, index) > explorer.count_threshold

class FullyExploredVisibility:
    """Actions are visible once every true successor has been observed"""

    def is_visible(self, explorer: 'SamplingExplorer', state: int, index: int) -> bool:
        return (explorer._observed_support(state, index) > 0
                and explorer._is_fully_explored(state, index))

@dataclass
class SojournTimes:
    """Rates and sampled sojourn times per (state, action) of a continuous-time model"""
    rates: List[Optional[List[Dict[int, float]]]] = field(default_factory=list)
    times: List[Optional[List[List[float]]]] = field(default_factory=list)

    def begin_state(self, state_id: int):
        _grow(self.rates, state_id)
        _grow(self.times, state_id)
        self.rates[state_id] = []
        self.times[state_id] = []

    def add_action(self, state_id: int, rates: Dict[int, float]):
        self.rates[state_id].append(dict(rates))
        self.times[state_id].append([])

    def exit_rate(self, state_id: int, index: int) -> float:
        """Sum of all successor rates of the action"""
        return float(np.sum(list(self.rates[state_id][index].values())))

    def record(self, sampler: Sampler, state_id: int, index: int, count: int = 1):
        """Sample count sojourn times for the action and store them"""
        rate = self.exit_rate(state_id, index)
        if count == 1:
            self.times[state_id][index].append(sampler.sample_exponential(rate))
        else:
            self.times[state_id][index].extend(
                sampler.sample_exponential(rate, size=count).tolist())

@dataclass
class _FilterSpan:
    """State of one activation of the action filter"""
    snapshot: Dict[int, List[Action]] = field(default_factory=dict)
    # filtered index -> true index, per state
    index_map: Dict[int, List[int]] = field(default_factory=dict)

@dataclass
class SamplingExplorer(Explorer):
    """
    Explorer learning distributions from sampled transitions.

    The model only receives empty placeholder distributions at exploration
    time. The true distributions are kept aside and used solely to sample
    successors; the model distributions are recomputed from the recorded
    counts. While the action filter is active every public method taking an
    action index expects an index into the filtered action list.
    """
    sampler: Sampler = field(default_factory=Sampler)
    visibility: Any = field(default_factory=CountThresholdVisibility)
    sojourn: Optional[SojournTimes] = None
    support_known: bool = False
    count_threshold: float = field(default_factory=lambda: action_count_threshold(0.99, 0.05))
    num_transitions: int = field(init=False, default=0)
    _hidden: List[Optional[List[Action]]] = field(init=False, default_factory=list)
    _counts: List[Optional[List[Dict[int, int]]]] = field(init=False, default_factory=list)
    _dirty: List[Optional[List[bool]]] = field(init=False, default_factory=list)
    _filter: Optional[_FilterSpan] = field(init=False, default=None)
    _new_fully_explored: bool = field(init=False, default=False)

    def __post_init__(self):
        if isinstance(self.visibility, FullyExploredVisibility) and not self.support_known:
            raise ValueError("Filtering on fully explored actions requires known support sizes")

    def update_count_params(self, confidence: float, p_min: float):
        """Recompute the action count threshold from confidence and p_min"""
        self.count_threshold = action_count_threshold(confidence, p_min)

    # Exploration

    def _begin_state(self, state_id: int):
        for arena in (self._hidden, self._counts, self._dirty):
            _grow(arena, state_id)
            arena[state_id] = []
        if self.sojourn is not None:
            self.sojourn.begin_state(state_id)

    def _add_choice(self, state_id: int, choice: Choice):
        if self.sojourn is None:
            hidden = self._build_distribution(state_id, choice.transitions)
        else:
            rates = {}
            for successor, rate in choice.transitions.items():
                target = self.get_state_id(successor)
                rates[target] = rates.get(target, 0.0) + rate
            hidden = DistributionBuilder(dict(rates)).scaled()
            self.sojourn.add_action(state_id, rates)

        self._hidden[state_id].append(Action(hidden, choice.label))
        self._counts[state_id].append({})
        self._dirty[state_id].append(False)
        self.model.add_choice(state_id, Action(Distribution(), choice.label))

    def explore_state(self, state_id: int):
        """Explore state_id; while the filter is active its actions start out hidden"""
        state = super().explore_state(state_id)
        span = self._filter
        if span is not None:
            actions = self.model.get_actions(state_id)
            visible = [index for index in range(len(actions))
                       if self.visibility.is_visible(self, state_id, index)]
            span.snapshot[state_id] = actions
            span.index_map[state_id] = visible
            self.model.set_actions(state_id, [actions[index] for index in visible])
        return state

    # Index translation and model writes

    @property
    def is_filter_active(self) -> bool:
        return self._filter is not None

    def _true_index(self, state: int, action: int) -> int:
        self._check_explored(state)
        if self._filter is not None and state in self._filter.index_map:
            visible = self._filter.index_map[state]
            if not 0 <= action < len(visible):
                raise ValueError(f"State {state} has no visible action {action}")
            return visible[action]
        if not 0 <= action < len(self._counts[state]):
            raise ValueError(f"State {state} has no action {action}")
        return action

    def _write_distribution(self, state: int, index: int, distribution: Distribution):
        """Store the learned distribution of the action with true index `index`"""
        span = self._filter
        if span is not None and state in span.snapshot:
            saved = span.snapshot[state]
            saved[index] = Action(distribution, saved[index].label)
            visible = span.index_map[state]
            if index not in visible:
                return
            index = visible.index(index)

        actions = self.model.get_actions(state)
        actions[index] = Action(distribution, actions[index].label)
        self.model.set_actions(state, actions)

    # Evidence

    def _total_count(self, state: int, index: int) -> int:
        return sum(self._counts[state][index].values())

    def _observed_support(self, state: int, index: int) -> int:
        counts = self._counts[state][index]
        if self.remove_self_loops and state in counts:
            return len(counts) - 1
        return len(counts)

    def _is_fully_explored(self, state: int, index: int) -> bool:
        return self._observed_support(state, index) == len(self._hidden[state][index].distribution)

    def _distribution_from_counts(self, state: int, index: int) -> Distribution:
        counts = self._counts[state][index]
        total = float(sum(counts.values()))

        builder = DistributionBuilder()
        skipped_any = False
        for target, count in counts.items():
            if self.remove_self_loops and target == state:
                skipped_any = True
            else:
                builder.add(target, count / total)

        distribution = builder.scaled() if skipped_any else builder.build()
        assert distribution.is_empty() or is_one(distribution.sum()), distribution
        return distribution

    def get_action_counts(self, state: int, action: int) -> int:
        """Number of times the action has been sampled"""
        return self._total_count(state, self._true_index(state, action))

    def get_transition_counts(self, state: int, action: int) -> Dict[int, int]:
        return dict(self._counts[state][self._true_index(state, action)])

    def update_counts(self, state: int, action: int, successor: int,
                      apply_immediately: bool = True) -> bool:
        """
        Record one sampled transition.

        Returns True exactly when the action's count just went from at or
        below the threshold to above it. With apply_immediately the model
        distribution is recomputed right away, otherwise the action is marked
        dirty for update_model_counts.
        """
        index = self._true_index(state, action)
        if not self.state_index.check(successor):
            raise ValueError(f"Unknown successor id {successor}")
        counts = self._counts[state][index]
        was_fully_explored = self.support_known and self._is_fully_explored(state, index)

        counts[successor] = counts.get(successor, 0) + 1
        if counts[successor] == 1:
            self.num_transitions += 1
            if (self.support_known and not was_fully_explored
                    and self._is_fully_explored(state, index)):
                self._new_fully_explored = True

        total = self._total_count(state, index)
        crossed = total > self.count_threshold >= total - 1

        if apply_immediately:
            self._write_distribution(state, index, self._distribution_from_counts(state, index))
            self._dirty[state][index] = False
        else:
            self._dirty[state][index] = True

        if self.sojourn is not None:
            self.sojourn.record(self.sampler, state, index)
        return crossed

    def update_model(self, changed: Callable[[int, int], bool]):
        """Recompute the model distribution of every (state, true action index) selected by changed"""
        for state in sorted(self._explored):
            for index in range(len(self._counts[state])):
                if changed(state, index):
                    self._write_distribution(
                        state, index, self._distribution_from_counts(state, index))

    def update_model_counts(self):
        """Push all pending count updates into the model"""
        self.update_model(lambda state, index: self._dirty[state][index])
        for state in self._explored:
            dirty = self._dirty[state]
            dirty[:] = [False] * len(dirty)

    # Sampling

    def sample_next_action(self, state: int) -> int:
        """Uniformly sample the index of one of the currently visible actions"""
        self._check_explored(state)
        return self.sampler.sample_uniform(self.model.get_num_choices(state))

    def sample_successor(self, state: int, action: int) -> int:
        """Sample a successor from the true distribution of the action"""
        index = self._true_index(state, action)
        return self.sampler.sample_distribution(self._hidden[state][index].distribution)

    def simulate_action_repeatedly(self, state: int, action: int, required_count: float):
        """Sample the action until its count reaches required_count, then update the model once"""
        index = self._true_index(state, action)
        hidden = self._hidden[state][index].distribution
        missing = int(np.ceil(required_count)) - self._total_count(state, index)
        if missing <= 0:
            return
        if hidden.is_empty():
            raise ValueError(f"Action {index} of state {state} has no successors to sample")

        counts = self._counts[state][index]
        was_fully_explored = self.support_known and self._is_fully_explored(state, index)
        successors, sampled = np.unique(
            self.sampler.sample_distribution(hidden, size=missing), return_counts=True)
        for successor, count in zip(successors.tolist(), sampled.tolist()):
            if successor not in counts:
                self.num_transitions += 1
            counts[successor] = counts.get(successor, 0) + count
        if (self.support_known and not was_fully_explored
                and self._is_fully_explored(state, index)):
            self._new_fully_explored = True

        if self.sojourn is not None:
            self.sojourn.record(self.sampler, state, index, missing)

        self._write_distribution(state, index, self._distribution_from_counts(state, index))
        self._dirty[state][index] = False

    # Action filter

    def activate_filter(self):
        """Hide every action that is not yet visible and remember the full action lists"""
        if self._filter is not None:
            raise ValueError("Action filter is already active")

        span = _FilterSpan()
        for state in sorted(self._explored):
            actions = self.model.get_actions(state)
            visible = [index for index in range(len(actions))
                       if self.visibility.is_visible(self, state, index)]
            span.snapshot[state] = actions
            span.index_map[state] = visible
            self.model.set_actions(state, [actions[index] for index in visible])
        self._filter = span
        logger.debug("Action filter activated on %d states", len(span.snapshot))

    def deactivate_filter(self):
        """Restore the full action lists"""
        if self._filter is None:
            raise ValueError("Action filter is not active")

        for state, actions in self._filter.snapshot.items():
            self.model.set_actions(state, actions)
        self._filter = None

    # Grey box

    def _check_support_known(self):
        if not self.support_known:
            raise ValueError("Support sizes are only known to grey box explorers")

    def get_true_support_size(self, state: int, action: int) -> int:
        """Number of successors of the action in the true model"""
        self._check_support_known()
        index = self._true_index(state, action)
        return len(self._hidden[state][index].distribution)

    def is_action_fully_explored(self, state: int, action: int) -> bool:
        self._check_support_known()
        return self._is_fully_explored(state, self._true_index(state, action))

    def is_new_fully_explored_action_available(self) -> bool:
        return self._new_fully_explored

    def reset_fully_explored_flag(self):
        self._new_fully_explored = False

    # Continuous time

    def _check_continuous(self):
        if self.sojourn is None:
            raise ValueError("Rates are only known to continuous-time explorers")

    def get_exit_rate(self, state: int, action: int) -> float:
        self._check_continuous()
        return self.sojourn.exit_rate(state, self._true_index(state, action))

    def get_transition_rates(self, state: int, action: int) -> Dict[int, float]:
        self._check_continuous()
        return dict(self.sojourn.rates[state][self._true_index(state, action)])

    def get_sojourn_times(self, state: int, action: int) -> List[float]:
        self._check_continuous()
        return list(self.sojourn.times[state][self._true_index(state, action)])

    # Reporting

    def counts_frame(self) -> pd.DataFrame:
        """Recorded evidence as a table with one row per observed transition"""
        rows = []
        for state in sorted(self._explored):
            for index, counts in enumerate(self._counts[state]):
                for successor in sorted(counts):
                    rows.append((state, index, successor, counts[successor]))
        return pd.DataFrame(rows, columns=['state', 'action', 'successor', 'count'])

    def sojourn_frame(self) -> pd.DataFrame:
        """Sampled sojourn times with one row per sample"""
        self._check_continuous()
        rows = []
        for state in sorted(self._explored):
            for index, times in enumerate(self.sojourn.times[state]):
                rows.extend((state, index, time) for time in times)
        return pd.DataFrame(rows, columns=['state', 'action', 'time'])

    def print_summary(self):
        super().print_summary()
        print(f"Action count threshold: {self.count_threshold:.4f}")
        print(f"Distinct transitions sampled: {self.num_transitions}")
        print(f"Action filter: {'ACTIVE' if self.is_filter_active else 'INACTIVE'}")
