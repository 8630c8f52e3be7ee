"""Tests for full-information exploration and the explorer factories"""
import pytest

from py_probmodels import (Choice, Distribution, ExplicitGenerator, ExplicitModel,
                           ExplorationConfig, Explorer, InformationLevel, SamplingExplorer,
                           explorer_from_config, get_explorer, is_one)

def test_initial_states_are_explored(model, branching_generator):
    explorer = Explorer.of(model, branching_generator)
    assert explorer.initial_states() == [0]
    assert explorer.explored_states() == frozenset({0})
    assert explorer.get_state(0) == "a"
    # Successors get ids in first-seen order
    assert explorer.get_state(1) == "b"
    assert explorer.get_state(2) == "c"
    assert model.get_num_states() == 3
    assert explorer.num_explored_actions == 2

def test_true_distributions_are_written(model, branching_generator):
    explorer = Explorer.of(model, branching_generator)
    assert explorer.get_choices(0) == [Distribution.of({1: 0.3, 2: 0.7}),
                                       Distribution.of({0: 1.0})]
    assert [action.label for action in explorer.get_actions(0)] == ["left", "wait"]

def test_self_loops_are_removed_and_rescaled(model, two_state_generator):
    explorer = Explorer.of(model, two_state_generator, remove_self_loops=True)
    assert explorer.get_choices(0) == [Distribution.of({1: 1.0})]

def test_pure_self_loop_becomes_empty_distribution(model, branching_generator):
    explorer = Explorer.of(model, branching_generator, remove_self_loops=True)
    wait = explorer.get_choices(0)[1]
    assert wait.is_empty()

def test_explore_successors(model, branching_generator):
    explorer = Explorer.of(model, branching_generator)
    explorer.explore_state(2)
    assert explorer.get_state(3) == "d"
    explorer.explore_state(3)
    assert explorer.get_choices(3) == []
    assert explorer.explored_state_count() == 3
    for state in explorer.explored_states():
        for distribution in explorer.get_choices(state):
            assert distribution.is_empty() or is_one(distribution.sum())

def test_exploring_twice_fails(model, branching_generator):
    explorer = Explorer.of(model, branching_generator)
    with pytest.raises(ValueError):
        explorer.explore_state(0)

def test_exploring_unknown_state_fails(model, branching_generator):
    explorer = Explorer.of(model, branching_generator)
    with pytest.raises(ValueError):
        explorer.explore_state(10)

def test_querying_unexplored_state_fails(model, branching_generator):
    explorer = Explorer.of(model, branching_generator)
    with pytest.raises(ValueError):
        explorer.get_choices(1)
    with pytest.raises(ValueError):
        explorer.get_actions(1)

class FailingGenerator(ExplicitGenerator):
    def choices(self, state):
        if state == "broken":
            raise RuntimeError("generator failure")
        return super().choices(state)

def test_generator_errors_propagate(model):
    generator = FailingGenerator(["ok"], {"ok": [Choice({"broken": 1.0})]})
    explorer = Explorer.of(model, generator)
    with pytest.raises(RuntimeError, match="generator failure"):
        explorer.explore_state(1)
    assert not explorer.is_explored_state(1)

def test_print_summary(model, branching_generator, capsys):
    Explorer.of(model, branching_generator).print_summary()
    output = capsys.readouterr().out
    assert "Option settings:" in output
    assert "States explored: 1" in output

@pytest.mark.parametrize("level, expected", [
    (InformationLevel.WHITEBOX, Explorer),
    (InformationLevel.BLACKBOX, SamplingExplorer),
    (InformationLevel.GREYBOX, SamplingExplorer),
])
def test_get_explorer(branching_generator, level, expected):
    explorer = get_explorer(ExplicitModel(), branching_generator, level)
    assert type(explorer) is expected
    assert explorer.explored_states() == frozenset({0})

def test_get_explorer_ctmdp(ctmc_generator):
    explorer = get_explorer(ExplicitModel(), ctmc_generator, InformationLevel.CTMDP)
    assert explorer.sojourn is not None

def test_explorer_from_config(test_data_dir, two_state_generator):
    config = ExplorationConfig.from_yaml(test_data_dir / "exploration.yml")
    explorer = explorer_from_config(ExplicitModel(), two_state_generator, config)
    assert isinstance(explorer, SamplingExplorer)
    assert explorer.remove_self_loops
    assert explorer.count_threshold == pytest.approx(config.action_count_threshold)

def test_unnormalised_choices_are_rejected(model):
    generator = ExplicitGenerator(["a"], {"a": [Choice({"b": 1.0, "c": 1.0})]})
    with pytest.raises(ValueError, match="does not sum to one"):
        Explorer.of(model, generator)
