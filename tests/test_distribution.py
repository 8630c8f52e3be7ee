"""Tests for Distribution, DistributionBuilder and StateIndex"""
import pytest

from py_probmodels import Distribution, DistributionBuilder, StateIndex, is_one

def test_builder_accumulates_weights():
    builder = DistributionBuilder()
    builder.add(3, 0.25)
    builder.add(1, 0.5)
    builder.add(3, 0.25)
    distribution = builder.build()
    assert distribution.weights == ((1, 0.5), (3, 0.5))
    assert distribution.support() == {1, 3}
    assert distribution.get(3) == 0.5
    assert distribution.get(2) == 0.0
    assert distribution.size == 2

def test_builder_set_overwrites():
    builder = DistributionBuilder()
    builder.add(0, 0.7)
    builder.set(0, 0.2)
    assert builder.build().get(0) == 0.2

def test_scaled_sums_to_one():
    builder = DistributionBuilder()
    builder.add(0, 0.1)
    builder.add(1, 0.2)
    builder.add(2, 0.3)
    distribution = builder.scaled()
    assert is_one(distribution.sum())
    assert distribution.get(2) == pytest.approx(0.5)

def test_empty_builder_scales_to_empty_distribution():
    builder = DistributionBuilder()
    assert builder.is_empty()
    assert builder.scaled().is_empty()
    assert builder.build() == Distribution()

def test_map_merges_and_drops_targets():
    distribution = Distribution.of({0: 0.25, 1: 0.25, 2: 0.5})
    builder = distribution.map(lambda target: None if target == 2 else 7)
    assert builder.build() == Distribution.of({7: 0.5})
    assert builder.scaled() == Distribution.of({7: 1.0})

def test_contains_one_of():
    distribution = Distribution.of({4: 1.0})
    assert distribution.contains_one_of({1, 4})
    assert not distribution.contains_one_of([1, 2])

def test_identical_distributions_deduplicate():
    first = Distribution.of({1: 0.5, 0: 0.5})
    second = Distribution.of({0: 0.5, 1: 0.5})
    assert first == second
    assert len({first, second}) == 1

def test_invalid_weights_are_rejected():
    with pytest.raises(ValueError):
        Distribution.of({0: -0.5})
    with pytest.raises(ValueError):
        Distribution(((1, 0.5), (0, 0.5)))

def test_state_index_assigns_ids_in_first_seen_order():
    index = StateIndex()
    assert index.get_or_create_id("x") == 0
    assert index.get_or_create_id("y") == 1
    assert index.get_or_create_id("x") == 0
    assert index.size() == 2
    assert index.id_to_state(1) == "y"
    assert "y" in index
    assert index.get_id("z") == -1

def test_state_index_rejects_unknown_ids():
    index = StateIndex()
    index.get_or_create_id("x")
    with pytest.raises(ValueError):
        index.id_to_state(1)
    with pytest.raises(ValueError):
        index.id_to_state(-1)
