"""Test configuration and fixtures"""
from pathlib import Path
import pytest

from py_probmodels import Choice, ExplicitGenerator, ExplicitModel, Sampler

@pytest.fixture
def test_data_dir():
    """Get path to test data directory"""
    return Path(__file__).parent / "test_data"

@pytest.fixture
def two_state_generator(test_data_dir):
    """Load the two state model with a self loop on the initial state"""
    return ExplicitGenerator.from_yaml(test_data_dir / "two_state.yml")

@pytest.fixture
def ctmc_generator(test_data_dir):
    """Load the two state continuous-time model"""
    return ExplicitGenerator.from_yaml(test_data_dir / "ctmc.yml")

@pytest.fixture
def branching_generator():
    """
    a: left -> {b: 0.3, c: 0.7}, wait -> {a: 1.0}
    b: back -> {a: 1.0}
    c: flip -> {c: 0.5, d: 0.5}
    d: no choices
    """
    return ExplicitGenerator(["a"], {
        "a": [Choice({"b": 0.3, "c": 0.7}, "left"), Choice({"a": 1.0}, "wait")],
        "b": [Choice({"a": 1.0}, "back")],
        "c": [Choice({"c": 0.5, "d": 0.5}, "flip")],
    })

@pytest.fixture
def model():
    return ExplicitModel()

@pytest.fixture
def sampler():
    return Sampler(seed=42)
