"""Tests for exploration configuration"""
import numpy as np
import pytest

from py_probmodels import ExplorationConfig, InformationLevel, action_count_threshold

@pytest.mark.parametrize("confidence, p_min, expected", [
    (0.99, 0.05, 0.1959),
    (0.95, 0.5, 0.0740),
    (0.999, 0.01, 0.0995),
    (0.01, 0.5, 6.6439),
])
def test_action_count_threshold(confidence, p_min, expected):
    threshold = action_count_threshold(confidence, p_min)
    assert threshold == pytest.approx(np.log(confidence) / np.log(1 - p_min))
    assert threshold == pytest.approx(expected, abs=1e-4)

@pytest.mark.parametrize("confidence, p_min", [(0.0, 0.5), (1.0, 0.5), (0.5, 0.0), (0.5, 1.0)])
def test_threshold_parameters_must_be_probabilities(confidence, p_min):
    with pytest.raises(ValueError):
        action_count_threshold(confidence, p_min)

def test_config_from_yaml(test_data_dir):
    config = ExplorationConfig.from_yaml(test_data_dir / "exploration.yml")
    assert config.information_level == InformationLevel.BLACKBOX
    assert config.remove_self_loops
    assert config.seed == 7
    assert config.action_count_threshold == pytest.approx(0.0995, abs=1e-4)

def test_config_defaults():
    config = ExplorationConfig()
    assert config.information_level == InformationLevel.WHITEBOX
    assert not config.remove_self_loops

def test_config_rejects_invalid_values(tmp_path):
    with pytest.raises(ValueError):
        ExplorationConfig(confidence=1.5)
    with pytest.raises(ValueError):
        ExplorationConfig(information_level="transparent")

    config_file = tmp_path / "bad.yml"
    config_file.write_text("exploration:\n  pmin: 0.1\n")
    with pytest.raises(ValueError, match="Unknown exploration options"):
        ExplorationConfig.from_yaml(config_file)
