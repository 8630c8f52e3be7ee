"""Exploration configuration loaded from YAML"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union
import numpy as np
import yaml

class InformationLevel(Enum):
    """How much of the true model the explorer may read"""
    WHITEBOX = "whitebox"
    BLACKBOX = "blackbox"
    GREYBOX = "greybox"
    CTMDP = "ctmdp"  # Black box over a continuous-time model

def action_count_threshold(confidence: float, p_min: float) -> float:
    """
    Number of samples an action needs before it is trusted:
    ln(confidence) / ln(1 - p_min).
    """
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must lie in (0, 1), got {confidence}")
    if not 0.0 < p_min < 1.0:
        raise ValueError(f"p_min must lie in (0, 1), got {p_min}")
    return float(np.log(confidence) / np.log(1.0 - p_min))

@dataclass
class ExplorationConfig:
    """Recognized exploration options"""
    information_level: InformationLevel = InformationLevel.WHITEBOX
    remove_self_loops: bool = False
    confidence: float = 0.99
    p_min: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate options and normalise the information level"""
        if isinstance(self.information_level, str):
            try:
                self.information_level = InformationLevel(self.information_level.lower())
            except ValueError:
                raise ValueError(f"Invalid information level {self.information_level}")
        # Raises for out-of-range parameters
        action_count_threshold(self.confidence, self.p_min)

    @property
    def action_count_threshold(self) -> float:
        return action_count_threshold(self.confidence, self.p_min)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> 'ExplorationConfig':
        """Create ExplorationConfig from the 'exploration' section of a YAML file"""
        with open(yaml_path) as f:
            config = yaml.safe_load(f)

        options = config.get('exploration', {}) or {}
        unknown = set(options) - {'information_level', 'remove_self_loops',
                                  'confidence', 'p_min', 'seed'}
        if unknown:
            raise ValueError(f"Unknown exploration options: {sorted(unknown)}")
        return cls(**options)
