"""Factories returning white box, black box, grey box or continuous-time explorers"""

from typing import Optional

from .config import ExplorationConfig, InformationLevel, action_count_threshold
from .explorer import Explorer
from .generator import Generator
from .learning import (CountThresholdVisibility, FullyExploredVisibility,
                       SamplingExplorer, SojournTimes)
from .sampling import Sampler

def black_box_explorer(model, generator: Generator, remove_self_loops: bool = False,
                       sampler: Optional[Sampler] = None, confidence: float = 0.99,
                       p_min: float = 0.05) -> SamplingExplorer:
    return SamplingExplorer.of(
        model, generator, remove_self_loops,
        sampler=sampler or Sampler(),
        visibility=CountThresholdVisibility(),
        count_threshold=action_count_threshold(confidence, p_min))

def grey_box_explorer(model, generator: Generator, remove_self_loops: bool = False,
                      sampler: Optional[Sampler] = None, confidence: float = 0.99,
                      p_min: float = 0.05) -> SamplingExplorer:
    return SamplingExplorer.of(
        model, generator, remove_self_loops,
        sampler=sampler or Sampler(),
        visibility=FullyExploredVisibility(),
        support_known=True,
        count_threshold=action_count_threshold(confidence, p_min))

def ctmdp_explorer(model, generator: Generator, remove_self_loops: bool = False,
                   sampler: Optional[Sampler] = None, confidence: float = 0.99,
                   p_min: float = 0.05) -> SamplingExplorer:
    """Black box explorer over a generator reporting rates instead of probabilities"""
    return SamplingExplorer.of(
        model, generator, remove_self_loops,
        sampler=sampler or Sampler(),
        visibility=CountThresholdVisibility(),
        sojourn=SojournTimes(),
        count_threshold=action_count_threshold(confidence, p_min))

def get_explorer(model, generator: Generator, information_level: InformationLevel,
                 remove_self_loops: bool = False, sampler: Optional[Sampler] = None,
                 confidence: float = 0.99, p_min: float = 0.05) -> Explorer:
    """Create the explorer for the given information level, exploring all initial states"""
    if information_level == InformationLevel.WHITEBOX:
        return Explorer.of(model, generator, remove_self_loops)

    factories = {
        InformationLevel.BLACKBOX: black_box_explorer,
        InformationLevel.GREYBOX: grey_box_explorer,
        InformationLevel.CTMDP: ctmdp_explorer,
    }
    if information_level not in factories:
        raise ValueError(f"Invalid information level {information_level}")
    return factories[information_level](model, generator, remove_self_loops,
                                        sampler, confidence, p_min)

def explorer_from_config(model, generator: Generator, config: ExplorationConfig) -> Explorer:
    return get_explorer(model, generator, config.information_level,
                        remove_self_loops=config.remove_self_loops,
                        sampler=Sampler(config.seed),
                        confidence=config.confidence,
                        p_min=config.p_min)
