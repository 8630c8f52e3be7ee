"""
py-probmodels: on-demand exploration, learning and end component analysis of probabilistic models
"""

__version__ = "0.1.0"

# py_probmodels/__init__.py

from .definitions import Action, Choice, Distribution, DistributionBuilder, Mec, StateIndex
from .distribution import is_one
from . import state_index
from .model import ExplicitModel
from .generator import ExplicitGenerator, Generator
from .sampling import Sampler
from .config import ExplorationConfig, InformationLevel, action_count_threshold
from .explorer import Explorer
from .learning import (CountThresholdVisibility, FullyExploredVisibility,
                       SamplingExplorer, SojournTimes)
from .explorers import (black_box_explorer, ctmdp_explorer, explorer_from_config,
                        get_explorer, grey_box_explorer)
from .mec import find_mecs
from .collapse_view import CollapseView, UnionFind
from .builder import RestrictedModel, build_model, build_restricted_model

__all__ = [
    'Action',
    'Choice',
    'Distribution',
    'DistributionBuilder',
    'Mec',
    'StateIndex',
    'is_one',
    'ExplicitModel',
    'ExplicitGenerator',
    'Generator',
    'Sampler',
    'ExplorationConfig',
    'InformationLevel',
    'action_count_threshold',
    'Explorer',
    'SamplingExplorer',
    'CountThresholdVisibility',
    'FullyExploredVisibility',
    'SojournTimes',
    'black_box_explorer',
    'grey_box_explorer',
    'ctmdp_explorer',
    'get_explorer',
    'explorer_from_config',
    'find_mecs',
    'CollapseView',
    'UnionFind',
    'RestrictedModel',
    'build_model',
    'build_restricted_model',
]
