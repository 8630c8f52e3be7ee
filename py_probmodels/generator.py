"""State-space oracles supplying choices for external states"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, Dict, Hashable, List, Protocol, Union
import yaml

from .definitions import Choice

class Generator(Protocol):
    """Oracle interface consumed by the explorers"""

    def initial_states(self) -> Collection[Hashable]:
        ...

    def choices(self, state: Hashable) -> Collection[Choice]:
        ...

@dataclass
class ExplicitGenerator:
    """Generator backed by an explicit table of choices per state"""
    initial: List[Hashable]
    table: Dict[Hashable, List[Choice]] = field(default_factory=dict)

    def __post_init__(self):
        """Validate that transition weights are non-negative"""
        if not self.initial:
            raise ValueError("At least one initial state is required")
        for state, choices in self.table.items():
            for choice in choices:
                for successor, weight in choice.transitions.items():
                    if weight < 0:
                        raise ValueError(
                            f"Negative weight {weight} for {state} -> {successor}")

    @classmethod
    def from_dict(cls, config: Dict) -> 'ExplicitGenerator':
        """Create from {'initial': [...], 'states': {state: [choice, ...]}}"""
        table = {}
        for state, choices in (config.get('states') or {}).items():
            table[state] = [
                Choice(transitions=dict(info['transitions']), label=info.get('label'))
                for info in choices or []
            ]
        return cls(list(config['initial']), table)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> 'ExplicitGenerator':
        """Create from a YAML model description file"""
        with open(yaml_path) as f:
            config = yaml.safe_load(f)
        return cls.from_dict(config)

    def initial_states(self) -> List[Hashable]:
        return list(self.initial)

    def choices(self, state: Hashable) -> List[Choice]:
        """States without an entry have no choices"""
        return list(self.table.get(state, []))
