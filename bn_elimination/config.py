"""
Inference configuration loaded from YAML.

Example ``inference.yaml``::

    ordering: greedy        # provided | max_cardinality | mcs | greedy
    seed: 123
    order: [A, B, C]        # only used by the 'provided' ordering
    verbose: false
    log_level: INFO
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .logging_config import parse_level
from .ordering import DEFAULT_SEED, ORDERING_NAMES, OrderingStrategy, make_ordering


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML mapping; an empty file yields an empty dict."""
    with Path(path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return data


@dataclass
class InferenceConfig:
    ordering: str = "provided"
    order: List[str] = field(default_factory=list)
    seed: Optional[int] = DEFAULT_SEED
    verbose: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.ordering = self.ordering.strip().lower().replace("-", "_")
        if self.ordering not in ORDERING_NAMES:
            raise ValueError(f"Unknown ordering: {self.ordering}. Use one of {', '.join(ORDERING_NAMES)}")
        if isinstance(self.order, str):
            self.order = [s.strip() for s in self.order.split(",") if s.strip()]
        else:
            self.order = [str(s) for s in self.order]
        parse_level(self.log_level)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InferenceConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "InferenceConfig":
        return cls.from_dict(load_yaml(path))

    def override(self, **values: Any) -> "InferenceConfig":
        """Copy with every non-None value replaced (used for CLI flags)."""
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)

    def make_strategy(self) -> OrderingStrategy:
        return make_ordering(self.ordering, order=self.order, seed=self.seed)


__all__ = ["InferenceConfig", "load_yaml"]
