from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import BayesianNetworkError, ErrorKind

_TRUE_STRINGS = {"t", "true", "1", "yes"}
_FALSE_STRINGS = {"f", "false", "0", "no"}


def parse_bool(text: str) -> bool:
    """Parse T/F, true/false, 1/0 or yes/no (case-insensitive)."""
    value = text.strip().casefold()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ValueError(f"Cannot interpret '{text}' as a boolean; use T or F")


def _parse_pair(text: str) -> Tuple[str, bool]:
    if ":" not in text:
        raise ValueError(f"Expected 'label:value', got '{text}'")
    label, value = text.rsplit(":", 1)
    return label.strip(), parse_bool(value)


@dataclass(frozen=True)
class Evidence:
    label: str
    value: bool

    @classmethod
    def parse(cls, text: str) -> "Evidence":
        return cls(*_parse_pair(text))


@dataclass(frozen=True)
class Query:
    # Target variable and its queried value, conditioned on an ordered evidence list
    target: str
    value: bool
    evidence: Tuple[Evidence, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists / (label, value) pairs for convenience
        items = tuple(e if isinstance(e, Evidence) else Evidence(*e) for e in self.evidence)
        object.__setattr__(self, "evidence", items)

    @property
    def has_evidence(self) -> bool:
        return len(self.evidence) > 0

    @property
    def labels(self) -> List[str]:
        return [self.target] + [e.label for e in self.evidence]

    @classmethod
    def parse(cls, target: str, evidence: Iterable[str] = ()) -> "Query":
        """Build a query from CLI-style strings, e.g. ``Query.parse("D:T", ["A:T"])``."""
        label, value = _parse_pair(target)
        return cls(label, value, tuple(Evidence.parse(e) for e in evidence))

    def __str__(self) -> str:
        return format_probability_query(self.target, self.value, {e.label: e.value for e in self.evidence})


@dataclass
class QueryResult:
    """Answer of one query, or the typed reason it failed.

    ``pruning_history`` maps each eliminated label to the descriptions of the
    factors left after eliminating it; it is only filled when the query ran in
    verbose mode.
    """

    probability: Optional[float]
    order: List[str]
    join_count: int = 0
    pruning_history: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    exception: Optional[BayesianNetworkError] = field(default=None, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: BayesianNetworkError, order: Sequence[str] = ()) -> "QueryResult":
        return cls(
            probability=None,
            order=list(order),
            error=exc.kind,
            message=str(exc),
            exception=exc,
        )

    def raise_for_error(self) -> "QueryResult":
        if self.exception is not None:
            raise self.exception
        return self


def format_probability_query(variable, value, evidence=None):
    """Generate formatted query string like P(D=T | A=T, B=F)"""

    def fmt(v):
        return ("T" if v else "F") if isinstance(v, bool) else v

    if evidence:
        evidence_str = ', '.join([f"{k}={fmt(v)}" for k, v in evidence.items()])
        return f"P({variable}={fmt(value)} | {evidence_str})"
    return f"P({variable}={fmt(value)})"


__all__ = [
    "Evidence",
    "Query",
    "QueryResult",
    "parse_bool",
    "format_probability_query",
]
