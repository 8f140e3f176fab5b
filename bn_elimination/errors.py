"""
Error kinds raised while building networks and answering queries.

Construction errors (unknown labels on edges/CPTs, wrongly sized CPTs) are
raised immediately. Query-time errors are caught by the elimination
orchestrator and reported as a failed ``QueryResult`` carrying the matching
``ErrorKind``; only ``EmptyFactorSetError`` escapes a query, since it signals a
bug in ordering or pruning rather than bad input.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    UNKNOWN_VARIABLE = "UnknownVariable"
    MALFORMED_CPT = "MalformedCpt"
    INCONSISTENT_EVIDENCE = "InconsistentEvidence"
    EMPTY_FACTOR_SET = "EmptyFactorSet"


class BayesianNetworkError(Exception):
    """Base class for every error raised by this package."""

    kind: ErrorKind

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable for every subclass
        return str(self.args[0]) if self.args else self.kind.value


class UnknownVariableError(BayesianNetworkError, KeyError):
    kind = ErrorKind.UNKNOWN_VARIABLE

    def __init__(self, label: str, context: str = "network"):
        self.label = label
        super().__init__(f"Unknown variable '{label}' in {context}")


class MalformedCPTError(BayesianNetworkError, ValueError):
    kind = ErrorKind.MALFORMED_CPT


class InconsistentEvidenceError(BayesianNetworkError, ArithmeticError):
    kind = ErrorKind.INCONSISTENT_EVIDENCE


class EmptyFactorSetError(BayesianNetworkError, RuntimeError):
    kind = ErrorKind.EMPTY_FACTOR_SET


__all__ = [
    "ErrorKind",
    "BayesianNetworkError",
    "UnknownVariableError",
    "MalformedCPTError",
    "InconsistentEvidenceError",
    "EmptyFactorSetError",
]
