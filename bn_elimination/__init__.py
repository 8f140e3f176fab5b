"""Exact variable elimination on binary Bayesian networks."""

from .elimination import VariableElimination, run_query
from .errors import (
    BayesianNetworkError,
    EmptyFactorSetError,
    ErrorKind,
    InconsistentEvidenceError,
    MalformedCPTError,
    UnknownVariableError,
)
from .factor import Factor
from .induced_graph import InducedGraph
from .network import BayesianNetwork, Variable
from .ordering import (
    GreedyOrdering,
    MaxCardinalitySearchOrdering,
    OrderingStrategy,
    ProvidedOrdering,
    make_ordering,
)
from .pruning import prune_order
from .query import Evidence, Query, QueryResult

__version__ = "0.1.0"

__all__ = [
    "BayesianNetwork",
    "Variable",
    "Factor",
    "InducedGraph",
    "OrderingStrategy",
    "ProvidedOrdering",
    "MaxCardinalitySearchOrdering",
    "GreedyOrdering",
    "make_ordering",
    "prune_order",
    "Evidence",
    "Query",
    "QueryResult",
    "VariableElimination",
    "run_query",
    "ErrorKind",
    "BayesianNetworkError",
    "UnknownVariableError",
    "MalformedCPTError",
    "InconsistentEvidenceError",
    "EmptyFactorSetError",
]
