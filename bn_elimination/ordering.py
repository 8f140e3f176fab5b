"""
Elimination-order strategies.

Every strategy answers one question: in which sequence should the non-target
variables of a network be summed out for a given query? Orders returned here
are candidates; ``pruning.prune_order`` trims them afterwards.

Strategies:
    - ``ProvidedOrdering``: a caller-supplied order, returned as given.
    - ``MaxCardinalitySearchOrdering``: repeatedly mark the variable with the
      most already-marked neighbours in the induced graph, then reverse.
    - ``GreedyOrdering``: repeatedly pick the variable with the fewest marked
      neighbours, simulating the fill-in edges of each pick.

Heuristic strategies only store their seed; each ``get_order`` call builds a
fresh ``numpy`` generator from it, so the same seed always reproduces the same
order. Only the very first pick is randomized (every count is zero then);
later ties go to the earliest variable in declaration order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Set

import numpy as np

from .induced_graph import InducedGraph

if TYPE_CHECKING:  # pragma: no cover
    from .network import BayesianNetwork
    from .query import Query

DEFAULT_SEED = 123


class OrderingStrategy(ABC):
    name: str = "base"

    @abstractmethod
    def get_order(self, query: "Query", network: "BayesianNetwork") -> List[str]:
        """Candidate elimination order (labels) for ``query`` on ``network``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ProvidedOrdering(OrderingStrategy):
    name = "provided"

    def __init__(self, order: Sequence[str]):
        # Keep first occurrence of each label, like an insertion-ordered set
        seen: Set[str] = set()
        self.order: List[str] = []
        for label in order:
            label = label.strip()
            if label and label.casefold() not in seen:
                seen.add(label.casefold())
                self.order.append(label)

    def get_order(self, query: "Query", network: "BayesianNetwork") -> List[str]:
        return list(self.order)

    def __repr__(self) -> str:
        return f"ProvidedOrdering({self.order})"


class HeuristicOrdering(OrderingStrategy):
    """Shared marking loop of the induced-graph heuristics."""

    def __init__(self, seed: Optional[int] = DEFAULT_SEED):
        self.seed = seed

    @abstractmethod
    def _select(self, graph: InducedGraph, candidates: List[str], marked: Set[str]) -> str:
        ...

    def _after_pick(self, graph: InducedGraph, label: str) -> InducedGraph:
        return graph

    def _finish(self, picked: List[str]) -> List[str]:
        return picked

    def get_order(self, query: "Query", network: "BayesianNetwork") -> List[str]:
        target = network.get_variable(query.target).label
        graph = InducedGraph.from_network(network)
        rng = np.random.default_rng(self.seed)

        unmarked = network.labels
        marked: Set[str] = set()
        picked: List[str] = []
        while unmarked:
            if not marked:
                candidates = [unmarked[i] for i in rng.permutation(len(unmarked))]
            else:
                candidates = unmarked
            label = self._select(graph, candidates, marked)
            picked.append(label)
            marked.add(label)
            unmarked = [u for u in unmarked if u != label]
            graph = self._after_pick(graph, label)

        return [label for label in self._finish(picked) if label != target]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(seed={self.seed})"


class MaxCardinalitySearchOrdering(HeuristicOrdering):
    name = "max_cardinality"

    def _select(self, graph: InducedGraph, candidates: List[str], marked: Set[str]) -> str:
        best, best_count = candidates[0], -1
        for label in candidates:
            count = graph.count_marked_neighbors(label, marked)
            if count > best_count:
                best, best_count = label, count
        return best

    def _finish(self, picked: List[str]) -> List[str]:
        return list(reversed(picked))


class GreedyOrdering(HeuristicOrdering):
    name = "greedy"

    def _select(self, graph: InducedGraph, candidates: List[str], marked: Set[str]) -> str:
        best, best_count = candidates[0], None
        for label in candidates:
            count = graph.count_marked_neighbors(label, marked)
            if best_count is None or count < best_count:
                best, best_count = label, count
        return best

    def _after_pick(self, graph: InducedGraph, label: str) -> InducedGraph:
        return graph.connect_neighbors(label)


_HEURISTICS: Dict[str, Callable[..., OrderingStrategy]] = {
    "max_cardinality": MaxCardinalitySearchOrdering,
    "mcs": MaxCardinalitySearchOrdering,
    "greedy": GreedyOrdering,
}

ORDERING_NAMES = ("provided", "max_cardinality", "mcs", "greedy")


def make_ordering(name: str,
                  order: Optional[Sequence[str]] = None,
                  seed: Optional[int] = DEFAULT_SEED) -> OrderingStrategy:
    """Build a strategy from its name ('provided', 'max_cardinality'/'mcs', 'greedy')."""
    key = name.strip().lower().replace("-", "_")
    if key == "provided":
        if not order:
            raise ValueError("The 'provided' ordering needs an explicit order")
        return ProvidedOrdering(order)
    factory = _HEURISTICS.get(key)
    if factory is None:
        raise ValueError(f"Unknown ordering: {name}. Use one of {', '.join(ORDERING_NAMES)}")
    return factory(seed=seed)


__all__ = [
    "DEFAULT_SEED",
    "ORDERING_NAMES",
    "OrderingStrategy",
    "ProvidedOrdering",
    "HeuristicOrdering",
    "MaxCardinalitySearchOrdering",
    "GreedyOrdering",
    "make_ordering",
]
