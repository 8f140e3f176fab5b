"""
Induced (moral) graph used by the heuristic elimination orderings.

The graph is an undirected ``networkx.Graph`` over variable labels: every
variable is linked to its parents and children, and all parents of a common
child are linked to each other ("marrying" the parents). Simulating an
elimination never touches the network; ``connect_neighbors`` and
``eliminate`` return modified copies.
"""

from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING, Collection, Dict, List, Optional, Sequence

import networkx as nx

from .errors import UnknownVariableError

if TYPE_CHECKING:  # pragma: no cover
    from .network import BayesianNetwork


class InducedGraph:
    def __init__(self, graph: Optional[nx.Graph] = None):
        self._graph = graph if graph is not None else nx.Graph()
        # casefolded label -> node label as declared
        self._labels: Dict[str, str] = {str(n).casefold(): n for n in self._graph.nodes()}

    @classmethod
    def from_network(cls, network: "BayesianNetwork") -> "InducedGraph":
        G = nx.Graph()
        G.add_nodes_from(network.labels)
        for var in network:
            parents = [p.label for p in network.parents_of(var)]
            for child in network.children_of(var):
                G.add_edge(var.label, child.label)
            for parent in parents:
                G.add_edge(var.label, parent)
            for p1, p2 in combinations(parents, 2):
                G.add_edge(p1, p2)
        return cls(G)

    def _node(self, label: str) -> str:
        try:
            return self._labels[label.strip().casefold()]
        except KeyError:
            raise UnknownVariableError(label, "induced graph") from None

    @property
    def labels(self) -> List[str]:
        return list(self._graph.nodes())

    def neighbors(self, label: str) -> List[str]:
        return list(self._graph.neighbors(self._node(label)))

    def degree(self, label: str) -> int:
        return self._graph.degree(self._node(label))

    def has_edge(self, a: str, b: str) -> bool:
        return self._graph.has_edge(self._node(a), self._node(b))

    def count_marked_neighbors(self, label: str, marked: Collection[str]) -> int:
        return sum(1 for n in self._graph.neighbors(self._node(label)) if n in marked)

    def connect_neighbors(self, label: str) -> "InducedGraph":
        """Copy of the graph with all current neighbours of ``label`` pairwise connected."""
        G = self._graph.copy()
        G.add_edges_from(combinations(list(G.neighbors(self._node(label))), 2))
        return InducedGraph(G)

    def eliminate(self, label: str) -> "InducedGraph":
        """Copy with the fill-in edges of ``label`` added and ``label`` removed."""
        filled = self.connect_neighbors(label)
        filled._graph.remove_node(self._node(label))
        del filled._labels[label.strip().casefold()]
        return filled

    def induced_width(self, order: Sequence[str]) -> int:
        """Largest neighbourhood met while eliminating ``order`` on this graph.

        Variables not named in ``order`` stay in the graph, so for a query order
        (target excluded) the width counts the target as a neighbour.
        """
        graph = self
        width = 0
        for label in order:
            width = max(width, graph.degree(label))
            graph = graph.eliminate(label)
        return width

    def to_networkx(self) -> nx.Graph:
        return self._graph.copy()

    def __repr__(self) -> str:
        return f"InducedGraph({self._graph.number_of_nodes()} nodes, {self._graph.number_of_edges()} edges)"


__all__ = ["InducedGraph"]
