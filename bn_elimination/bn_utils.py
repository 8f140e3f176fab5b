from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import pandas as pd
from networkx.algorithms.approximation import treewidth

from .elimination import VariableElimination
from .induced_graph import InducedGraph
from .network import BayesianNetwork
from .ordering import DEFAULT_SEED, make_ordering
from .query import Query


def draw_bayesian_network(network: BayesianNetwork,
                          node_size: int = 3000,
                          node_color: str = 'lightblue',
                          font_size: int = 12,
                          figsize: Tuple[int, int] = (10, 6),
                          show_treewidth: bool = True,
                          show: bool = True) -> Dict[str, Any]:
    """
    Draw the DAG top-down, one row per topological generation, so every
    parent sits above its children.

    Args:
        show_treewidth: append the min-degree treewidth of the skeleton to the title
        show: call ``plt.show()``; pass False to keep the figure for later use

    Returns:
        Dictionary with ``positions``, ``layers`` (label -> row), ``layer_nodes``
        (row -> labels), ``figure`` and, when requested, ``treewidth``
    """
    G = network.to_networkx()
    layer_nodes: Dict[int, List[str]] = dict(enumerate(nx.topological_generations(G)))
    layers = {label: row for row, labels in layer_nodes.items() for label in labels}
    positions = {
        label: (col - len(labels) / 2, -row)
        for row, labels in layer_nodes.items()
        for col, label in enumerate(labels)
    }
    result: Dict[str, Any] = {"positions": positions, "layers": layers, "layer_nodes": layer_nodes}

    title = f"{network!r}"
    if show_treewidth:
        width, decomposition = treewidth.treewidth_min_degree(G.to_undirected())
        result["treewidth"] = {"width": width, "decomposition": decomposition}
        title += f", treewidth ~ {width}"

    fig, ax = plt.subplots(figsize=figsize)
    nx.draw_networkx(G, positions, ax=ax, node_size=node_size, node_color=node_color,
                     font_size=font_size, font_weight='bold', arrows=True)
    ax.set_title(title)
    ax.set_axis_off()
    result["figure"] = fig
    if show:
        plt.show()
    return result


def induced_width_of(network: BayesianNetwork, order: Iterable[str]) -> int:
    """Induced width of ``order`` on the moral graph of the whole network."""
    return InducedGraph.from_network(network).induced_width(list(order))


def compare_orderings(network: BayesianNetwork,
                      query: Query,
                      strategies: Iterable[str] = ("max_cardinality", "greedy"),
                      repeats: int = 100,
                      seed: Optional[int] = DEFAULT_SEED,
                      order: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Run ``query`` with each strategy ``repeats`` times (seeds ``seed``,
    ``seed + 1``, ...) and tabulate every distinct pruned order found.

    Returns:
        DataFrame with one row per (strategy, order): join count, induced
        width, probability and how many runs produced that order. Failed runs
        are reported with their error kind and no join count.
    """
    engine = VariableElimination(network)
    rows: Dict[Tuple[str, Tuple[str, ...]], Dict[str, Any]] = {}

    for name in strategies:
        runs = 1 if name == "provided" else repeats
        for r in range(runs):
            run_seed = None if seed is None else seed + r
            strategy = make_ordering(name, order=order, seed=run_seed)
            result = engine.query(query, strategy)
            key = (name, tuple(result.order))
            if key in rows:
                rows[key]["occurrences"] += 1
                continue
            rows[key] = {
                "strategy": name,
                "order": ",".join(result.order),
                "join_count": result.join_count if result.ok else None,
                "induced_width": induced_width_of(network, result.order) if result.ok else None,
                "probability": result.probability,
                "error": result.error.value if result.error is not None else None,
                "occurrences": 1,
            }

    columns = ["strategy", "order", "join_count", "induced_width", "probability", "error", "occurrences"]
    return pd.DataFrame(list(rows.values()), columns=columns)


__all__ = [
    "draw_bayesian_network",
    "induced_width_of",
    "compare_orderings",
]
