"""Ancestor pruning of candidate elimination orders."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence, Set

if TYPE_CHECKING:  # pragma: no cover
    from .network import BayesianNetwork
    from .query import Query


def relevant_labels(network: "BayesianNetwork", query: "Query") -> Set[str]:
    """Casefolded labels a query depends on.

    Without evidence: the ancestors of the target. With evidence: additionally
    every evidence variable and all of its ancestors.
    """
    keep = {v.key for v in network.ancestors_of(query.target)}
    for ev in query.evidence:
        keep.add(network.get_variable(ev.label).key)
        keep.update(v.key for v in network.ancestors_of(ev.label))
    return keep


def prune_order(order: Sequence[str], query: "Query", network: "BayesianNetwork") -> List[str]:
    """Restrict ``order`` to the variables relevant to ``query``.

    Sequence and spelling of the candidate order are kept; the target is always
    dropped, as it is read from the final factor rather than summed out.
    """
    keep = relevant_labels(network, query)
    keep.discard(network.get_variable(query.target).key)
    pruned: List[str] = []
    seen: Set[str] = set()
    for label in order:
        key = label.strip().casefold()
        if key in keep and key not in seen:
            seen.add(key)
            pruned.append(label)
    return pruned


__all__ = ["prune_order", "relevant_labels"]
