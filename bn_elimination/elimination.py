"""
Variable elimination over a binary Bayesian network.

``VariableElimination.query`` answers ``P(target = v)`` or
``P(target = v | evidence)`` in these steps:

1. Resolve the target and evidence labels in the network.
2. Ask the ordering strategy for a candidate elimination order.
3. Prune the order to the ancestors of the target and the evidence.
4. Copy the CPT of every variable in the pruned order plus the target's.
5. Zero every row inconsistent with the evidence.
6. For each label in order: join all factors that mention it, sum it out.
7. Join whatever factors remain.
8. Normalize (evidence only) and read the target's entry.

Errors on bad input (unknown labels, missing CPTs, evidence with zero joint
probability) come back as a failed ``QueryResult``; nothing is retried and the
network is never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Dict, List, Optional

from .errors import BayesianNetworkError, EmptyFactorSetError
from .factor import Factor
from .network import BayesianNetwork
from .ordering import OrderingStrategy
from .pruning import prune_order, relevant_labels
from .query import Query, QueryResult

logger = logging.getLogger(__name__)


@dataclass
class _Run:
    order: List[str] = field(default_factory=list)
    join_count: int = 0
    history: Dict[str, List[str]] = field(default_factory=dict)


class VariableElimination:
    def __init__(self,
                 network: BayesianNetwork,
                 ordering: Optional[OrderingStrategy] = None,
                 verbose: bool = False):
        self.network = network
        self.ordering = ordering
        self.verbose = verbose

    # ------------------------------
    # Public API
    # ------------------------------

    def query(self,
              query: Query,
              ordering: Optional[OrderingStrategy] = None,
              verbose: Optional[bool] = None) -> QueryResult:
        """Answer ``query``; failures are reported in the result, not raised.

        ``ordering`` and ``verbose`` override the values given at construction.
        ``EmptyFactorSetError`` is the one exception that propagates: it means
        the order and the factor set disagree, which is a bug, not bad input.
        """
        run = _Run()
        try:
            final = self._eliminate(query, ordering, verbose, run)
            probability = final.get({query.target: query.value})
        except EmptyFactorSetError:
            raise
        except BayesianNetworkError as exc:
            logger.warning("Query %s failed (%s): %s", query, exc.kind.value, exc)
            return QueryResult.failure(exc, run.order)

        logger.info("%s = %.5f (order=%s, joins=%d)", query, probability, run.order, run.join_count)
        return QueryResult(
            probability=probability,
            order=run.order,
            join_count=run.join_count,
            pruning_history=run.history,
        )

    def query_distribution(self,
                           query: Query,
                           ordering: Optional[OrderingStrategy] = None) -> Dict[bool, float]:
        """Both entries of the target's (posterior) marginal; raises on failure."""
        final = self._eliminate(query, ordering, False, _Run())
        return {state: final.get({query.target: state}) for state in (False, True)}

    # ------------------------------
    # Steps
    # ------------------------------

    def _eliminate(self,
                   query: Query,
                   ordering: Optional[OrderingStrategy],
                   verbose: Optional[bool],
                   run: _Run) -> Factor:
        strategy = ordering if ordering is not None else self.ordering
        if strategy is None:
            raise ValueError("No ordering strategy given")
        verbose = self.verbose if verbose is None else verbose

        target = self._resolve(query)
        candidate = strategy.get_order(query, self.network)
        for label in candidate:
            self.network.get_variable(label)
        logger.debug("Candidate order from %r: %s", strategy, candidate)

        order = self._complete(prune_order(candidate, query, self.network), query)
        run.order.extend(order)
        logger.debug("Pruned order: %s", order)

        factors = [self.network.get_cpt(label).copy() for label in order + [target]]
        if query.has_evidence:
            self._apply_evidence(factors, query)

        for label in order:
            factors = self._eliminate_label(factors, label, run)
            if verbose:
                run.history[label] = [f.describe() for f in factors]

        if len(factors) > 1:
            logger.debug("Joining %d remaining factors", len(factors))
            final = self._join_all(factors, run)
        else:
            final = factors[0]

        if query.has_evidence:
            final.normalize()
        return final

    def _resolve(self, query: Query) -> str:
        target = self.network.get_variable(query.target).label
        for ev in query.evidence:
            self.network.get_variable(ev.label)
        return target

    def _complete(self, order: List[str], query: Query) -> List[str]:
        # Relevant variables the candidate order left out are eliminated last
        present = {label.casefold() for label in order}
        target_key = self.network.get_variable(query.target).key
        needed = relevant_labels(self.network, query)
        missing = [
            v.label for v in self.network
            if v.key in needed and v.key not in present and v.key != target_key
        ]
        if missing:
            logger.warning("Order does not cover %s; eliminating them last", missing)
        return order + missing

    @staticmethod
    def _apply_evidence(factors: List[Factor], query: Query) -> None:
        for ev in query.evidence:
            for factor in factors:
                if factor.includes(ev.label):
                    factor.reduce_to_evidence(ev.label, ev.value)

    def _join_all(self, factors: List[Factor], run: _Run) -> Factor:
        def join(left: Factor, right: Factor) -> Factor:
            run.join_count += 1
            return left.join(right)

        return reduce(join, factors)

    def _eliminate_label(self, factors: List[Factor], label: str, run: _Run) -> List[Factor]:
        to_sum = [f for f in factors if f.includes(label)]
        if not to_sum:
            raise EmptyFactorSetError(f"No factor mentions '{label}' at its elimination step")
        summed = self._join_all(to_sum, run).sum_out(label)
        remaining = [f for f in factors if all(f is not g for g in to_sum)]
        remaining.append(summed)
        logger.debug("Eliminated %s: %d factor(s) joined into %s", label, len(to_sum), summed.describe())
        return remaining


def run_query(network: BayesianNetwork,
              query: Query,
              ordering: OrderingStrategy,
              verbose: bool = False) -> QueryResult:
    """One-shot helper: ``VariableElimination(network).query(query, ordering)``."""
    return VariableElimination(network, ordering, verbose=verbose).query(query)


__all__ = ["VariableElimination", "run_query"]
