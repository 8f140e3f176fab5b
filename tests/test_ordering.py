"""Tests for the elimination-order strategies."""

import pytest

from bn_elimination.induced_graph import InducedGraph
from bn_elimination.ordering import (
    DEFAULT_SEED,
    GreedyOrdering,
    MaxCardinalitySearchOrdering,
    ProvidedOrdering,
    make_ordering,
)
from bn_elimination.query import Query

HEURISTICS = [MaxCardinalitySearchOrdering, GreedyOrdering]


class TestProvidedOrdering:
    def test_returns_copy_of_order(self, bna):
        strategy = ProvidedOrdering(["A", "B", "C"])
        order = strategy.get_order(Query("D", True), bna)
        assert order == ["A", "B", "C"]
        order.append("X")
        assert strategy.get_order(Query("D", True), bna) == ["A", "B", "C"]

    def test_duplicates_removed_first_kept(self, bna):
        strategy = ProvidedOrdering(["B", "A", "b", "C", "A"])
        assert strategy.get_order(Query("D", True), bna) == ["B", "A", "C"]


@pytest.mark.parametrize("cls", HEURISTICS)
class TestHeuristicOrderings:
    def test_permutation_of_non_target_variables(self, cls, bnc):
        order = cls(seed=5).get_order(Query("Z", True), bnc)
        assert sorted(order) == sorted(label for label in bnc.labels if label != "Z")

    def test_target_never_in_order(self, cls, bna):
        for seed in range(10):
            assert "B" not in cls(seed=seed).get_order(Query("b", True), bna)

    def test_same_seed_same_order(self, cls, bnc):
        query = Query("U", True)
        strategy = cls(seed=11)
        first = strategy.get_order(query, bnc)
        assert strategy.get_order(query, bnc) == first
        assert cls(seed=11).get_order(query, bnc) == first

    def test_seeds_vary_the_order(self, cls, bnc):
        query = Query("Z", True)
        orders = {tuple(cls(seed=seed).get_order(query, bnc)) for seed in range(30)}
        assert len(orders) > 1

    def test_does_not_modify_network(self, cls, bnc):
        edges = bnc.edges()
        cls(seed=3).get_order(Query("Z", True), bnc)
        assert bnc.edges() == edges


class TestSelection:
    def test_max_cardinality_ties_go_to_first_candidate(self, bna):
        graph = InducedGraph.from_network(bna)
        # A and C both have one marked neighbour (B)
        pick = MaxCardinalitySearchOrdering()._select(graph, ["A", "C", "D"], {"B"})
        assert pick == "A"

    def test_greedy_picks_fewest_marked_neighbours(self, bna):
        graph = InducedGraph.from_network(bna)
        pick = GreedyOrdering()._select(graph, ["A", "C", "D"], {"B"})
        assert pick == "D"

    def test_greedy_applies_fill_in(self, bna):
        graph = InducedGraph.from_network(bna)
        filled = GreedyOrdering()._after_pick(graph, "B")
        assert filled.has_edge("A", "C")
        assert not graph.has_edge("A", "C")

    def test_max_cardinality_reverses(self):
        assert MaxCardinalitySearchOrdering()._finish(["A", "B", "C"]) == ["C", "B", "A"]


class TestMakeOrdering:
    def test_names(self):
        assert isinstance(make_ordering("provided", order=["A"]), ProvidedOrdering)
        assert isinstance(make_ordering("max_cardinality"), MaxCardinalitySearchOrdering)
        assert isinstance(make_ordering("MCS"), MaxCardinalitySearchOrdering)
        assert isinstance(make_ordering("greedy"), GreedyOrdering)

    def test_default_seed(self):
        assert make_ordering("greedy").seed == DEFAULT_SEED == 123

    def test_provided_needs_order(self):
        with pytest.raises(ValueError):
            make_ordering("provided")

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            make_ordering("min_fill")
