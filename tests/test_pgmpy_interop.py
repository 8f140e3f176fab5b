"""Conversion to and from pgmpy, and agreement with pgmpy's variable elimination."""

import pytest
from pgmpy.factors.discrete import TabularCPD
from pgmpy.models import DiscreteBayesianNetwork

from bn_elimination.elimination import VariableElimination
from bn_elimination.errors import MalformedCPTError
from bn_elimination.network_generation import generate_random_network
from bn_elimination.ordering import GreedyOrdering, MaxCardinalitySearchOrdering
from bn_elimination.pgmpy_interop import from_pgmpy, pgmpy_probability, to_pgmpy
from bn_elimination.query import Query


class TestToPgmpy:
    def test_cpd_layout(self, bna):
        model = to_pgmpy(bna)
        values = model.get_cpds("B").get_values()
        assert values.shape == (2, 2)
        # rows: B state, columns: A state
        assert values[1][0] == pytest.approx(0.8)
        assert values[1][1] == pytest.approx(0.05)

    def test_marginal_matches(self, bna):
        assert pgmpy_probability(to_pgmpy(bna), Query("D", True)) == pytest.approx(0.5705)

    def test_conditional_matches(self, bna):
        query = Query("D", True, [("A", True)])
        assert pgmpy_probability(to_pgmpy(bna), query) == pytest.approx(0.542)


class TestFromPgmpy:
    def test_round_trip(self, bnc):
        back = from_pgmpy(to_pgmpy(bnc))
        assert set(back.labels) == set(bnc.labels)
        for var in bnc:
            assert [p.label for p in back.parents_of(var.label)] == [p.label for p in bnc.parents_of(var)]
            assert back.get_cpt(var.label).allclose(bnc.get_cpt(var))

    def test_state_names_decide_true_state(self):
        model = DiscreteBayesianNetwork()
        model.add_node("X")
        model.add_cpds(TabularCPD("X", 2, [[0.3], [0.7]], state_names={"X": ["yes", "no"]}))
        network = from_pgmpy(model)
        assert network.get_cpt("X").get({"X": True}) == pytest.approx(0.3)

    def test_non_binary_rejected(self):
        model = DiscreteBayesianNetwork([("X", "Y")])
        model.add_cpds(
            TabularCPD("X", 3, [[0.2], [0.3], [0.5]]),
            TabularCPD("Y", 2, [[0.1, 0.2, 0.3], [0.9, 0.8, 0.7]], evidence=["X"], evidence_card=[3]),
        )
        with pytest.raises(MalformedCPTError):
            from_pgmpy(model)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_agreement_on_generated_networks(seed):
    network, _ = generate_random_network(8, 2, seed=seed)
    model = to_pgmpy(network)
    engine = VariableElimination(network)
    labels = network.labels
    for target in labels:
        evidence = [(labels[0], True)] if target != labels[0] else []
        query = Query(target, True, evidence)
        expected = pgmpy_probability(model, query)
        for strategy in (MaxCardinalitySearchOrdering(seed), GreedyOrdering(seed)):
            result = engine.query(query, strategy)
            assert result.ok
            assert result.probability == pytest.approx(expected, abs=1e-9)
