"""Tests for random DAG and binary network generation."""

import networkx as nx
import numpy as np
import pytest

from bn_elimination.network_generation import (
    generate_binary_network_from_dag,
    generate_dag_with_treewidth,
    generate_graph_with_target_treewidth,
    generate_random_network,
    undirected_to_dag,
)


class TestSkeleton:
    @pytest.mark.parametrize("target", [1, 2, 3])
    def test_reaches_target(self, target):
        G, width, diff = generate_graph_with_target_treewidth(10, target, rng=np.random.default_rng(0))
        assert nx.is_connected(G)
        assert G.number_of_nodes() == 10
        assert diff == abs(width - target)
        assert width >= target


class TestDagGeneration:
    @pytest.mark.parametrize("method", ["topological", "random"])
    def test_orientation_keeps_every_edge(self, method):
        G = nx.cycle_graph(6)
        dag = undirected_to_dag(G, method, np.random.default_rng(3))
        assert nx.is_directed_acyclic_graph(dag)
        assert dag.number_of_edges() == G.number_of_edges()

    def test_unknown_orientation(self):
        with pytest.raises(ValueError):
            undirected_to_dag(nx.path_graph(3), "bfs")

    def test_dag_is_reproducible(self):
        dag1, tw1, _ = generate_dag_with_treewidth(9, 2, seed=5)
        dag2, tw2, _ = generate_dag_with_treewidth(9, 2, seed=5)
        assert sorted(dag1.edges()) == sorted(dag2.edges())
        assert tw1 == tw2

    def test_dag_shape(self):
        dag, _, meta = generate_dag_with_treewidth(8, 2, seed=1)
        assert nx.is_directed_acyclic_graph(dag)
        assert sorted(dag.nodes()) == sorted(f"V{i}" for i in range(8))
        assert meta["dag_edges"] >= 7

    def test_treewidth_must_be_below_node_count(self):
        with pytest.raises(ValueError):
            generate_dag_with_treewidth(4, 4)


class TestNetworkGeneration:
    def test_network_is_complete(self):
        network, meta = generate_random_network(8, 2, seed=42)
        assert len(network) == 8
        assert network.check_model()
        assert meta["achieved_treewidth"] >= 1

    def test_cpt_rows_sum_to_one(self):
        network, _ = generate_random_network(7, 3, seed=9)
        for var in network:
            values = network.get_cpt(var).values()
            for i in range(0, len(values), 2):
                assert values[i] + values[i + 1] == pytest.approx(1.0)

    def test_same_seed_same_cpts(self):
        a, _ = generate_random_network(6, 2, seed=17)
        b, _ = generate_random_network(6, 2, seed=17)
        assert a.edges() == b.edges()
        for var in a:
            assert a.get_cpt(var.label).values() == b.get_cpt(var.label).values()

    def test_fully_deterministic_rows(self):
        dag = nx.DiGraph([("X", "Y"), ("X", "Z"), ("Y", "Z")])
        network, _ = generate_binary_network_from_dag(dag, determinism_fraction=1.0, seed=0)
        for var in network:
            assert set(network.get_cpt(var).values()) <= {0.0, 1.0}

    def test_parents_follow_dag(self):
        dag = nx.DiGraph([("X", "Y"), ("X", "Z"), ("Y", "Z")])
        network, _ = generate_binary_network_from_dag(dag, seed=0)
        assert network.labels == ["X", "Y", "Z"]
        assert sorted(p.label for p in network.parents_of("Z")) == ["X", "Y"]

    def test_cyclic_graph_rejected(self):
        with pytest.raises(ValueError):
            generate_binary_network_from_dag(nx.DiGraph([("X", "Y"), ("Y", "X")]))


def test_command_line(monkeypatch, capsys):
    from bn_elimination.network_generation import main

    monkeypatch.setattr("sys.argv", ["generate", "--n-nodes", "5", "--target-treewidth", "1", "--seed", "3"])
    main()
    out = capsys.readouterr().out
    assert "Generated BayesianNetwork(5 variables" in out
    assert "Random Variable: V0" in out
