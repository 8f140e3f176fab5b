"""Shared fixtures: the bundled sample networks and a non-interactive matplotlib backend."""

import matplotlib

matplotlib.use("Agg")

import pytest

from bn_elimination.elimination import VariableElimination
from bn_elimination.example_networks import build_bna, build_bnb, build_bnc
from bn_elimination.network import BayesianNetwork
from bn_elimination.ordering import ProvidedOrdering


@pytest.fixture
def bna():
    """Chain A -> B -> C -> D."""
    return build_bna()


@pytest.fixture
def bnb():
    return build_bnb()


@pytest.fixture
def bnc():
    return build_bnc()


@pytest.fixture
def engine(bna):
    """Variable elimination on BNA with the order A, B, C."""
    return VariableElimination(bna, ProvidedOrdering(["A", "B", "C"]))


@pytest.fixture
def ab_variables():
    network = BayesianNetwork()
    return network.add_variables("A", "B")


@pytest.fixture
def abc_variables():
    network = BayesianNetwork()
    return network.add_variables("A", "B", "C")
