"""
Conversion between ``BayesianNetwork`` and pgmpy's ``DiscreteBayesianNetwork``.

pgmpy stores a CPD as a ``(variable_card, prod(evidence_card))`` matrix: one
row per state of the node, one column per parent assignment with the last
parent changing fastest. That is the transpose of the ``(parents..., node)``
canonical order used here, so a conversion is a reshape plus a transpose.

Only binary variables are supported. State 0 is ``F`` and state 1 is ``T``
unless the pgmpy state names say otherwise.
"""

from __future__ import annotations

from typing import Dict, List

import networkx as nx
import numpy as np
from pgmpy.factors.discrete import TabularCPD
from pgmpy.inference import VariableElimination as PgmpyVariableElimination
from pgmpy.models import DiscreteBayesianNetwork

from .errors import MalformedCPTError
from .network import BayesianNetwork
from .query import Query, parse_bool

STATE_NAMES: List[str] = ["F", "T"]


def _state_name(value: bool) -> str:
    return STATE_NAMES[int(value)]


def to_pgmpy(network: BayesianNetwork) -> DiscreteBayesianNetwork:
    """Build an equivalent pgmpy model; every variable must have a CPT."""
    model = DiscreteBayesianNetwork(network.edges())
    model.add_nodes_from(network.labels)

    cpds: List[TabularCPD] = []
    for var in network:
        cpt = network.get_cpt(var)
        parents = [p.label for p in network.parents_of(var)]
        # (parents..., node) -> (node, parent assignments)
        values = cpt.to_numpy().reshape(-1, 2).T
        state_names = {label: STATE_NAMES for label in [var.label] + parents}
        if parents:
            cpd = TabularCPD(
                variable=var.label,
                variable_card=2,
                values=values,
                evidence=parents,
                evidence_card=[2] * len(parents),
                state_names=state_names,
            )
        else:
            cpd = TabularCPD(
                variable=var.label,
                variable_card=2,
                values=values.reshape(2, 1),
                state_names=state_names,
            )
        cpds.append(cpd)

    model.add_cpds(*cpds)
    model.check_model()
    return model


def _true_index(cpd: TabularCPD, variable: str) -> int:
    names = cpd.state_names.get(variable, [0, 1])
    try:
        parsed = [parse_bool(str(name)) for name in names]
    except ValueError:
        return 1
    if parsed == [True, False]:
        return 0
    return 1


def from_pgmpy(model: DiscreteBayesianNetwork) -> BayesianNetwork:
    """Build a ``BayesianNetwork`` from a binary pgmpy model.

    Variables are declared in topological order and each variable's parents
    follow the evidence order of its CPD.

    Raises:
        MalformedCPTError: a variable is not binary or has no CPD
    """
    network = BayesianNetwork()
    order = [str(node) for node in nx.topological_sort(model)]
    for label in order:
        network.add_variable(label)

    cpds: Dict[str, TabularCPD] = {}
    for label in order:
        cpd = model.get_cpds(label)
        if cpd is None:
            raise MalformedCPTError(f"No CPD for '{label}' in pgmpy model")
        if any(int(card) != 2 for card in cpd.cardinality):
            raise MalformedCPTError(
                f"CPD of '{label}' is not binary (cardinalities {list(cpd.cardinality)})"
            )
        cpds[label] = cpd
        for parent in cpd.variables[1:]:
            network.add_edge(str(parent), label)

    for label, cpd in cpds.items():
        variables = [str(v) for v in cpd.variables]
        table = np.asarray(cpd.get_values(), dtype=float).reshape((2,) * len(variables))
        for axis, name in enumerate(variables):
            if _true_index(cpd, name) == 0:
                table = np.flip(table, axis=axis)
        # (node, parents...) -> (parents..., node)
        table = np.moveaxis(table, 0, -1)
        network.set_cpt(label, table.ravel().tolist())

    return network


def pgmpy_probability(model: DiscreteBayesianNetwork, query: Query) -> float:
    """Answer ``query`` with pgmpy's own variable elimination (reference value)."""
    infer = PgmpyVariableElimination(model)
    evidence = {ev.label: _state_name(ev.value) for ev in query.evidence} or None
    factor = infer.query(variables=[query.target], evidence=evidence, show_progress=False)
    return float(factor.values[factor.state_names[query.target].index(_state_name(query.value))])


__all__ = ["STATE_NAMES", "to_pgmpy", "from_pgmpy", "pgmpy_probability"]
