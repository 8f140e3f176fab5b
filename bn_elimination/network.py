"""
Binary Bayesian network model.

The network is an arena: every ``Variable`` is stored once in an ordered list
and addressed by its integer index. Parent and child relations are kept as
ordered index lists rather than mutual object references, so a variable never
holds a pointer back into the graph that owns it.

Example:
    >>> bn = BayesianNetwork()
    >>> a, b = bn.add_variables("A", "B")
    >>> bn.add_edge(a, b)
    >>> bn.set_cpt(a, [0.95, 0.05])
    >>> bn.set_cpt(b, [0.2, 0.8, 0.95, 0.05])  # P(B|A), node fastest-changing
    >>> bn.get_cpt("b").get({"A": True, "B": True})
    0.05
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

import networkx as nx

from .errors import MalformedCPTError, UnknownVariableError
from .factor import Factor


@dataclass(frozen=True)
class Variable:
    """A binary random variable declared by a network."""

    label: str
    index: int

    @property
    def key(self) -> str:
        # Labels are unique case-insensitively
        return self.label.casefold()

    def __str__(self) -> str:
        return self.label


VariableRef = Union[Variable, str]


class BayesianNetwork:
    def __init__(self) -> None:
        self._variables: List[Variable] = []
        self._by_key: Dict[str, int] = {}
        self._parents: List[List[int]] = []
        self._children: List[List[int]] = []
        self._cpts: List[Optional[Factor]] = []

    # ------------------------------
    # Construction
    # ------------------------------

    def add_variable(self, label: str) -> Variable:
        label = label.strip()
        if not label:
            raise ValueError("Variable label must be a non-empty string")
        if label.casefold() in self._by_key:
            raise ValueError(f"Variable '{label}' is already declared")
        var = Variable(label=label, index=len(self._variables))
        self._variables.append(var)
        self._by_key[var.key] = var.index
        self._parents.append([])
        self._children.append([])
        self._cpts.append(None)
        return var

    def add_variables(self, *labels: str) -> List[Variable]:
        return [self.add_variable(label) for label in labels]

    def add_edge(self, parent: VariableRef, child: VariableRef) -> None:
        """Add the directed edge parent -> child.

        Acyclicity is not checked here (see ``check_model``). Adding a parent to
        a variable that already has a CPT discards that CPT, since its size no
        longer matches.
        """
        p = self.get_variable(parent)
        c = self.get_variable(child)
        if p.index == c.index:
            raise ValueError(f"Self-loop on '{p.label}' is not allowed")
        if p.index in self._parents[c.index]:
            return
        self._parents[c.index].append(p.index)
        self._children[p.index].append(c.index)
        self._cpts[c.index] = None

    def add_edges_from(self, edges: Iterable[Tuple[VariableRef, VariableRef]]) -> None:
        for parent, child in edges:
            self.add_edge(parent, child)

    def set_cpt(self, variable: VariableRef, values: Sequence[float]) -> Factor:
        """Attach the CPT of ``variable``.

        ``values`` lists ``2 ** (len(parents) + 1)`` probabilities in canonical
        order over ``(parents..., variable)``: the first parent is the most
        significant position, the variable itself the least, False before True.
        """
        var = self.get_variable(variable)
        scope = [self._variables[i] for i in self._parents[var.index]] + [var]
        expected = 2 ** len(scope)
        if len(values) != expected:
            raise MalformedCPTError(
                f"CPT for '{var.label}' needs {expected} values "
                f"({len(scope) - 1} parents), got {len(values)}"
            )
        cpt = Factor.from_values(scope, values)
        self._cpts[var.index] = cpt
        return cpt

    # ------------------------------
    # Lookup
    # ------------------------------

    @property
    def variables(self) -> List[Variable]:
        return list(self._variables)

    @property
    def labels(self) -> List[str]:
        return [v.label for v in self._variables]

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Variable):
            return self.has_variable(item.label)
        if isinstance(item, str):
            return self.has_variable(item)
        return False

    def has_variable(self, label: str) -> bool:
        return label.strip().casefold() in self._by_key

    def get_variable(self, ref: VariableRef) -> Variable:
        label = ref.label if isinstance(ref, Variable) else ref
        idx = self._by_key.get(label.strip().casefold())
        if idx is None:
            raise UnknownVariableError(label)
        return self._variables[idx]

    def parents_of(self, ref: VariableRef) -> List[Variable]:
        var = self.get_variable(ref)
        return [self._variables[i] for i in self._parents[var.index]]

    def children_of(self, ref: VariableRef) -> List[Variable]:
        var = self.get_variable(ref)
        return [self._variables[i] for i in self._children[var.index]]

    def edges(self) -> List[Tuple[str, str]]:
        return [
            (self._variables[p].label, child.label)
            for child in self._variables
            for p in self._parents[child.index]
        ]

    def has_cpt(self, ref: VariableRef) -> bool:
        return self._cpts[self.get_variable(ref).index] is not None

    def get_cpt(self, ref: VariableRef) -> Factor:
        """Return the stored CPT factor (not a copy; callers must not mutate it)."""
        var = self.get_variable(ref)
        cpt = self._cpts[var.index]
        if cpt is None:
            raise MalformedCPTError(f"Variable '{var.label}' has no CPT")
        return cpt

    def ancestors_of(self, ref: VariableRef) -> Set[Variable]:
        """All transitive parents of ``ref`` (the variable itself excluded)."""
        var = self.get_variable(ref)
        seen: Set[int] = set()
        stack = list(self._parents[var.index])
        while stack:
            idx = stack.pop()
            if idx in seen:
                continue
            seen.add(idx)
            stack.extend(self._parents[idx])
        return {self._variables[i] for i in seen}

    # ------------------------------
    # Validation & conversion
    # ------------------------------

    def to_networkx(self) -> nx.DiGraph:
        G = nx.DiGraph()
        G.add_nodes_from(self.labels)
        G.add_edges_from(self.edges())
        return G

    def check_model(self) -> bool:
        if not nx.is_directed_acyclic_graph(self.to_networkx()):
            raise ValueError("Network contains a directed cycle")
        missing = [v.label for v in self._variables if self._cpts[v.index] is None]
        if missing:
            raise MalformedCPTError(f"Variables without a CPT: {', '.join(missing)}")
        return True

    def __repr__(self) -> str:
        return f"BayesianNetwork({len(self)} variables, {len(self.edges())} edges)"


__all__ = ["Variable", "VariableRef", "BayesianNetwork"]
