"""
Factor algebra over binary variables.

A ``Factor`` maps every boolean assignment of an ordered tuple of variables to
a float. Keys are tuples of bools aligned with the factor's own variable order;
that order differs from factor to factor, so two factors are always combined
through label -> value maps, never through raw keys.

Canonical value order (used by ``from_values`` and ``values``) is binary
counting with the first variable as the most significant position and False
before True, i.e. ``itertools.product((False, True), repeat=k)``.
"""

from __future__ import annotations

from itertools import product
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InconsistentEvidenceError, MalformedCPTError, UnknownVariableError

if TYPE_CHECKING:  # pragma: no cover
    from .network import Variable

Key = Tuple[bool, ...]
LabelRef = Union["Variable", str]

STATES: Tuple[bool, bool] = (False, True)


def _key_of(ref: LabelRef) -> str:
    if isinstance(ref, str):
        return ref.strip().casefold()
    return ref.key


def _assignments(k: int) -> Iterator[Key]:
    return product(STATES, repeat=k)


class Factor:
    def __init__(self, variables: Sequence["Variable"], table: Optional[Dict[Key, float]] = None):
        self._variables: Tuple["Variable", ...] = tuple(variables)
        self._keys: Tuple[str, ...] = tuple(v.key for v in self._variables)
        if len(set(self._keys)) != len(self._keys):
            raise MalformedCPTError(f"Duplicate variables in factor scope: {self.labels}")
        if table is None:
            table = {key: 0.0 for key in _assignments(len(self._variables))}
        elif len(table) != 2 ** len(self._variables):
            raise MalformedCPTError(
                f"Factor over {len(self._variables)} variables needs {2 ** len(self._variables)} entries, "
                f"got {len(table)}"
            )
        self._table: Dict[Key, float] = table

    @classmethod
    def from_values(cls, variables: Sequence["Variable"], values: Sequence[float]) -> "Factor":
        """Build a factor from a flat list of ``2 ** len(variables)`` values in canonical order."""
        expected = 2 ** len(variables)
        if len(values) != expected:
            raise MalformedCPTError(
                f"Expected {expected} values for variables "
                f"{[v.label for v in variables]}, got {len(values)}"
            )
        table = {key: float(p) for key, p in zip(_assignments(len(variables)), values)}
        return cls(variables, table)

    # ------------------------------
    # Introspection
    # ------------------------------

    @property
    def variables(self) -> Tuple["Variable", ...]:
        return self._variables

    @property
    def labels(self) -> List[str]:
        return [v.label for v in self._variables]

    @property
    def size(self) -> int:
        return len(self._table)

    @property
    def num_variables(self) -> int:
        return len(self._variables)

    def includes(self, ref: LabelRef) -> bool:
        return _key_of(ref) in self._keys

    def _position(self, ref: LabelRef) -> int:
        try:
            return self._keys.index(_key_of(ref))
        except ValueError:
            label = ref if isinstance(ref, str) else ref.label
            raise UnknownVariableError(label, f"factor {self.describe()}") from None

    def assignments(self) -> Iterator[Key]:
        return _assignments(len(self._variables))

    def items(self) -> Iterator[Tuple[Key, float]]:
        for key in self.assignments():
            yield key, self._table[key]

    def values(self) -> List[float]:
        """Table entries in canonical order."""
        return [p for _, p in self.items()]

    def to_numpy(self) -> np.ndarray:
        """Entries as an array of shape ``(2,) * k``, axis i indexed by variable i (0=False)."""
        return np.array(self.values(), dtype=float).reshape((2,) * len(self._variables))

    def assignment_map(self, key: Key) -> Dict[str, bool]:
        return dict(zip(self._keys, key))

    # ------------------------------
    # Lookup
    # ------------------------------

    def _lookup(self, normalized: Mapping[str, bool]) -> float:
        # ``normalized`` is keyed by casefolded labels
        try:
            key = tuple(bool(normalized[k]) for k in self._keys)
        except KeyError as exc:
            missing = self._variables[self._keys.index(exc.args[0])].label
            raise UnknownVariableError(missing, "assignment") from None
        return self._table[key]

    def get(self, assignment: Mapping[LabelRef, bool]) -> float:
        """Probability stored for ``assignment`` (label -> bool; extra labels are ignored)."""
        return self._lookup({_key_of(ref): value for ref, value in assignment.items()})

    # ------------------------------
    # Algebra
    # ------------------------------

    def join(self, other: "Factor") -> "Factor":
        """Pointwise product over the union of both scopes.

        The result keeps this factor's variables first, followed by the variables
        only ``other`` has.
        """
        scope = list(self._variables) + [v for v in other._variables if v.key not in self._keys]
        keys = [v.key for v in scope]
        table: Dict[Key, float] = {}
        for key in _assignments(len(scope)):
            normalized = dict(zip(keys, key))
            table[key] = self._lookup(normalized) * other._lookup(normalized)
        return Factor(scope, table)

    def sum_out(self, ref: LabelRef) -> "Factor":
        """Marginalize ``ref`` away; the result has one variable less."""
        pos = self._position(ref)
        removed = self._keys[pos]
        scope = [v for i, v in enumerate(self._variables) if i != pos]
        keys = [v.key for v in scope]
        table: Dict[Key, float] = {}
        for key in _assignments(len(scope)):
            normalized = dict(zip(keys, key))
            total = 0.0
            for state in (True, False):
                normalized[removed] = state
                total += self._lookup(normalized)
            table[key] = total
        return Factor(scope, table)

    def project_to_zero(self, ref: LabelRef, value: bool) -> None:
        """In place: zero every entry whose assignment has ``ref == value``."""
        pos = self._position(ref)
        for key in self._table:
            if key[pos] == value:
                self._table[key] = 0.0

    def reduce_to_evidence(self, ref: LabelRef, observed: bool) -> None:
        """In place: keep only the entries consistent with ``ref == observed``."""
        self.project_to_zero(ref, not observed)

    def normalize(self) -> None:
        """In place: scale a single-variable factor so its entries sum to one."""
        if len(self._variables) != 1:
            raise ValueError(f"normalize() needs a single-variable factor, got {self.describe()}")
        total = sum(self._table.values())
        if total == 0.0:
            raise InconsistentEvidenceError(
                f"All probability mass of {self.describe()} was ruled out by the evidence"
            )
        for key in self._table:
            self._table[key] /= total

    def copy(self) -> "Factor":
        return Factor(self._variables, dict(self._table))

    # ------------------------------
    # Comparison & display
    # ------------------------------

    def allclose(self, other: "Factor", atol: float = 1e-9) -> bool:
        """True when both factors span the same variables and agree on every assignment."""
        if set(self._keys) != set(other._keys):
            return False
        for key, p in self.items():
            if abs(p - other._lookup(self.assignment_map(key))) > atol:
                return False
        return True

    def describe(self, as_cpt: bool = False) -> str:
        """Short label: ``f(A,B)``, or ``P(B|A)`` when read as a CPT (node last)."""
        labels = self.labels
        if as_cpt and labels:
            node, parents = labels[-1], labels[:-1]
            return f"P({node}|{','.join(parents)})" if parents else f"P({node})"
        return f"f({','.join(labels)})"

    def __repr__(self) -> str:
        return f"Factor({self.describe()}, {self.values()})"


__all__ = ["Factor", "STATES"]
