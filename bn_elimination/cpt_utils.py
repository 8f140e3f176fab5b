from __future__ import annotations

from itertools import product
from typing import TYPE_CHECKING, List, Sequence

from .factor import Factor

if TYPE_CHECKING:  # pragma: no cover
    from .network import BayesianNetwork, VariableRef


def _format_table(rows: List[List[str]]) -> str:
    widths = [max(len(cell) for cell in column) for column in zip(*rows)]
    rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [rule]
    for row in rows:
        lines.append("| " + " | ".join(cell.ljust(w) for cell, w in zip(row, widths)) + " |")
        lines.append(rule)
    return "\n".join(lines)


def _state(value: bool) -> str:
    return "T" if value else "F"


def format_probability(p: float) -> str:
    """Fixed five-decimal rendering used by the CLI, e.g. ``0.57050``."""
    return f"{p:.5f}"


def factor_to_ascii_table(factor: Factor, as_cpt: bool = False) -> str:
    """One row per assignment, in canonical order, plus the factor's value."""
    rows: List[List[str]] = [factor.labels + [factor.describe(as_cpt=as_cpt)]]
    for key, p in factor.items():
        rows.append([_state(v) for v in key] + [f"{p:.4f}"])
    return _format_table(rows)


def cpt_to_ascii_table(network: "BayesianNetwork", variable: "VariableRef") -> str:
    """CPT of ``variable`` with parent assignments as columns and node states as rows."""
    var = network.get_variable(variable)
    cpt = network.get_cpt(var)
    parents = [p.label for p in network.parents_of(var)]

    def cell(assignment: dict) -> str:
        return f"{cpt.get(assignment):.4f}"

    if not parents:
        rows = [["Node(Value)", "Probability"]]
        rows += [[f"{var.label}({_state(s)})", cell({var.label: s})] for s in (False, True)]
        return _format_table(rows)

    columns: Sequence[tuple] = list(product((False, True), repeat=len(parents)))
    rows = [[p] + [f"{p}({_state(col[i])})" for col in columns] for i, p in enumerate(parents)]
    for s in (False, True):
        rows.append([f"{var.label}({_state(s)})"]
                    + [cell({**dict(zip(parents, col)), var.label: s}) for col in columns])
    return _format_table(rows)


def render_network(network: "BayesianNetwork") -> str:
    """Every variable (declaration order) with its CPT, for console output."""
    blocks: List[str] = []
    for var in network:
        lines = [
            "______________________________",
            f"Random Variable: {var.label}",
            "",
        ]
        if network.has_cpt(var):
            lines.append(cpt_to_ascii_table(network, var))
        else:
            lines.append("(no CPT)")
        lines.append("______________________________")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


__all__ = [
    "format_probability",
    "factor_to_ascii_table",
    "cpt_to_ascii_table",
    "render_network",
]
