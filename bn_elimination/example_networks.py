"""
Small sample networks used by the CLI, the experiments and the tests.

CPT values follow ``BayesianNetwork.set_cpt``: canonical order over
``(parents..., node)`` with the node as the fastest-changing position, so
each consecutive pair is ``P(node=F | ...), P(node=T | ...)``.

    BNA: A -> B -> C -> D                        (chain)
    BNB: J -> K -> M <- L, M -> N, M -> O        (converging + diverging)
    BNC: P -> Q, Q -> {V, S}, R -> {V, S},
         {V, S} -> Z, S -> U                     (loopy, two parents per node)
"""

from __future__ import annotations

from typing import Callable, Dict, List

from .network import BayesianNetwork


def build_bna() -> BayesianNetwork:
    network = BayesianNetwork()
    a, b, c, d = network.add_variables("A", "B", "C", "D")
    network.add_edge(a, b)
    network.add_edge(b, c)
    network.add_edge(c, d)
    network.set_cpt(a, [0.95, 0.05])
    network.set_cpt(b, [0.2, 0.8, 0.95, 0.05])
    network.set_cpt(c, [0.7, 0.3, 0.9, 0.1])
    network.set_cpt(d, [0.4, 0.6, 0.6, 0.4])
    return network


def build_bnb() -> BayesianNetwork:
    network = BayesianNetwork()
    j, k, l, m, n, o = network.add_variables("J", "K", "L", "M", "N", "O")
    network.add_edge(j, k)
    network.add_edge(k, m)
    network.add_edge(l, m)
    network.add_edge(m, n)
    network.add_edge(m, o)
    network.set_cpt(j, [0.05, 0.95])
    network.set_cpt(k, [0.9, 0.1, 0.7, 0.3])
    network.set_cpt(l, [0.7, 0.3])
    network.set_cpt(m, [0.6, 0.4, 0.7, 0.3, 0.2, 0.8, 0.1, 0.9])
    network.set_cpt(n, [0.6, 0.4, 0.2, 0.8])
    network.set_cpt(o, [0.05, 0.95, 0.8, 0.2])
    return network


def build_bnc() -> BayesianNetwork:
    network = BayesianNetwork()
    p, q, r, s, u, v, z = network.add_variables("P", "Q", "R", "S", "U", "V", "Z")
    network.add_edges_from([
        (p, q), (q, v), (q, s), (r, v), (r, s), (v, z), (s, z), (s, u),
    ])
    network.set_cpt(p, [0.05, 0.95])
    network.set_cpt(q, [0.9, 0.1, 0.7, 0.3])
    network.set_cpt(r, [0.7, 0.3])
    network.set_cpt(s, [0.6, 0.4, 0.7, 0.3, 0.2, 0.8, 0.1, 0.9])
    network.set_cpt(u, [0.05, 0.95, 0.8, 0.2])
    network.set_cpt(v, [0.7, 0.3, 0.55, 0.45, 0.15, 0.85, 0.1, 0.9])
    network.set_cpt(z, [0.65, 0.35, 0.7, 0.3, 0.4, 0.6, 0.2, 0.8])
    return network


NETWORKS: Dict[str, Callable[[], BayesianNetwork]] = {
    "BNA": build_bna,
    "BNB": build_bnb,
    "BNC": build_bnc,
}


def available_networks() -> List[str]:
    return sorted(NETWORKS)


def build_network(name: str) -> BayesianNetwork:
    try:
        return NETWORKS[name.strip().upper()]()
    except KeyError:
        raise ValueError(f"Unknown network: {name}. Use one of {', '.join(available_networks())}") from None


__all__ = ["build_bna", "build_bnb", "build_bnc", "build_network", "available_networks", "NETWORKS"]
