"""
``bn-elim`` command line.

    bn-elim show BNA [--plot]
    bn-elim query BNA --query D:T --evidence A:T --order A,B,C
    bn-elim query BNC --query Z:T --ordering greedy --seed 7 --verbose
    bn-elim compare BNC --query Z:T --repeats 100
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from .config import InferenceConfig
from .cpt_utils import format_probability, render_network
from .elimination import VariableElimination
from .example_networks import available_networks, build_network
from .logging_config import configure_logging
from .ordering import ORDERING_NAMES
from .query import Query

logger = logging.getLogger(__name__)


def _add_network_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("network", type=str, help=f"Sample network: {', '.join(available_networks())}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bn-elim", description="Exact variable elimination on binary Bayesian networks")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", type=str, default=None, help="Also write log records to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print every CPT of a network")
    _add_network_arg(show)
    show.add_argument("--plot", action="store_true", help="Draw the DAG with matplotlib")

    query = sub.add_parser("query", help="Compute P(target | evidence)")
    _add_network_arg(query)
    query.add_argument("--query", required=True, help="Target and value, e.g. D:T")
    query.add_argument("--evidence", action="append", default=[], help="Observed variable, e.g. A:T (repeatable)")
    query.add_argument("--order", type=str, default=None, help="Comma-separated elimination order, e.g. A,B,C")
    query.add_argument("--ordering", type=str, default=None, choices=ORDERING_NAMES, help="Ordering strategy")
    query.add_argument("--seed", type=int, default=None, help="Seed for the heuristic orderings")
    query.add_argument("--config", type=str, default=None, help="YAML file with inference settings")
    query.add_argument("--verbose", action="store_true", help="Print the factors left after each elimination")

    compare = sub.add_parser("compare", help="Compare the orders found by each heuristic")
    _add_network_arg(compare)
    compare.add_argument("--query", required=True, help="Target and value, e.g. Z:T")
    compare.add_argument("--evidence", action="append", default=[], help="Observed variable, e.g. A:T (repeatable)")
    compare.add_argument("--repeats", type=int, default=100, help="Runs per heuristic, one seed each")
    compare.add_argument("--seed", type=int, default=None, help="First seed")

    return parser


def _cmd_show(args: argparse.Namespace) -> int:
    network = build_network(args.network)
    print(render_network(network))
    if args.plot:
        from .bn_utils import draw_bayesian_network

        draw_bayesian_network(network)
    return 0


def _load_config(args: argparse.Namespace) -> InferenceConfig:
    config = InferenceConfig.from_yaml(args.config) if args.config else InferenceConfig()
    ordering = args.ordering
    if ordering is None and args.order is not None:
        ordering = "provided"
    return config.override(
        ordering=ordering,
        order=args.order.split(",") if args.order is not None else None,
        seed=args.seed,
        verbose=True if args.verbose else None,
        log_level=args.log_level,
    )


def _cmd_query(args: argparse.Namespace) -> int:
    config = _load_config(args)
    configure_logging(config.log_level, args.log_file)

    network = build_network(args.network)
    query = Query.parse(args.query, args.evidence)
    strategy = config.make_strategy()
    logger.debug("Running %s on %s with %r", query, args.network, strategy)

    result = VariableElimination(network, strategy, verbose=config.verbose).query(query)
    if not result.ok:
        print(f"Error [{result.error.value}]: {result.message}", file=sys.stderr)
        return 1

    if config.ordering != "provided":
        print(f"Order ({config.ordering}, seed={config.seed}): {', '.join(result.order)}")
    if config.verbose:
        for label, factors in result.pruning_history.items():
            print(f"  after {label}: {', '.join(factors)}")
        print(f"Joins: {result.join_count}")
    print(f"{query} = {format_probability(result.probability)}")
    return 0


def _cmd_compare(args: argparse.Namespace) -> int:
    from .bn_utils import compare_orderings

    config = InferenceConfig().override(seed=args.seed, log_level=args.log_level)
    configure_logging(config.log_level, args.log_file)

    network = build_network(args.network)
    query = Query.parse(args.query, args.evidence)
    table = compare_orderings(network, query, repeats=args.repeats, seed=config.seed)

    print(f"{query} on {args.network.upper()} ({args.repeats} runs per heuristic)")
    with pd.option_context("display.max_colwidth", None, "display.width", 200):
        print(table.to_string(index=False))
    return 0 if table["error"].isna().all() else 1


_COMMANDS = {
    "show": _cmd_show,
    "query": _cmd_query,
    "compare": _cmd_compare,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return _COMMANDS[args.command](args)
    except (ValueError, OSError) as exc:
        # Bad network name, malformed query text, config or ordering errors
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
