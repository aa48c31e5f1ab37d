"""
innerbag CLI: Command-line interface for inspecting inner bags.

Provides commands for:
- generate: Draw inner bags for a sample count and summarize them
- config: Show the resolved bagging settings
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.table import Table

from innerbag.bag import InnerBag
from innerbag.bags import inner_bags
from innerbag.config import BaggingSettings, ProjectConfig
from innerbag.errors import BagGenerationError
from innerbag.seeds import seeds


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="innerbag",
        description="innerbag: bootstrap inner bags for ensemble training",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--profile", "-p",
        help="Config profile from .innerbag.toml (default: project default)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate inner bags and print a summary",
    )
    generate_parser.add_argument(
        "--samples", "-n",
        type=int,
        required=True,
        help="Number of training samples",
    )
    generate_parser.add_argument(
        "--bags", "-b",
        type=int,
        help="Number of inner bags, 0 for one flat bag (default: from config)",
    )
    generate_parser.add_argument(
        "--seed", "-s",
        type=int,
        help="Base seed (default: from config)",
    )
    generate_parser.add_argument(
        "--weights", "-w",
        help="Per-sample weights (.npy or whitespace-separated text)",
    )
    generate_parser.add_argument(
        "--streams",
        type=int,
        default=1,
        help="Independent RNG streams, one bag list each (default: 1)",
    )
    generate_parser.add_argument(
        "--no-invariant-checks",
        action="store_true",
        help="Skip optional invariant checks",
    )

    subparsers.add_parser(
        "config",
        help="Show resolved bagging settings",
    )

    args = parser.parse_args(argv)

    try:
        settings = ProjectConfig.load_or_default().resolve(args.profile)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Setup logging
    level = logging.DEBUG if args.verbose else settings.logging_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "generate":
        return handle_generate(args, settings)
    elif args.command == "config":
        return handle_config(settings)
    else:
        parser.print_help()
        return 0


def load_weights(path: Path) -> np.ndarray:
    """Load per-sample weights from a ``.npy`` or text file."""
    if path.suffix == ".npy":
        weights = np.load(path)
    else:
        weights = np.loadtxt(path, dtype=np.float64, ndmin=1)
    return np.asarray(weights, dtype=np.float64).ravel()


def bag_table(title: str, bags: list[InnerBag]) -> Table:
    """Build a rich table summarizing *bags*."""
    table = Table(title=title)
    table.add_column("Bag", justify="right")
    table.add_column("Drawn", justify="right")
    table.add_column("Max count", justify="right")
    table.add_column("Total weight", justify="right")
    table.add_column("Fingerprint")

    for i, bag in enumerate(bags):
        counts = bag.occurrence_counts
        table.add_row(
            str(i),
            f"{int(np.count_nonzero(counts))}/{bag.n_samples}",
            str(int(counts.max())),
            f"{bag.weight_total:.6g}",
            bag.fingerprint(),
        )
    return table


def handle_generate(args: argparse.Namespace, settings: BaggingSettings) -> int:
    """Handle the generate command."""
    if args.samples < 1:
        print("Error: --samples must be at least 1", file=sys.stderr)
        return 1

    n_inner_bags = settings.inner_bags if args.bags is None else args.bags
    if n_inner_bags < 0:
        print("Error: --bags must not be negative", file=sys.stderr)
        return 1

    weights = None
    if args.weights:
        try:
            weights = load_weights(Path(args.weights))
        except (OSError, ValueError) as e:
            print(f"Error: could not read weights: {e}", file=sys.stderr)
            return 1
        if len(weights) != args.samples:
            print(
                f"Error: {len(weights)} weights for {args.samples} samples",
                file=sys.stderr,
            )
            return 1

    if args.no_invariant_checks:
        settings = replace(settings, invariant_checks=False)
    settings.apply()

    base_seed = settings.seed if args.seed is None else args.seed
    try:
        plan = seeds(base=base_seed, streams=args.streams)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    console = Console()
    for bundle in plan:
        try:
            with inner_bags(bundle.rng(), args.samples, weights, n_inner_bags) as bags:
                console.print(
                    bag_table(
                        f"Stream {bundle.stream_index + 1}/{len(plan)} "
                        f"(seed {plan.base_seed})",
                        bags,
                    )
                )
        except BagGenerationError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


def handle_config(settings: BaggingSettings) -> int:
    """Handle the config command."""
    print(f"Profile: {settings.profile}")
    print(f"  seed: {settings.seed}")
    print(f"  inner_bags: {settings.inner_bags}")
    print(f"  invariant_checks: {settings.invariant_checks}")
    print(f"  log_level: {settings.log_level}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
