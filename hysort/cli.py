"""Command-line entry point: read a dataset, score its points and report timings."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from hysort.dataset import DatasetError, load_dataset, normalize
from hysort.density import Strategy
from hysort.detector import detect

_INVALID = (
    "One of the following are invalid: N, DIM, BIN , NORMALIZE, APPROACH, TREE_SELECT"
)

_APPROACHES = ("Naive", "Tree")

_TREES = {
    1: Strategy.SIMPLE_TREE,
    2: Strategy.LOCALITY_TREE,
    3: Strategy.TRAVERSAL_TREE,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hysort",
        description="Score points as outliers by the density of their hypercube neighbourhood.",
    )
    parser.add_argument("n", type=int, help="number of lines to read from the file")
    parser.add_argument("dim", type=int, help="number of coordinates per point")
    parser.add_argument("bins", type=int, help="number of cells each dimension is cut into")
    parser.add_argument("min_split", type=int, help="smallest run of hypercubes that is split further")
    parser.add_argument("normalize", type=int, help="1 to scale every column to [0, 1], 0 to leave it")
    parser.add_argument("filename", help="comma-separated dataset")
    parser.add_argument("approach", type=int, help="0 for the naive search, 1 for a tree")
    parser.add_argument(
        "tree_select",
        type=int,
        help="1 simple tree, 2 locality optimized, 3 locality and traversal optimized",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="group raw hypercube coordinates, without encoding or reordering dimensions",
    )
    return parser


def _strategy(approach: int, tree_select: int) -> Strategy:
    if approach == 0:
        return Strategy.NAIVE
    return _TREES.get(tree_select, Strategy.TRAVERSAL_TREE)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and check the command line; exit with a usage message when it is invalid.

    The returned namespace also carries the chosen ``strategy``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    if (
        args.n < 1
        or args.dim < 1
        or args.bins < 1
        or args.min_split < 0
        or args.normalize not in (0, 1)
        or args.approach not in (0, 1)
        or not 0 <= args.tree_select <= 3
    ):
        parser.error(_INVALID)
    args.strategy = _strategy(args.approach, args.tree_select)
    return args


def _header(args: argparse.Namespace) -> str:
    selected = args.strategy.value if args.strategy.uses_tree else "NONE"
    return (
        f"\nNumber of lines (N): {args.n} Dimensionality: {args.dim}"
        f" BIN Size: {args.bins} MinSplit: {args.min_split}"
        f" Normalize: {args.normalize} Filename: {args.filename}"
        f" Approach: {_APPROACHES[args.approach]}"
        f" Selected tree: {selected}"
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run detection as described by the command line and print the timings."""
    args = parse_args(argv)
    print(_header(args))

    try:
        rows = load_dataset(args.filename, args.n, args.dim)
    except DatasetError as exc:
        print(exc, file=sys.stderr)
        return 1

    if args.normalize == 1:
        rows = normalize(rows)

    result = detect(
        rows,
        args.bins,
        min_split=args.min_split,
        strategy=args.strategy,
        encoded=not args.plain,
    )

    report = result.variance
    if report is not None:
        print(f"Mean = {report.mean:.3f} SD = {report.sd:.3f} CV = {report.cv:f}")
        print("Dimensions are reordered" if report.reordered else "Dimensions are NOT reordered")
    print(result.strategy.message)

    print("============TIME RESULTS================")
    print(f"Total time for execution is {result.total_time:f} sec ")
    print(f"Total time for building hypercube is {result.build_time:f} sec ")
    print(f"Time for neighborhood density is {result.density_time:f} sec ")
    return 0


if __name__ == "__main__":
    sys.exit(main())