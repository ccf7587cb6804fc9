"""Neighbourhood density of hypercubes and the outlier scores derived from it.

The density of a hypercube is the number of points that fall in it or in any
hypercube adjacent to it: every coordinate differs by at most one.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Iterable, Sequence

from hysort.tree import (
    FastTreeNode,
    TreeNode,
    build_linear_tree,
    build_locality_tree,
    build_traversal_tree,
)

Hypercubes = Sequence[Sequence[int]]


class Strategy(Enum):
    """How the neighbours of each hypercube are searched for."""

    NAIVE = "Naive"
    SIMPLE_TREE = "Simple"
    LOCALITY_TREE = "Locality optimized"
    TRAVERSAL_TREE = "Locality and traversal optimized"

    @property
    def uses_tree(self) -> bool:
        """True for every strategy that searches a tree."""
        return self is not Strategy.NAIVE

    @property
    def message(self) -> str:
        """A short line announcing the strategy in use."""
        return _MESSAGES[self]


_MESSAGES = {
    Strategy.NAIVE: "using naive approach",
    Strategy.SIMPLE_TREE: "Using simple tree",
    Strategy.LOCALITY_TREE: "Using locality optimized tree",
    Strategy.TRAVERSAL_TREE: "Using locality and traversal optimized tree",
}


def is_immediate_neighbor(a: Sequence[int], b: Sequence[int]) -> bool:
    """True when no coordinate of ``a`` and ``b`` differs by more than one."""
    return all(abs(x - y) <= 1 for x, y in zip(a, b, strict=True))


def _check_inputs(hypercubes: Hypercubes, counts: Sequence[int]) -> None:
    if len(hypercubes) != len(counts):
        raise ValueError(
            f"got {len(hypercubes)} hypercubes but {len(counts)} instance counts"
        )


def _leaf_density(
    hypercubes: Hypercubes, counts: Sequence[int], cube: Sequence[int], start: int, end: int
) -> int:
    return sum(
        counts[i] for i in range(start, end + 1) if is_immediate_neighbor(cube, hypercubes[i])
    )


def naive_density(hypercubes: Hypercubes, counts: Sequence[int]) -> list[int]:
    """Density of every hypercube found by comparing it with every other one."""
    _check_inputs(hypercubes, counts)
    return [
        sum(count for other, count in zip(hypercubes, counts) if is_immediate_neighbor(cube, other))
        for cube in hypercubes
    ]


def _near(cube: Sequence[int], node: TreeNode | FastTreeNode, depth: int) -> bool:
    """Whether the node's coordinate (of dimension ``depth - 1``) is within one of the cube's."""
    if depth == 0:
        return True
    return abs(cube[depth - 1] - node.coordinate) <= 1


def _subtree_density(
    hypercubes: Hypercubes, counts: Sequence[int], tree: Sequence[TreeNode], cube: Sequence[int]
) -> int:
    density = 0
    current: int | None = 0
    depth = 0
    stop = tree[0].next_sibling

    while current is not None and current != stop:
        node = tree[current]
        if node.is_leaf:
            density += _leaf_density(hypercubes, counts, cube, node.start, node.end)

        if not node.is_leaf and _near(cube, node, depth):
            child = node.next_child
            while child is not None and not _near(cube, tree[child], depth + 1 if depth else 0):
                child = tree[child].next_sibling
            if child is not None:
                current = child
                depth += 1
            else:
                while current is not None:
                    sibling = tree[current].next_sibling
                    if sibling is not None:
                        current = sibling
                        break
                    current = tree[current].parent
                    depth -= 1
        elif node.next_sibling is not None:
            current = node.next_sibling
        else:
            while current is not None:
                current = tree[current].parent
                depth -= 1
                if current is not None and tree[current].next_sibling is not None:
                    current = tree[current].next_sibling
                    break
    return density


def tree_density(
    hypercubes: Hypercubes, counts: Sequence[int], tree: Sequence[TreeNode]
) -> list[int]:
    """Density of every hypercube found by walking a tree built over ``hypercubes``.

    Works with the tree from :func:`~hysort.tree.build_linear_tree` as well as
    with its depth-first rearrangement.
    """
    _check_inputs(hypercubes, counts)
    if not tree:
        raise ValueError("tree is empty")
    return [_subtree_density(hypercubes, counts, tree, cube) for cube in hypercubes]


def _fast_subtree_density(
    hypercubes: Hypercubes,
    counts: Sequence[int],
    tree: Sequence[FastTreeNode],
    cube: Sequence[int],
) -> int:
    density = 0
    current: int | None = 0
    stop = tree[0].next_break
    while current is not None and current != stop:
        node = tree[current]
        if node.is_leaf:
            density += _leaf_density(hypercubes, counts, cube, node.start, node.end)
        if not node.is_leaf and _near(cube, node, node.depth):
            current = node.next_child
        else:
            current = node.next_break
    return density


def fast_tree_density(
    hypercubes: Hypercubes, counts: Sequence[int], tree: Sequence[FastTreeNode]
) -> list[int]:
    """Density of every hypercube found by walking a tree of break-linked nodes."""
    _check_inputs(hypercubes, counts)
    if not tree:
        raise ValueError("tree is empty")
    return [_fast_subtree_density(hypercubes, counts, tree, cube) for cube in hypercubes]


def neighborhood_density(
    hypercubes: Hypercubes,
    counts: Sequence[int],
    strategy: Strategy | str = Strategy.TRAVERSAL_TREE,
    min_split: int = 0,
) -> list[int]:
    """Density of every distinct hypercube, computed with the chosen strategy.

    ``hypercubes`` must be distinct and sorted; ``counts`` gives the number of
    points in each. ``min_split`` limits how far the trees are split.
    """
    strategy = Strategy(strategy)
    _check_inputs(hypercubes, counts)
    if min_split < 0:
        raise ValueError("min_split must not be negative")
    if not hypercubes:
        return []
    if strategy is Strategy.NAIVE:
        return naive_density(hypercubes, counts)

    linear = build_linear_tree(hypercubes, min_split)
    if strategy is Strategy.SIMPLE_TREE:
        return tree_density(hypercubes, counts, linear)
    locality = build_locality_tree(linear)
    if strategy is Strategy.LOCALITY_TREE:
        return tree_density(hypercubes, counts, locality)
    return fast_tree_density(hypercubes, counts, build_traversal_tree(locality))


def outlier_scores(
    groups: Iterable[Iterable[int]] | Mapping[object, Iterable[int]],
    densities: Sequence[int],
    n: int,
) -> list[float]:
    """Outlier score of each of ``n`` points.

    ``groups`` lists, for each distinct hypercube in the order of
    ``densities``, the indices of the points that fall in it; a mapping is
    read through its values. A point's score is ``(max - d) / max`` where ``d``
    is the density of its hypercube and ``max`` the largest density.
    """
    if isinstance(groups, Mapping):
        groups = groups.values()
    groups = [list(group) for group in groups]
    if len(groups) != len(densities):
        raise ValueError(f"got {len(groups)} groups but {len(densities)} densities")
    if not densities:
        raise ValueError("no densities given")
    highest = max(densities)
    if highest <= 0:
        raise ValueError("the largest density must be positive")

    scores: list[float | None] = [None] * n
    for members, density in zip(groups, densities):
        score = (highest - density) / highest
        for point in members:
            if not 0 <= point < n:
                raise ValueError(f"point index {point} is outside 0..{n - 1}")
            scores[point] = score
    missing = [i for i, score in enumerate(scores) if score is None]
    if missing:
        raise ValueError(f"no hypercube given for point {missing[0]}")
    return [score for score in scores if score is not None]