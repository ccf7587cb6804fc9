"""Prefix trees over sorted hypercube coordinates.

The distinct hypercubes of a dataset, sorted lexicographically, are grouped
into a tree: the root spans all of them, and every node at depth ``d`` is split
into runs that share the value of coordinate ``d``. Trees are stored as flat
lists; links between nodes are positions in that list, ``None`` where there
is no such node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

Hypercubes = Sequence[Sequence[int]]


@dataclass(slots=True)
class TreeNode:
    """A run ``start..end`` (inclusive) of hypercubes sharing a coordinate prefix."""

    coordinate: int | None
    start: int
    end: int
    parent: int | None = None
    next_child: int | None = None
    next_sibling: int | None = None

    @property
    def is_leaf(self) -> bool:
        """True when the node was not split any further."""
        return self.next_child is None


@dataclass(slots=True)
class FastTreeNode:
    """A tree node that records where a traversal goes once its subtree is skipped."""

    coordinate: int | None
    start: int
    end: int
    depth: int
    next_child: int | None = None
    next_break: int | None = None

    @property
    def is_leaf(self) -> bool:
        """True when the node was not split any further."""
        return self.next_child is None


def _runs(hypercubes: Hypercubes, start: int, end: int, dim: int) -> Iterator[tuple[int, int, int]]:
    """Yield ``(start, end, value)`` for each run of rising values of coordinate ``dim``."""
    value = hypercubes[start][dim]
    for j in range(start + 1, end + 1):
        if hypercubes[j][dim] > value:
            yield start, j - 1, value
            start = j
            value = hypercubes[j][dim]
    yield start, end, value


def _children(tree: Sequence[TreeNode], index: int) -> Iterator[int]:
    child = tree[index].next_child
    while child is not None:
        yield child
        child = tree[child].next_sibling


def _preorder(tree: Sequence[TreeNode]) -> Iterator[int]:
    """Yield node positions depth first, a node before its children, children in order."""
    stack = [0]
    while stack:
        index = stack.pop()
        yield index
        stack.extend(reversed(list(_children(tree, index))))


def build_linear_tree(hypercubes: Hypercubes, min_split: int) -> list[TreeNode]:
    """Build the tree level by level, one dimension per level.

    ``hypercubes`` must be sorted. A node whose run holds ``min_split`` or fewer
    further hypercubes (``end - start < min_split``) is left as a leaf.
    Nodes are stored in breadth-first order with the root at position 0.
    """
    if min_split < 0:
        raise ValueError("min_split must not be negative")
    if not hypercubes:
        raise ValueError("at least one hypercube is required")
    dim = len(hypercubes[0])
    if dim == 0 or any(len(cube) != dim for cube in hypercubes):
        raise ValueError("every hypercube must have the same, non-zero number of coordinates")

    tree = [TreeNode(None, 0, len(hypercubes) - 1)]
    level = [0]
    for d in range(dim):
        next_level: list[int] = []
        for parent_index in level:
            parent = tree[parent_index]
            if parent.end - parent.start < min_split:
                continue
            previous: int | None = None
            for start, end, value in _runs(hypercubes, parent.start, parent.end, d):
                index = len(tree)
                tree.append(TreeNode(value, start, end, parent=parent_index))
                if previous is None:
                    parent.next_child = index
                else:
                    tree[previous].next_sibling = index
                previous = index
                next_level.append(index)
        level = next_level
    return tree


def build_locality_tree(tree: Sequence[TreeNode]) -> list[TreeNode]:
    """Return the same tree with its nodes stored in depth-first order.

    A node's subtree then occupies the positions right after it, which keeps
    a traversal of one subtree within a contiguous stretch of the list.
    """
    if not tree:
        raise ValueError("tree is empty")
    order = list(_preorder(tree))
    position = {old: new for new, old in enumerate(order)}

    def remap(index: int | None) -> int | None:
        return None if index is None else position[index]

    return [
        TreeNode(
            node.coordinate,
            node.start,
            node.end,
            parent=remap(node.parent),
            next_child=remap(node.next_child),
            next_sibling=remap(node.next_sibling),
        )
        for node in (tree[old] for old in order)
    ]


def build_traversal_tree(tree: Sequence[TreeNode]) -> list[FastTreeNode]:
    """Convert a tree into nodes that each know their depth and their break target.

    The break target of a node is its next sibling or, failing that, the break
    target of its parent: the node a traversal moves to once the node's whole
    subtree has been skipped or finished. Positions are kept unchanged.
    """
    if not tree:
        raise ValueError("tree is empty")
    fast: list[FastTreeNode | None] = [None] * len(tree)
    for index in _preorder(tree):
        node = tree[index]
        if node.parent is None:
            depth, next_break = 0, None
        else:
            parent = fast[node.parent]
            assert parent is not None
            depth = parent.depth + 1
            next_break = node.next_sibling if node.next_sibling is not None else parent.next_break
        fast[index] = FastTreeNode(
            node.coordinate,
            node.start,
            node.end,
            depth,
            next_child=node.next_child,
            next_break=next_break,
        )
    return [node for node in fast if node is not None]