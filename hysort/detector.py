"""End-to-end outlier detection: points to hypercubes, densities and scores."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Hashable, Iterable, Sequence, TypeVar

from hysort.dataset import VarianceReport, reorder_by_variance
from hysort.density import Strategy, neighborhood_density, outlier_scores
from hysort.encoding import HypercubeCodec, hypercube_coordinates

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one detection run.

    ``hypercubes`` are the distinct hypercubes in sorted order, ``counts`` the
    number of points in each, ``groups`` the point indices in each and
    ``densities`` their neighbourhood densities. ``scores`` holds the outlier
    score of every input point. ``variance`` is the report on dimension spread
    when dimensions were considered for reordering, otherwise ``None``.
    Times are in seconds.
    """

    scores: tuple[float, ...]
    hypercubes: tuple[tuple[int, ...], ...]
    counts: tuple[int, ...]
    groups: tuple[tuple[int, ...], ...]
    densities: tuple[int, ...]
    strategy: Strategy
    encoded: bool
    variance: VarianceReport | None
    build_time: float
    density_time: float
    total_time: float

    @property
    def max_density(self) -> int:
        """The largest neighbourhood density of any hypercube."""
        return max(self.densities)


def group_hypercubes(keys: Iterable[K]) -> dict[K, list[int]]:
    """Map each distinct key, in sorted order, to the positions where it occurs."""
    groups: dict[K, list[int]] = {}
    for position, key in enumerate(keys):
        groups.setdefault(key, []).append(position)
    return {key: groups[key] for key in sorted(groups)}


def _check_rows(rows: Sequence[Sequence[float]]) -> int:
    if not rows:
        raise ValueError("dataset is empty")
    dim = len(rows[0])
    if dim == 0 or any(len(row) != dim for row in rows):
        raise ValueError("every row must have the same, non-zero number of values")
    return dim


def detect(
    rows: Sequence[Sequence[float]],
    bins: int,
    min_split: int = 0,
    strategy: Strategy | str = Strategy.TRAVERSAL_TREE,
    encoded: bool = True,
) -> DetectionResult:
    """Score every point of ``rows`` (values expected in [0, 1]) as an outlier.

    Each dimension is cut into ``bins`` cells. With ``encoded`` the dimensions
    are first reordered by spread when that spread varies enough, and the
    hypercube coordinates are packed into 64-bit blocks before duplicates are
    merged; without it the coordinates are grouped as they are.
    """
    strategy = Strategy(strategy)
    if bins < 1:
        raise ValueError("bins must be at least 1")
    if min_split < 0:
        raise ValueError("min_split must not be negative")
    dim = _check_rows(rows)
    n = len(rows)
    points = [list(row) for row in rows]

    total_start = time.perf_counter()
    variance: VarianceReport | None = None
    if encoded:
        points, variance = reorder_by_variance(points)

    build_start = time.perf_counter()
    if encoded:
        codec = HypercubeCodec(dim, bins)
        encoded_keys = [codec.encode(hypercube_coordinates(point, bins)) for point in points]
        encoded_groups = group_hypercubes(encoded_keys)
        hypercubes = [codec.decode(key) for key in encoded_groups]
        members = list(encoded_groups.values())
    else:
        plain_groups = group_hypercubes(hypercube_coordinates(point, bins) for point in points)
        hypercubes = list(plain_groups)
        members = list(plain_groups.values())
    counts = [len(group) for group in members]
    build_time = time.perf_counter() - build_start

    density_start = time.perf_counter()
    densities = neighborhood_density(hypercubes, counts, strategy, min_split)
    density_time = time.perf_counter() - density_start

    scores = outlier_scores(members, densities, n)
    total_time = time.perf_counter() - total_start

    return DetectionResult(
        scores=tuple(scores),
        hypercubes=tuple(tuple(cube) for cube in hypercubes),
        counts=tuple(counts),
        groups=tuple(tuple(group) for group in members),
        densities=tuple(densities),
        strategy=strategy,
        encoded=encoded,
        variance=variance,
        build_time=build_time,
        density_time=density_time,
        total_time=total_time,
    )