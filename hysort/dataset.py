"""Loading, normalising and reordering of point datasets."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Sequence

CV_THRESHOLD = 60.0
"""Coefficient of variation (in percent) at or above which dimensions are reordered."""

_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

Rows = list[list[float]]


class DatasetError(Exception):
    """Raised when a dataset file cannot be read or does not hold the expected data."""


@dataclass(frozen=True)
class VarianceReport:
    """Spread of each dimension and whether that spread warrants reordering."""

    deviations: tuple[float, ...]
    mean: float
    sd: float
    cv: float
    reordered: bool
    order: tuple[int, ...]


def _parse_field(field: str, line_number: int) -> float:
    match = _NUMBER.match(field)
    if match is None:
        raise DatasetError(f"line {line_number}: cannot read a number from {field.strip()!r}")
    return float(match.group(1))


def load_dataset(path: str | os.PathLike[str], n: int, dim: int) -> Rows:
    """Read the first ``n`` comma-separated rows of ``dim`` values from ``path``.

    Empty fields are skipped, fields beyond ``dim`` are ignored and a leading
    number is taken from each field.
    """
    if n < 1 or dim < 1:
        raise ValueError("n and dim must both be at least 1")
    rows: Rows = []
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            for line_number, line in enumerate(handle, start=1):
                if len(rows) == n:
                    break
                fields = [field for field in line.split(",") if field]
                if len(fields) < dim:
                    raise DatasetError(
                        f"line {line_number}: expected {dim} values, found {len(fields)}"
                    )
                rows.append([_parse_field(field, line_number) for field in fields[:dim]])
    except OSError as exc:
        raise DatasetError(f"Unable to open file {os.fspath(path)!r}") from exc
    if len(rows) < n:
        raise DatasetError(f"expected {n} rows, found {len(rows)}")
    return rows


def _check_rows(rows: Sequence[Sequence[float]]) -> int:
    if not rows:
        raise ValueError("dataset is empty")
    dim = len(rows[0])
    if dim == 0 or any(len(row) != dim for row in rows):
        raise ValueError("every row must have the same, non-zero number of values")
    return dim


def normalize(rows: Sequence[Sequence[float]]) -> Rows:
    """Scale every column to [0, 1]; a constant column becomes all zeros."""
    _check_rows(rows)
    columns = list(zip(*rows))
    bounds = [(min(column), max(column)) for column in columns]
    return [
        [
            (value - low) / (high - low) if high != low else 0.0
            for value, (low, high) in zip(row, bounds)
        ]
        for row in rows
    ]


def _sample_step(n: int) -> int:
    if n <= 1000:
        return 1
    if n < 100000:
        return n // 1000
    return 100


def dimension_spread(rows: Sequence[Sequence[float]]) -> VarianceReport:
    """Measure the standard deviation of each dimension on a sample of the rows.

    Up to 1000 rows are taken in full; larger datasets are sampled at a fixed
    stride. The coefficient of variation of those deviations decides whether
    the dimensions should be reordered.
    """
    dim = _check_rows(rows)
    n = len(rows)
    step = _sample_step(n)
    sampled_points = n // step
    sample = rows[::step]

    deviations = []
    for column in zip(*sample):
        mean = sum(column) / sampled_points
        variance = sum((value - mean) ** 2 for value in column) / sampled_points
        deviations.append(math.sqrt(variance))

    mean = sum(deviations) / dim
    sd = math.sqrt(sum((d - mean) ** 2 for d in deviations) / dim)
    if mean != 0:
        cv = sd / mean * 100
    else:
        cv = math.nan if sd == 0 else math.copysign(math.inf, sd)
    reordered = cv >= CV_THRESHOLD
    ranked = sorted(((d, i) for i, d in enumerate(deviations)), reverse=True)
    order = tuple(i for _, i in ranked) if reordered else tuple(range(dim))
    return VarianceReport(
        deviations=tuple(deviations),
        mean=mean,
        sd=sd,
        cv=cv,
        reordered=reordered,
        order=order,
    )


def reorder_by_variance(rows: Sequence[Sequence[float]]) -> tuple[Rows, VarianceReport]:
    """Put the dimensions in order of decreasing spread when the spread varies enough.

    Returns the (possibly reordered) rows together with the report that decided it.
    """
    report = dimension_spread(rows)
    if report.reordered:
        reordered = [[row[j] for j in report.order] for row in rows]
    else:
        reordered = [list(row) for row in rows]
    return reordered, report