"""Mapping points to hypercube coordinates and packing those coordinates into 64-bit blocks."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

WORD_BITS = 64
"""Width in bits of one encoded block."""

_WORD_MASK = (1 << WORD_BITS) - 1


def find_k(bins: int) -> int:
    """Return the number of bits used to store one hypercube coordinate.

    This is the smallest ``k >= 1`` with ``2 ** k >= bins``.
    """
    if bins < 1:
        raise ValueError("bins must be at least 1")
    k = 1
    while 2**k < bins:
        k += 1
    return k


def hypercube_coordinates(point: Iterable[float], bins: int) -> tuple[int, ...]:
    """Return the cell index of each value when [0, 1] is cut into ``bins`` equal parts."""
    if bins < 1:
        raise ValueError("bins must be at least 1")
    length = 1.0 / bins
    return tuple(math.floor(value / length) for value in point)


class HypercubeCodec:
    """Packs the coordinates of a ``dim``-dimensional hypercube into 64-bit blocks.

    Each coordinate takes ``k`` bits, ``k`` being :func:`find_k` of ``bins``.
    As many coordinates as fit go into one block, the first coordinate in the
    most significant position, so that the encoded tuples sort in the same
    order as the coordinate tuples they stand for. Arithmetic is done modulo
    2**64, as in an unsigned 64-bit word.
    """

    def __init__(self, dim: int, bins: int) -> None:
        if dim < 1:
            raise ValueError("dim must be at least 1")
        self.dim = dim
        self.bins = bins
        self.k = find_k(bins)
        self.dims_per_block = WORD_BITS // self.k
        self.block_size = math.ceil(dim / self.dims_per_block)
        self._coord_mask = (1 << self.k) - 1

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dim={self.dim}, bins={self.bins})"

    def encode(self, coords: Sequence[int]) -> tuple[int, ...]:
        """Pack ``dim`` coordinates into ``block_size`` unsigned 64-bit integers."""
        if len(coords) != self.dim:
            raise ValueError(f"expected {self.dim} coordinates, got {len(coords)}")
        blocks = [0] * self.block_size
        for position, coord in enumerate(coords):
            idx = position // self.dims_per_block
            blocks[idx] = ((blocks[idx] << self.k) | (coord & _WORD_MASK)) & _WORD_MASK
        return tuple(blocks)

    def decode(self, blocks: Sequence[int]) -> tuple[int, ...]:
        """Unpack encoded blocks back into ``dim`` coordinates.

        Coordinates are read from the last block backwards; a block is left
        for the one before it only once it has been emptied and its share of
        coordinates has been read.
        """
        if len(blocks) != self.block_size:
            raise ValueError(f"expected {self.block_size} blocks, got {len(blocks)}")
        work = [block & _WORD_MASK for block in blocks]
        coords = [0] * self.dim
        last = self.block_size - 1
        remaining = self.dim % self.dims_per_block or self.dims_per_block

        for position in reversed(range(self.dim)):
            if work[last] == 0 and remaining == 0:
                last -= 1
                remaining = self.dims_per_block
            remaining -= 1
            coords[position] = work[last] & self._coord_mask
            work[last] >>= self.k
        return tuple(coords)