import math
import random

import pytest

from hysort.encoding import WORD_BITS, HypercubeCodec, find_k, hypercube_coordinates


@pytest.mark.parametrize("bins", [1, 2, 3, 4, 5, 7, 8, 9, 16, 17, 100, 1000])
def test_find_k_is_smallest_sufficient_width(bins):
    k = find_k(bins)
    assert k >= 1
    assert 2**k >= bins
    assert k == 1 or 2 ** (k - 1) < bins


def test_find_k_minimum_is_one():
    assert find_k(1) == 1
    assert find_k(2) == 1


@pytest.mark.parametrize("bins", [0, -3])
def test_find_k_rejects_non_positive_bins(bins):
    with pytest.raises(ValueError):
        find_k(bins)


@pytest.mark.parametrize("bins", [1, 3, 4, 10])
def test_hypercube_coordinates_cell_contains_value(bins):
    rng = random.Random(bins)
    point = [rng.random() for _ in range(20)]
    coords = hypercube_coordinates(point, bins)
    assert len(coords) == len(point)
    for value, cell in zip(point, coords):
        assert cell * (1.0 / bins) <= value + 1e-12
        assert value < (cell + 1) * (1.0 / bins) + 1e-12
        assert 0 <= cell < bins


def test_hypercube_coordinates_zero_is_first_cell():
    assert hypercube_coordinates([0.0, 0.0], 5) == (0, 0)


def test_hypercube_coordinates_rejects_bad_bins():
    with pytest.raises(ValueError):
        hypercube_coordinates([0.5], 0)


@pytest.mark.parametrize(("dim", "bins"), [(0, 4), (3, 0)])
def test_codec_rejects_bad_parameters(dim, bins):
    with pytest.raises(ValueError):
        HypercubeCodec(dim, bins)


@pytest.mark.parametrize(
    ("dim", "bins"),
    [(1, 2), (2, 4), (10, 4), (64, 2), (65, 2), (100, 3), (33, 1000), (7, 70000)],
)
def test_block_layout_covers_all_dimensions(dim, bins):
    codec = HypercubeCodec(dim, bins)
    assert codec.k == find_k(bins)
    assert codec.dims_per_block * codec.k <= WORD_BITS
    assert codec.block_size * codec.dims_per_block >= dim
    assert (codec.block_size - 1) * codec.dims_per_block < dim


def test_worked_example_single_block():
    codec = HypercubeCodec(2, 4)
    assert codec.encode((1, 2)) == (6,)
    assert codec.decode((6,)) == (1, 2)


@pytest.mark.parametrize(
    ("dim", "bins"),
    [(1, 2), (2, 4), (10, 4), (64, 2), (65, 2), (100, 3), (33, 1000), (7, 70000)],
)
def test_round_trip(dim, bins):
    codec = HypercubeCodec(dim, bins)
    rng = random.Random(dim * 1009 + bins)
    for _ in range(50):
        coords = tuple(rng.randrange(bins) for _ in range(dim))
        blocks = codec.encode(coords)
        assert len(blocks) == codec.block_size
        assert all(0 <= block < 2**WORD_BITS for block in blocks)
        assert codec.decode(blocks) == coords


def test_round_trip_all_zero_and_all_max():
    codec = HypercubeCodec(70, 8)
    zeros = (0,) * 70
    tops = (7,) * 70
    assert codec.decode(codec.encode(zeros)) == zeros
    assert codec.decode(codec.encode(tops)) == tops


def test_decode_does_not_modify_input():
    codec = HypercubeCodec(5, 4)
    blocks = list(codec.encode((3, 1, 0, 2, 1)))
    original = list(blocks)
    codec.decode(blocks)
    assert blocks == original


def test_encoding_preserves_lexicographic_order():
    codec = HypercubeCodec(40, 5)
    rng = random.Random(7)
    points = [tuple(rng.randrange(5) for _ in range(40)) for _ in range(60)]
    by_coords = sorted(points)
    by_blocks = sorted(points, key=codec.encode)
    assert by_blocks == by_coords


def test_distinct_coordinates_give_distinct_codes():
    codec = HypercubeCodec(3, 3)
    cells = [(a, b, c) for a in range(3) for b in range(3) for c in range(3)]
    codes = {codec.encode(cell) for cell in cells}
    assert len(codes) == len(cells)


def test_encode_rejects_wrong_dimension():
    codec = HypercubeCodec(3, 4)
    with pytest.raises(ValueError):
        codec.encode((1, 2))


def test_decode_rejects_wrong_block_count():
    codec = HypercubeCodec(3, 4)
    with pytest.raises(ValueError):
        codec.decode((1, 2))


def test_points_to_codes_and_back():
    codec = HypercubeCodec(4, 10)
    point = [0.05, 0.35, 0.61, 0.999]
    coords = hypercube_coordinates(point, 10)
    assert codec.decode(codec.encode(coords)) == coords
    assert all(math.floor(v * 10) == c for v, c in zip(point, coords))