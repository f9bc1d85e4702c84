import numpy as np
import pytest

from dvision import random as drandom
from dvision.brief import Brief, Brief256, PairType
from dvision.errors import DVisionError
from dvision.imagefunctions import KeyPoint


@pytest.fixture
def pattern():
    x1 = [-1, 1, -30, 0]
    y1 = [0, 0, 0, -1]
    x2 = [1, -1, 0, 0]
    y2 = [0, 0, 0, 1]
    return x1, y1, x2, y2


@pytest.fixture
def horizontal_ramp():
    return np.tile(np.arange(20, dtype=np.uint8), (20, 1))


def test_generated_pairs_have_requested_length():
    brief = Brief(nbits=64, patch_size=24)
    x1, y1, x2, y2 = brief.export_pairs()
    assert brief.bit_length == 64
    assert len(x1) == len(y1) == len(x2) == len(y2) == 64


@pytest.mark.parametrize("pair_type", [PairType.RANDOM, PairType.RANDOM_CLOSE])
def test_generated_pairs_within_patch(pair_type):
    brief = Brief(nbits=128, patch_size=20, pair_type=pair_type)
    limit = brief.patch_size // 2
    for coords in brief.export_pairs():
        assert all(-limit <= c <= limit for c in coords)


def test_generation_is_reproducible_with_seed():
    drandom.seed_rand_once()
    drandom.seed_rand(5)
    first = Brief(nbits=32).export_pairs()
    drandom.seed_rand(5)
    second = Brief(nbits=32).export_pairs()
    assert first == second


def test_invalid_arguments():
    with pytest.raises(ValueError):
        Brief(nbits=0)
    with pytest.raises(ValueError):
        Brief(patch_size=1)


def test_import_export_round_trip(pattern):
    brief = Brief(nbits=8, patch_size=8)
    brief.import_pairs(*pattern)
    assert brief.export_pairs() == tuple(pattern)
    assert brief.bit_length == len(pattern[0])


def test_import_mismatched_lengths(pattern):
    brief = Brief(nbits=8, patch_size=8)
    with pytest.raises(ValueError):
        brief.import_pairs(pattern[0], pattern[1][:2], pattern[2], pattern[3])


def test_compute_on_horizontal_ramp(pattern, horizontal_ramp):
    brief = Brief(nbits=8, patch_size=8)
    brief.import_pairs(*pattern)
    (desc,) = brief.compute(horizontal_ramp, [KeyPoint(10, 10)], treat_image=False)
    assert desc.tolist() == [True, False, False, False]


def test_compute_on_vertical_ramp(pattern, horizontal_ramp):
    brief = Brief(nbits=8, patch_size=8)
    brief.import_pairs(*pattern)
    (desc,) = brief(horizontal_ramp.T.copy(), [(10, 10)], treat_image=False)
    assert desc.tolist() == [False, False, False, True]


def test_compute_returns_one_descriptor_per_point(horizontal_ramp):
    brief = Brief(nbits=16, patch_size=8)
    points = [(5, 5), (10, 10), (15, 15)]
    descs = brief.compute(horizontal_ramp, points, treat_image=False)
    assert len(descs) == len(points)
    assert all(d.shape == (16,) for d in descs)


def test_uniform_image_gives_zero_descriptor():
    brief = Brief(nbits=32, patch_size=12)
    image = np.full((30, 30, 3), 100, dtype=np.uint8)
    descs = brief.compute(image, [KeyPoint(15, 15)])
    assert not descs[0].any()


def test_untreated_image_must_be_gray_uint8():
    brief = Brief(nbits=8, patch_size=8)
    with pytest.raises(DVisionError):
        brief.compute(np.zeros((10, 10), dtype=np.float32), [(5, 5)], treat_image=False)


def test_distance():
    a = np.array([True, False, True, False])
    b = np.array([True, True, False, False])
    assert Brief.distance(a, a) == 0
    assert Brief.distance(a, b) == Brief.distance(b, a)
    assert Brief.distance(a, ~a) == len(a)


def test_brief256_length_and_import():
    brief = Brief256(patch_size=16)
    assert brief.bit_length == Brief256.BITS
    pairs = brief.export_pairs()
    brief.import_pairs(*pairs)
    assert brief.export_pairs() == pairs
    with pytest.raises(ValueError):
        brief.import_pairs([0], [0], [1], [1])