import numpy as np
import pytest

from dvision.errors import DVisionError
from dvision.imagefunctions import KeyPoint, get_keypoint_patch, get_patch


@pytest.fixture
def ramp():
    return np.arange(50 * 50, dtype=np.int32).reshape(50, 50)


def test_get_patch_inside_matches_slice(ramp):
    patch = get_patch(ramp, (5, 5), 4)
    assert np.array_equal(patch, ramp[3:6, 3:6])


def test_get_patch_odd_size_is_square(ramp):
    patch = get_patch(ramp, (20, 20), 5)
    assert patch.shape[0] == patch.shape[1]
    assert np.array_equal(patch, ramp[18:22, 18:22])


def test_get_patch_is_clipped_at_border(ramp):
    patch = get_patch(ramp, (0, 0), 4)
    assert patch.shape == (1, 1)
    assert patch[0, 0] == ramp[0, 0]


def test_get_patch_outside_is_empty(ramp):
    patch = get_patch(ramp, (200, 200), 4)
    assert patch.size == 0


def test_get_patch_empty_image():
    assert get_patch(np.zeros((0, 0), dtype=np.uint8), (1, 1), 4).size == 0


def test_get_patch_is_a_copy(ramp):
    patch = get_patch(ramp, (10, 10), 6)
    patch[:] = -1
    assert ramp.min() >= 0


def test_keypoint_without_angle_equals_plain_patch(ramp):
    kp = KeyPoint(x=25, y=25, size=10)
    assert np.array_equal(get_keypoint_patch(ramp, kp), get_patch(ramp, (25, 25), 10))


def test_rectify_disabled_ignores_angle(ramp):
    kp = KeyPoint(x=25, y=25, size=10, angle=45)
    result = get_keypoint_patch(ramp, kp, rectify_orientation=False)
    assert np.array_equal(result, get_patch(ramp, (25, 25), 10))


def test_rotated_patch_of_constant_image_is_constant():
    image = np.full((60, 60), 7, dtype=np.uint8)
    kp = KeyPoint(x=30, y=30, size=10, angle=30)
    patch = get_keypoint_patch(image, kp)
    assert patch.size > 0
    assert patch.shape[0] == patch.shape[1]
    assert np.all(patch == 7)


def test_zero_angle_cartesian_matches_full_turn_vision(ramp):
    cart = get_keypoint_patch(ramp, KeyPoint(25, 25, 10, 0), use_cartesian_angle=True)
    vision = get_keypoint_patch(ramp, KeyPoint(25, 25, 10, 360), use_cartesian_angle=False)
    assert np.array_equal(cart, vision)


def test_zero_angle_keeps_pixels(ramp):
    result = get_keypoint_patch(ramp, KeyPoint(25, 25, 10, 0), use_cartesian_angle=True)
    big = get_patch(ramp, (25, 25), 14)
    assert np.array_equal(result, big[2:10, 2:10])


def test_final_size_resizes_constant_patch():
    image = np.full((40, 40, 3), 9, dtype=np.uint8)
    patch = get_keypoint_patch(image, KeyPoint(20, 20, 10), final_size=6)
    assert patch.shape == (6, 6, 3)
    assert np.all(patch == 9)


def test_final_size_zero_raises(ramp):
    with pytest.raises(DVisionError):
        get_keypoint_patch(ramp, KeyPoint(25, 25, 10), final_size=0)


def test_keypoint_patch_empty_image():
    empty = np.zeros((0, 0), dtype=np.uint8)
    assert get_keypoint_patch(empty, KeyPoint(1, 1, 4, 10)).size == 0