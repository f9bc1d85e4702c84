"""Patch extraction from images, optionally rotated and rescaled."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from dvision.errors import DVisionError
from dvision.mathfuncs import signed_angle

# (2 - sqrt(2)) / sqrt(2)
_ROTATION_MARGIN_FACTOR = 0.414213562373095


@dataclass
class KeyPoint:
    """An image keypoint: position, diameter and orientation in degrees.

    An angle of -1 means the keypoint has no orientation.
    """

    x: float
    y: float
    size: float = 0.0
    angle: float = -1.0

    @property
    def pt(self) -> tuple[float, float]:
        return (self.x, self.y)


def _empty_like(image: np.ndarray) -> np.ndarray:
    return image[0:0, 0:0].copy()


def _cv_round(value: float) -> int:
    """Round to the nearest integer, halves to even."""
    return int(round(value))


def _to_dtype(values: np.ndarray, dtype: np.dtype) -> np.ndarray:
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return values.astype(dtype)


def _per_channel(image: np.ndarray, func) -> np.ndarray:
    """Apply func to every channel of a 2-D or 3-D image, in float64."""
    if image.ndim == 2:
        return func(image.astype(np.float64))
    return np.stack(
        [func(image[:, :, ch].astype(np.float64)) for ch in range(image.shape[2])],
        axis=2,
    )


def _rotation_matrix(cx: float, cy: float, angle_deg: float) -> np.ndarray:
    """2x3 matrix rotating counter-clockwise by angle_deg around (cx, cy)."""
    rad = math.radians(angle_deg)
    a = math.cos(rad)
    b = math.sin(rad)
    return np.array(
        [
            [a, b, (1.0 - a) * cx - b * cy],
            [-b, a, b * cx + (1.0 - a) * cy],
        ]
    )


def _warp_affine(image: np.ndarray, matrix: np.ndarray, width: int, height: int) -> np.ndarray:
    """Warp image with a forward 2x3 matrix into a (height, width) output."""
    full = np.vstack([matrix, [0.0, 0.0, 1.0]])
    inv = np.linalg.inv(full)
    rc_matrix = np.array([[inv[1, 1], inv[1, 0]], [inv[0, 1], inv[0, 0]]])
    rc_offset = np.array([inv[1, 2], inv[0, 2]])

    def warp(channel: np.ndarray) -> np.ndarray:
        return ndimage.affine_transform(
            channel,
            rc_matrix,
            offset=rc_offset,
            output_shape=(height, width),
            order=1,
            mode="constant",
            cval=0.0,
        )

    return _to_dtype(_per_channel(image, warp), image.dtype)


def _resize_linear(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Bilinear resize using half-pixel centre alignment."""
    rows, cols = image.shape[:2]
    ys = np.clip((np.arange(height) + 0.5) * rows / height - 0.5, 0, rows - 1)
    xs = np.clip((np.arange(width) + 0.5) * cols / width - 0.5, 0, cols - 1)
    grid = np.meshgrid(ys, xs, indexing="ij")

    def resize(channel: np.ndarray) -> np.ndarray:
        return ndimage.map_coordinates(channel, grid, order=1, mode="nearest")

    return _to_dtype(_per_channel(image, resize), image.dtype)


def get_patch(image: np.ndarray, center: Sequence[float], patch_size: int) -> np.ndarray:
    """Extract a patch around center (x, y), cropped to the image bounds.

    An empty array is returned when the image is empty or the patch starts
    beyond the image.
    """
    image = np.asarray(image)
    if image.size == 0:
        return _empty_like(image) if image.ndim >= 2 else np.empty((0, 0))

    patch_size = int(patch_size)
    if patch_size < 0:
        raise ValueError("patch_size must not be negative")

    rows, cols = image.shape[:2]
    cx = _cv_round(center[0])
    cy = _cv_round(center[1])
    half = patch_size // 2
    odd = patch_size % 2

    c0 = cx - half
    r0 = cy - half
    cf = cx + half - 1 + odd
    rf = cy + half - 1 + odd

    if c0 >= cols or r0 >= rows:
        return _empty_like(image)

    c0 = max(c0, 0)
    r0 = max(r0, 0)
    cf = min(cf, cols - 1)
    rf = min(rf, rows - 1)
    return image[r0:max(rf, r0), c0:max(cf, c0)].copy()


def get_keypoint_patch(
    image: np.ndarray,
    keypoint: KeyPoint,
    final_size: int = -1,
    rectify_orientation: bool = True,
    use_cartesian_angle: bool = False,
) -> np.ndarray:
    """Extract the patch described by a keypoint.

    The keypoint size is the patch diameter. When rectify_orientation is set
    and the keypoint has an angle, the patch is rotated to cancel it. If
    final_size is not negative, the patch is resized to that square size.
    """
    image = np.asarray(image)
    if image.size == 0:
        return _empty_like(image) if image.ndim >= 2 else np.empty((0, 0))

    if rectify_orientation and keypoint.angle >= 0:
        margin = keypoint.size / 2.0 * _ROTATION_MARGIN_FACTOR
        psize = int(keypoint.size + margin * 2)
        patch = get_patch(image, keypoint.pt, psize)

        angle = keypoint.angle if use_cartesian_angle else 360 - keypoint.angle
        angle = signed_angle(angle)

        prows, pcols = patch.shape[:2]
        rot = _rotation_matrix(pcols / 2.0, prows / 2.0, -angle)
        # Output width is the patch height and vice versa.
        r_patch = _warp_affine(patch, rot, width=prows, height=pcols)

        rrows, rcols = r_patch.shape[:2]
        c0 = int(margin)
        cf = int(rcols - margin)
        r0 = int(margin)
        rf = int(rrows - margin)
        result = r_patch[r0:max(rf, r0), c0:max(cf, c0)].copy()
    else:
        result = get_patch(image, keypoint.pt, int(keypoint.size))

    if final_size >= 0:
        if final_size == 0 or result.size == 0:
            raise DVisionError("cannot resize an empty patch or to an empty size")
        result = _resize_linear(result, final_size, final_size)
    return result