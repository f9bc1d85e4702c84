"""BRIEF binary descriptors with random or close random test pairs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

import numpy as np
from scipy import ndimage

from dvision import random as drandom
from dvision.errors import DVisionError
from dvision.imagefunctions import KeyPoint

_BLUR_SIGMA = 2.0
# Kernel radius 4 gives a 9x9 kernel.
_BLUR_TRUNCATE = 2.0


class PairType(Enum):
    """How the test pairs are drawn."""

    RANDOM = 0
    RANDOM_CLOSE = 1


def _point_xy(point: KeyPoint | Sequence[float]) -> tuple[float, float]:
    if isinstance(point, KeyPoint):
        return float(point.x), float(point.y)
    return float(point[0]), float(point[1])


def _treat_image(image: np.ndarray) -> np.ndarray:
    """Convert to grayscale if needed and smooth with a 9x9 Gaussian."""
    im = np.asarray(image)
    if im.ndim == 3:
        if im.shape[2] >= 3:
            rgb = im[:, :, :3].astype(np.float64)
            gray = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
            im = np.clip(np.rint(gray), 0, 255).astype(np.uint8)
        else:
            im = im[:, :, 0]
    blurred = ndimage.gaussian_filter(
        im.astype(np.float64), sigma=_BLUR_SIGMA, truncate=_BLUR_TRUNCATE, mode="mirror"
    )
    return np.clip(np.rint(blurred), 0, 255).astype(np.uint8)


class Brief:
    """BRIEF descriptor extractor; descriptors are boolean numpy arrays."""

    def __init__(
        self,
        nbits: int = 256,
        patch_size: int = 48,
        pair_type: PairType = PairType.RANDOM_CLOSE,
    ) -> None:
        if patch_size <= 1:
            raise ValueError("patch_size must be greater than 1")
        if nbits <= 0:
            raise ValueError("nbits must be positive")
        self.bit_length = int(nbits)
        self.patch_size = int(patch_size)
        self.pair_type = PairType(pair_type)
        self._x1: list[int] = []
        self._y1: list[int] = []
        self._x2: list[int] = []
        self._y2: list[int] = []
        self._generate_test_points()

    def _generate_test_points(self) -> None:
        g_mean = 0.0
        g_sigma = 0.2 * self.patch_size
        c_sigma = 0.08 * self.patch_size
        sigma2 = g_sigma if self.pair_type is PairType.RANDOM else c_sigma
        max_v = self.patch_size // 2

        def draw(mean: float, sigma: float) -> int:
            while True:
                value = int(drandom.random_gaussian_value(mean, sigma))
                if -max_v <= value <= max_v:
                    return value

        drandom.seed_rand_once()
        self._x1, self._y1, self._x2, self._y2 = [], [], [], []
        for _ in range(self.bit_length):
            x1 = draw(g_mean, g_sigma)
            y1 = draw(g_mean, g_sigma)
            if self.pair_type is PairType.RANDOM:
                mean_x = mean_y = g_mean
            else:
                mean_x, mean_y = float(x1), float(y1)
            x2 = draw(mean_x, sigma2)
            y2 = draw(mean_y, sigma2)
            self._x1.append(x1)
            self._y1.append(y1)
            self._x2.append(x2)
            self._y2.append(y2)

    def compute(
        self,
        image: np.ndarray,
        points: Iterable[KeyPoint | Sequence[float]],
        treat_image: bool = True,
    ) -> list[np.ndarray]:
        """Return one descriptor per point.

        With treat_image the image is converted to grayscale and smoothed;
        otherwise it must already be a 2-D uint8 image.
        """
        im = _treat_image(image) if treat_image else np.asarray(image)
        if im.ndim != 2 or im.dtype != np.uint8:
            raise DVisionError("BRIEF needs a single-channel 8-bit image")

        height, width = im.shape
        ox1 = np.asarray(self._x1, dtype=np.float64)
        oy1 = np.asarray(self._y1, dtype=np.float64)
        ox2 = np.asarray(self._x2, dtype=np.float64)
        oy2 = np.asarray(self._y2, dtype=np.float64)

        descriptors = []
        for point in points:
            px, py = _point_xy(point)
            x1 = np.trunc(px + ox1).astype(np.int64)
            y1 = np.trunc(py + oy1).astype(np.int64)
            x2 = np.trunc(px + ox2).astype(np.int64)
            y2 = np.trunc(py + oy2).astype(np.int64)
            valid = (
                (x1 >= 0) & (x1 < width) & (y1 >= 0) & (y1 < height)
                & (x2 >= 0) & (x2 < width) & (y2 >= 0) & (y2 < height)
            )
            bits = np.zeros(self.bit_length, dtype=bool)
            if valid.any():
                a = im[y1[valid], x1[valid]]
                b = im[y2[valid], x2[valid]]
                bits[: len(valid)][valid] = a < b
            descriptors.append(bits)
        return descriptors

    def __call__(
        self,
        image: np.ndarray,
        points: Iterable[KeyPoint | Sequence[float]],
        treat_image: bool = True,
    ) -> list[np.ndarray]:
        return self.compute(image, points, treat_image)

    def export_pairs(self) -> tuple[list[int], list[int], list[int], list[int]]:
        """Return copies of the test pattern as (x1, y1, x2, y2)."""
        return list(self._x1), list(self._y1), list(self._x2), list(self._y2)

    def import_pairs(
        self,
        x1: Sequence[int],
        y1: Sequence[int],
        x2: Sequence[int],
        y2: Sequence[int],
    ) -> None:
        """Replace the test pattern; the descriptor length follows it."""
        if not len(x1) == len(y1) == len(x2) == len(y2):
            raise ValueError("pair coordinate lists must have the same length")
        self._x1 = [int(v) for v in x1]
        self._y1 = [int(v) for v in y1]
        self._x2 = [int(v) for v in x2]
        self._y2 = [int(v) for v in y2]
        self.bit_length = len(self._x1)

    @staticmethod
    def distance(a: np.ndarray, b: np.ndarray) -> int:
        """Return the Hamming distance between two descriptors."""
        return int(np.count_nonzero(np.asarray(a, dtype=bool) != np.asarray(b, dtype=bool)))


class Brief256(Brief):
    """BRIEF descriptor with a fixed length of 256 bits."""

    BITS = 256

    def __init__(self, patch_size: int = 48, pair_type: PairType = PairType.RANDOM_CLOSE) -> None:
        super().__init__(self.BITS, patch_size, pair_type)

    def import_pairs(
        self,
        x1: Sequence[int],
        y1: Sequence[int],
        x2: Sequence[int],
        y2: Sequence[int],
    ) -> None:
        """Replace the test pattern, which must hold exactly 256 pairs."""
        if len(x1) != self.BITS:
            raise ValueError(f"a {self.BITS}-bit descriptor needs {self.BITS} pairs")
        super().import_pairs(x1, y1, x2, y2)