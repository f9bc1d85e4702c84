"""Fundamental matrix estimation with RANSAC and the normalized 8-point method."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

import numpy as np

from dvision import random as drandom
from dvision.errors import DVisionError

_MIN_INV_COND = 1e-16
_RANK2 = np.diag([1.0, 1.0, 0.0])


def normalize_points(points) -> np.ndarray:
    """Return points as a 3xN float64 array of homogeneous coordinates.

    Accepts 2xN, 3xN, Nx2 or Nx3 arrays; shapes are tested in that order of
    rows first. For three-coordinate input the first two rows are divided by
    the third, which is kept as given.
    """
    p = np.asarray(points, dtype=np.float64)
    if p.ndim != 2:
        raise DVisionError("points must be a two-dimensional array")
    rows, cols = p.shape
    if rows == 3:
        q = p.copy()
    elif rows == 2:
        return np.vstack([p, np.ones((1, cols))])
    elif cols == 3:
        q = p.T.copy()
    elif cols == 2:
        return np.vstack([p.T, np.ones((1, rows))])
    else:
        raise DVisionError("points must be 2xN, 3xN, Nx2 or Nx3")
    with np.errstate(divide="ignore", invalid="ignore"):
        q[0] /= q[2]
        q[1] /= q[2]
    return q


def _log_one_minus(probability: float) -> float:
    if probability >= 1.0:
        return -math.inf
    return math.log(1.0 - probability)


def _iterations(log_fail: float, ratio: float, exponent: int) -> int | None:
    """Number of RANSAC iterations for an inlier ratio, or None if undefined."""
    x = ratio ** exponent
    if x >= 1.0:
        denom = -math.inf
    else:
        denom = math.log(1.0 - x)
    if denom == 0.0:
        return None
    value = log_fail / denom
    if not math.isfinite(value):
        return None
    return int(value)


def _run_ransac(
    count: int,
    model_size: int,
    min_points: int,
    fit: Callable[[Sequence[int]], np.ndarray | None],
    inliers: Callable[[np.ndarray], np.ndarray],
    stop_at_first: bool,
    probability: float,
    max_its: int,
) -> np.ndarray | None:
    """Run RANSAC and return the boolean inlier mask of the best model."""
    if count < min_points or count < model_size:
        return None
    min_points = max(min_points, model_size)
    log_fail = _log_one_minus(probability)

    if count == min_points:
        iterations = 1
    else:
        its = _iterations(log_fail, min_points / count, min_points)
        iterations = max_its if its is None or its > max_its or its <= 0 else its

    drandom.seed_rand_once()

    best_count = 0
    best_mask: np.ndarray | None = None
    it = 0
    while it < iterations:
        available = list(range(count))
        sample = []
        for _ in range(model_size):
            idx = drandom.random_int(0, len(available) - 1)
            sample.append(available[idx])
            available[idx] = available[-1]
            available.pop()

        model = fit(sample)
        if model is not None:
            mask = inliers(model)
            ninliers = int(np.count_nonzero(mask))
            if ninliers > best_count and ninliers >= min_points:
                best_count = ninliers
                best_mask = mask
                if stop_at_first:
                    break
                its = _iterations(log_fail, ninliers / count, model_size)
                if its is not None and 0 <= its < iterations:
                    iterations = its
        it += 1
    return best_mask


def _prepare(p1, p2) -> tuple[np.ndarray, np.ndarray]:
    q1 = normalize_points(p1)
    q2 = normalize_points(p2)
    if q1.shape[1] != q2.shape[1]:
        raise DVisionError("both point sets must hold the same number of points")
    return q1, q2


class FSolver:
    """Computes fundamental matrices F such that x1' F x2 = 0."""

    def __init__(self, cols: int = 1, rows: int = 1) -> None:
        self.set_image_size(cols, rows)

    def set_image_size(self, cols: int, rows: int) -> None:
        """Set the image size used to normalize coordinates."""
        if cols <= 0 or rows <= 0:
            raise ValueError("image dimensions must be positive")
        self._n = np.array(
            [
                [1.0 / cols, 0.0, -0.5],
                [0.0, 1.0 / rows, -0.5],
                [0.0, 0.0, 1.0],
            ]
        )
        self._n_t = self._n.T.copy()

    def find_fundamental_mat(
        self,
        p1,
        p2,
        reprojection_error: float,
        min_points: int = 9,
        compute_f: bool = True,
        probability: float = 0.99,
        max_its: int = 500,
    ) -> tuple[np.ndarray | None, list[int]]:
        """Estimate F from correspondences with RANSAC.

        Returns (F, status), where status[i] is 1 for inliers and 0 otherwise.
        F is None when no consistent matrix is found. If compute_f is False,
        the identity is returned in place of F on success.
        """
        q1, q2 = _prepare(p1, p2)
        count = q1.shape[1]
        status = [0] * count

        qc1 = self._n @ q1
        qc2 = self._n @ q2

        def fit(cols: Sequence[int]) -> np.ndarray | None:
            return self._compute_f(qc1, qc2, cols)

        def inliers(fc: np.ndarray) -> np.ndarray:
            lines = (self._n_t @ fc) @ qc2
            norms = np.sqrt(lines[0] ** 2 + lines[1] ** 2)
            thresholds = norms * reprojection_error
            dots = np.abs(np.sum(lines * q1, axis=0))
            return dots <= thresholds

        best = _run_ransac(
            count, 8, min_points, fit, inliers, not compute_f, probability, max_its
        )
        if best is None:
            return None, status

        status = [1 if flag else 0 for flag in best]
        if not compute_f:
            return np.eye(3), status

        fc12 = self._compute_f(qc1, qc2, list(np.flatnonzero(best)))
        if fc12 is None:
            return None, status
        return self._n_t @ fc12 @ self._n, status

    def check_fundamental_mat(
        self,
        p1,
        p2,
        reprojection_error: float,
        min_points: int = 9,
        probability: float = 0.99,
        max_its: int = 500,
    ) -> bool:
        """Return whether a consistent fundamental matrix exists."""
        f, _ = self.find_fundamental_mat(
            p1, p2, reprojection_error, min_points, False, probability, max_its
        )
        return f is not None

    @staticmethod
    def _compute_f(
        qc1: np.ndarray, qc2: np.ndarray, cols: Sequence[int]
    ) -> np.ndarray | None:
        """Compute a rank-2 F from at least 8 normalized correspondences."""
        if len(cols) < 8:
            return None
        idx = np.asarray(cols, dtype=np.int64)
        p10, p11 = qc1[0, idx], qc1[1, idx]
        p20, p21 = qc2[0, idx], qc2[1, idx]
        ones = np.ones(len(idx))
        m = np.column_stack(
            [p10 * p20, p10 * p21, p10, p11 * p20, p11 * p21, p11, p20, p21, ones]
        )
        _, s, vt = np.linalg.svd(m, full_matrices=True)
        if s[0] == 0.0 or s[-1] / s[0] < _MIN_INV_COND:
            return None
        fm = vt[8].reshape(3, 3)
        u, _, vt2 = np.linalg.svd(fm, full_matrices=True)
        return u @ _RANK2 @ vt2