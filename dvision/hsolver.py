"""Homography estimation with RANSAC and the normalized DLT."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from dvision.fsolver import _prepare, _run_ransac

_MIN_INV_COND = 1e-16


class HSolver:
    """Computes homographies H such that x1 ~ H x2."""

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
        self._n_inv = np.linalg.inv(self._n)

    def find_homography(
        self,
        p1,
        p2,
        reprojection_error: float,
        min_points: int = 5,
        compute_h: bool = True,
        probability: float = 0.99,
        max_its: int = 500,
    ) -> tuple[np.ndarray | None, list[int]]:
        """Estimate H from correspondences with RANSAC.

        A point is an inlier when its squared transfer error is at most
        reprojection_error. Returns (H, status); H is None when no consistent
        homography is found. If compute_h is False, the identity is returned
        in place of H on success.
        """
        q1, q2 = _prepare(p1, p2)
        count = q1.shape[1]
        status = [0] * count

        qc1 = self._n @ q1
        qc2 = self._n @ q2

        def fit(cols: Sequence[int]) -> np.ndarray | None:
            return self._compute_h(qc1, qc2, cols)

        def inliers(hc: np.ndarray) -> np.ndarray:
            x1 = (self._n_inv @ hc) @ qc2
            with np.errstate(divide="ignore", invalid="ignore"):
                x1[0] /= x1[2]
                x1[1] /= x1[2]
                diff = x1[:2] - q1[:2]
                error = np.sum(diff * diff, axis=0)
                return error <= reprojection_error

        best = _run_ransac(
            count, 4, min_points, fit, inliers, not compute_h, probability, max_its
        )
        if best is None:
            return None, status

        status = [1 if flag else 0 for flag in best]
        if not compute_h:
            return np.eye(3), status

        hc12 = self._compute_h(qc1, qc2, list(np.flatnonzero(best)))
        if hc12 is None:
            return None, status
        return self._n_inv @ hc12 @ self._n, status

    def check_homography(
        self,
        p1,
        p2,
        reprojection_error: float,
        min_points: int = 5,
        probability: float = 0.99,
        max_its: int = 500,
    ) -> bool:
        """Return whether a consistent homography exists."""
        h, _ = self.find_homography(
            p1, p2, reprojection_error, min_points, False, probability, max_its
        )
        return h is not None

    @staticmethod
    def _compute_h(
        qc1: np.ndarray, qc2: np.ndarray, cols: Sequence[int]
    ) -> np.ndarray | None:
        """Compute H from at least 4 normalized correspondences."""
        if len(cols) < 4:
            return None
        idx = np.asarray(cols, dtype=np.int64)
        p10, p11 = qc1[0, idx], qc1[1, idx]
        p20, p21 = qc2[0, idx], qc2[1, idx]
        n = len(idx)
        ones = np.ones(n)
        zeros = np.zeros(n)
        first = np.column_stack(
            [p20, p21, ones, zeros, zeros, zeros, -p10 * p20, -p10 * p21, -p10]
        )
        second = np.column_stack(
            [zeros, zeros, zeros, p20, p21, ones, -p11 * p20, -p11 * p21, -p11]
        )
        m = np.empty((2 * n, 9))
        m[0::2] = first
        m[1::2] = second
        _, s, vt = np.linalg.svd(m, full_matrices=True)
        if s[0] == 0.0 or s[-1] / s[0] < _MIN_INV_COND:
            return None
        return vt[8].reshape(3, 3)