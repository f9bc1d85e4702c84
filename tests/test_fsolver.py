import numpy as np
import pytest

from dvision.errors import DVisionError
from dvision.fsolver import FSolver, normalize_points

K = np.array([[500.0, 0.0, 320.0], [0.0, 500.0, 240.0], [0.0, 0.0, 1.0]])


def _rotation(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def _scene(n=60, seed=3):
    rng = np.random.default_rng(seed)
    pts = np.column_stack(
        [rng.uniform(-2, 2, n), rng.uniform(-1.5, 1.5, n), rng.uniform(4, 8, n)]
    )
    x1 = (K @ pts.T)
    x1 = x1[:2] / x1[2]
    r = _rotation(0.05)
    t = np.array([[1.0], [0.1], [0.0]])
    x2 = K @ (r @ pts.T + t)
    x2 = x2[:2] / x2[2]
    return x1, x2


def _residuals(f, x1, x2):
    h1 = np.vstack([x1, np.ones(x1.shape[1])])
    h2 = np.vstack([x2, np.ones(x2.shape[1])])
    lines = f @ h2
    return np.abs(np.sum(lines * h1, axis=0)) / np.sqrt(lines[0] ** 2 + lines[1] ** 2)


def test_normalize_points_2xn_adds_ones():
    q = normalize_points([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    assert q.shape == (3, 3)
    np.testing.assert_allclose(q[:2], [[1, 2, 3], [4, 5, 6]])
    np.testing.assert_allclose(q[2], np.ones(3))


def test_normalize_points_nx2_is_transposed():
    p = np.array([[1.0, 4.0], [2.0, 5.0], [3.0, 6.0], [7.0, 8.0]])
    q = normalize_points(p)
    np.testing.assert_allclose(q[:2], p.T)
    np.testing.assert_allclose(q[2], np.ones(4))


def test_normalize_points_3xn_divides_by_third_row():
    p = np.array([[2.0, 6.0, 8.0, 1.0], [4.0, 3.0, 2.0, 1.0], [2.0, 3.0, 4.0, 1.0]])
    q = normalize_points(p)
    np.testing.assert_allclose(q[0], p[0] / p[2])
    np.testing.assert_allclose(q[1], p[1] / p[2])
    np.testing.assert_allclose(q[2], p[2])


def test_normalize_points_nx3_matches_3xn():
    p = np.array([[2.0, 4.0, 2.0], [6.0, 3.0, 3.0], [8.0, 2.0, 4.0], [1.0, 1.0, 1.0]])
    np.testing.assert_allclose(normalize_points(p), normalize_points(p.T))


def test_normalize_points_rejects_bad_shape():
    with pytest.raises(DVisionError):
        normalize_points(np.zeros((5, 5)))


def test_finds_consistent_fundamental_matrix():
    x1, x2 = _scene()
    solver = FSolver(640, 480)
    f, status = solver.find_fundamental_mat(x1, x2, 0.5)
    assert f is not None
    assert f.shape == (3, 3)
    assert status == [1] * x1.shape[1]
    assert np.max(_residuals(f, x1, x2)) < 1e-6


def test_fundamental_matrix_has_rank_two():
    x1, x2 = _scene()
    f, _ = FSolver(640, 480).find_fundamental_mat(x1, x2, 0.5)
    s = np.linalg.svd(f, compute_uv=False)
    assert s[2] / s[0] < 1e-10


def test_outliers_are_flagged():
    x1, x2 = _scene()
    x1 = x1.copy()
    x1[1, :5] += 40.0
    f, status = FSolver(640, 480).find_fundamental_mat(x1, x2, 0.5)
    assert f is not None
    assert status[:5] == [0] * 5
    assert all(s == 1 for s in status[5:])


def test_accepts_nx2_input():
    x1, x2 = _scene()
    f, status = FSolver(640, 480).find_fundamental_mat(x1.T, x2.T, 0.5)
    assert sum(status) == x1.shape[1]
    assert np.max(_residuals(f, x1, x2)) < 1e-6


def test_without_computing_f_returns_identity():
    x1, x2 = _scene()
    f, status = FSolver(640, 480).find_fundamental_mat(x1, x2, 0.5, compute_f=False)
    np.testing.assert_allclose(f, np.eye(3))
    assert sum(status) >= 9


def test_too_few_points_gives_none():
    x1, x2 = _scene(n=6)
    f, status = FSolver(640, 480).find_fundamental_mat(x1, x2, 0.5)
    assert f is None
    assert status == [0] * 6


def test_check_fundamental_mat():
    x1, x2 = _scene()
    solver = FSolver(640, 480)
    assert solver.check_fundamental_mat(x1, x2, 0.5) is True
    assert solver.check_fundamental_mat(x1[:, :5], x2[:, :5], 0.5) is False


def test_mismatched_point_counts_raise():
    x1, x2 = _scene()
    with pytest.raises(DVisionError):
        FSolver(640, 480).find_fundamental_mat(x1, x2[:, :-1], 0.5)


def test_invalid_image_size_raises():
    with pytest.raises(ValueError):
        FSolver(0, 480)