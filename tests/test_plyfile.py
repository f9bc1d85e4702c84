import pytest

from dvision.errors import DVisionError
from dvision.plyfile import PLYPoint, ply_point_count, read_ply, save_ply


def _points():
    return [
        PLYPoint(1.0, 2.0, 3.0, 0.0, 0.0, 1.0, 255, 0, 0),
        PLYPoint(-0.5, 0.25, 10.125, 1.0, 0.0, 0.0, 10, 20, 30),
    ]


def test_round_trip(tmp_path):
    path = tmp_path / "cloud.ply"
    points = _points()
    save_ply(path, points)
    assert read_ply(path) == points


def test_header_lines(tmp_path):
    path = tmp_path / "cloud.ply"
    save_ply(path, _points())
    lines = path.read_text().splitlines()
    assert lines[0] == "ply"
    assert lines[1] == "format ascii 1.0"
    assert lines[2] == "element vertex 2"
    assert lines[12] == "end_header"
    assert len(lines) == 13 + len(_points())


def test_point_formatting(tmp_path):
    path = tmp_path / "cloud.ply"
    save_ply(path, _points()[:1])
    assert path.read_text().splitlines()[-1] == "1 2 3 0 0 1 255 0 0"


def test_point_count_matches(tmp_path):
    path = tmp_path / "cloud.ply"
    points = _points()
    save_ply(path, points)
    assert ply_point_count(path) == len(points)


def test_empty_cloud(tmp_path):
    path = tmp_path / "empty.ply"
    save_ply(path, [])
    assert read_ply(path) == []
    assert ply_point_count(path) == 0


def test_read_ignores_header_and_blank_lines(tmp_path):
    path = tmp_path / "cloud.ply"
    path.write_text("ply\ncomment anything\nend_header\n\n1 2 3 4 5 6 7 8 9\n\n")
    assert read_ply(path) == [PLYPoint(1, 2, 3, 4, 5, 6, 7, 8, 9)]


def test_unsupported_format_raises(tmp_path):
    path = tmp_path / "bad.ply"
    path.write_text("ply\nformat ascii 1.0\ncomment nothing\n")
    with pytest.raises(DVisionError):
        ply_point_count(path)


def test_malformed_point_raises(tmp_path):
    path = tmp_path / "bad.ply"
    path.write_text("ply\nend_header\n1 2 3\n")
    with pytest.raises(DVisionError):
        read_ply(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(DVisionError):
        read_ply(tmp_path / "absent.ply")