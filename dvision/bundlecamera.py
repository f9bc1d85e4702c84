"""Cameras stored in the bundle.out text format."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from dvision.errors import DVisionError

_COUNT_RE = re.compile(r"\s*([+-]?\d+)")


def _read_lines(filename: str | Path) -> list[str]:
    try:
        with open(filename, encoding="utf-8") as fh:
            return fh.read().splitlines()
    except OSError as exc:
        raise DVisionError(f"BundleCamera: cannot open {filename}") from exc


def _read_camera_count(lines: Iterator[str], filename: str | Path) -> int:
    """Skip comment lines and return the number of cameras in the header."""
    for line in lines:
        if line.startswith("#"):
            continue
        match = _COUNT_RE.match(line)
        count = int(match.group(1)) if match else 0
        if count >= 0:
            return count
    raise DVisionError(f"BundleCamera: no camera count in {filename}")


def _parse_numbers(lines: Iterator[str], count: int, what: str) -> list[float]:
    line = next(lines, None)
    if line is None:
        raise DVisionError(f"BundleCamera: missing {what}")
    tokens = line.split()
    if len(tokens) < count:
        raise DVisionError(f"BundleCamera: malformed {what}: {line!r}")
    try:
        return [float(tok) for tok in tokens[:count]]
    except ValueError as exc:
        raise DVisionError(f"BundleCamera: malformed {what}: {line!r}") from exc


@dataclass
class BundleCamera:
    """A camera: focal length, radial distortion, rotation and translation."""

    f: float = 0.0
    k1: float = 0.0
    k2: float = 0.0
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.rotation = np.asarray(self.rotation, dtype=np.float64).reshape(3, 3)
        self.translation = np.asarray(self.translation, dtype=np.float64).reshape(3)

    def save(self, filename: str | Path, comment: str = "") -> None:
        """Save this camera alone in a file with the bundle.out format."""
        if comment:
            header = "# " + comment.replace("\n", " ")
        else:
            header = "# Single camera (opencv reference)"
        text = f"{header}\n1 0\n{self._to_text()}"
        try:
            with open(filename, "w", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as exc:
            raise DVisionError(f"BundleCamera: cannot open {filename}") from exc

    @classmethod
    def load(cls, filename: str | Path) -> BundleCamera:
        """Read the first camera of a bundle.out file."""
        lines = iter(_read_lines(filename))
        _read_camera_count(lines, filename)
        return cls._from_lines(lines)

    def _to_text(self) -> str:
        out = [f"{self.f:.6f} {self.k1:.6f} {self.k2:.6f}\n"]
        for row in self.rotation:
            out.append("".join(f"{v:.12f} " for v in row) + "\n")
        out.append("".join(f"{v:.12f} " for v in self.translation) + "\n")
        return "".join(out)

    @classmethod
    def _from_lines(cls, lines: Iterator[str]) -> BundleCamera:
        f, k1, k2 = _parse_numbers(lines, 3, "intrinsic parameters")
        rotation = [_parse_numbers(lines, 3, "rotation row") for _ in range(3)]
        translation = _parse_numbers(lines, 3, "translation")
        return cls(f, k1, k2, np.array(rotation), np.array(translation))


def read_cameras(filename: str | Path) -> list[BundleCamera]:
    """Read every camera of a bundle.out file."""
    lines = iter(_read_lines(filename))
    count = _read_camera_count(lines, filename)
    return [BundleCamera._from_lines(lines) for _ in range(count)]


def save_cameras(filename: str | Path, cameras: Iterable[BundleCamera]) -> None:
    """Save cameras in a file with the bundle.out format and no points."""
    cameras = list(cameras)
    parts = [
        "# A contraption file with the bundle.out format in opencv reference system\n",
        f"{len(cameras)} 0\n",
    ]
    parts.extend(camera._to_text() for camera in cameras)
    try:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write("".join(parts))
    except OSError as exc:
        raise DVisionError(f"BundleCamera: cannot open {filename}") from exc