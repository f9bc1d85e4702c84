"""Projection matrices stored in PMVS camera text files."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from dvision.errors import DVisionError


@dataclass
class PmvsCamera:
    """A camera given by its 3x4 projection matrix, (u v s)' = P (x y z 1)'."""

    P: np.ndarray = field(default_factory=lambda: np.zeros((3, 4)))

    def __post_init__(self) -> None:
        self.P = np.asarray(self.P, dtype=np.float64).reshape(3, 4)


def read_camera(filename: str | Path) -> PmvsCamera:
    """Read a camera file: a CONTOUR line followed by 12 numbers."""
    try:
        with open(filename, encoding="utf-8") as fh:
            fh.readline()
            tokens = fh.read().split()
    except OSError as exc:
        raise DVisionError(f"PMVSCamera: cannot read file {filename}") from exc
    if len(tokens) < 12:
        raise DVisionError(f"PMVSCamera: incomplete matrix in {filename}")
    try:
        values = [float(tok) for tok in tokens[:12]]
    except ValueError as exc:
        raise DVisionError(f"PMVSCamera: malformed matrix in {filename}") from exc
    return PmvsCamera(np.array(values).reshape(3, 4))


def read_camera_dir(filedir: str | Path) -> list[PmvsCamera]:
    """Read every .txt camera file of a directory, in name order."""
    directory = Path(filedir)
    try:
        files = sorted(
            p for p in directory.iterdir() if p.is_file() and p.name.endswith(".txt")
        )
    except OSError as exc:
        raise DVisionError(f"PMVSCamera: cannot read directory {filedir}") from exc
    return [read_camera(path) for path in files]


def save_camera(filename: str | Path, camera: PmvsCamera) -> None:
    """Write a camera file with a CONTOUR line and the matrix rows."""
    rows = "".join(" ".join(f"{v:.6f}" for v in row) + "\n" for row in camera.P)
    try:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write("CONTOUR\n" + rows)
    except OSError as exc:
        raise DVisionError(f"PMVSCamera: cannot write file {filename}") from exc


def save_camera_dir(
    filedir: str | Path,
    cameras: Iterable[PmvsCamera],
    name_format: str = "%08d.txt",
) -> None:
    """Write each camera to its own file, named by name_format and its index."""
    directory = Path(filedir)
    for index, camera in enumerate(cameras):
        save_camera(directory / (name_format % index), camera)