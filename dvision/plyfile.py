"""Reading and writing a simple subset of ASCII PLY files."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from dvision.errors import DVisionError

_VERTEX_RE = re.compile(r"element\s*vertex\s*([+-]?\d+)")

_HEADER = (
    "ply",
    "format ascii 1.0",
    None,  # element vertex N
    "property float x",
    "property float y",
    "property float z",
    "property float nx",
    "property float ny",
    "property float nz",
    "property uchar diffuse_red",
    "property uchar diffuse_green",
    "property uchar diffuse_blue",
    "end_header",
)


@dataclass
class PLYPoint:
    """A 3D point with its normal and colour."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    nx: float = 0.0
    ny: float = 0.0
    nz: float = 0.0
    r: int = 0
    g: int = 0
    b: int = 0


def _parse_point(line: str) -> PLYPoint:
    tokens = line.split()
    if len(tokens) < 9:
        raise DVisionError(f"PLYFile: malformed point: {line!r}")
    try:
        coords = [float(tok) for tok in tokens[:6]]
        colour = [int(float(tok)) for tok in tokens[6:9]]
    except ValueError as exc:
        raise DVisionError(f"PLYFile: malformed point: {line!r}") from exc
    return PLYPoint(*coords, *colour)


def read_ply(filename: str | Path) -> list[PLYPoint]:
    """Return the points of a PLY file; header contents are ignored."""
    try:
        with open(filename, encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except OSError as exc:
        raise DVisionError(f"PLYFile: cannot read file {filename}") from exc

    points = []
    in_header = True
    for line in lines:
        if not line:
            continue
        if in_header:
            in_header = line != "end_header"
        else:
            points.append(_parse_point(line))
    return points


def save_ply(filename: str | Path, points: Iterable[PLYPoint]) -> None:
    """Write points to an ASCII PLY file."""
    points = list(points)
    header = [
        line if line is not None else f"element vertex {len(points)}"
        for line in _HEADER
    ]
    body = [
        f"{p.x:g} {p.y:g} {p.z:g} {p.nx:g} {p.ny:g} {p.nz:g} {p.r} {p.g} {p.b}"
        for p in points
    ]
    try:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write("".join(f"{line}\n" for line in header + body))
    except OSError as exc:
        raise DVisionError(f"PLYFile: cannot open file {filename}") from exc


def ply_point_count(filename: str | Path) -> int:
    """Return the vertex count declared in the third line of the header."""
    try:
        with open(filename, encoding="utf-8") as fh:
            lines = [fh.readline() for _ in range(3)]
    except OSError as exc:
        raise DVisionError(f"PLYFile: cannot open file {filename}") from exc
    match = _VERTEX_RE.match(lines[2])
    if match is None:
        raise DVisionError(f"PLYFile: format not supported in {filename}")
    return int(match.group(1))