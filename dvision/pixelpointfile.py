"""Files of points with pixel and 3D coordinates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from dvision.errors import DVisionError


@dataclass
class PixelPoint:
    """A pixel (u, v) with its 3D point (x, y, z) and an arbitrary index."""

    u: float = 0.0
    v: float = 0.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    idx: int = 0


def save_pixel_points(filename: str | Path, points: Iterable[PixelPoint]) -> None:
    """Write the number of points followed by one 'u v x y z idx' line each."""
    points = list(points)
    out = [f"{len(points)}\n"]
    out.extend(
        f"{p.u:.4f} {p.v:.4f} {p.x:.4f} {p.y:.4f} {p.z:.4f} {p.idx}\n" for p in points
    )
    try:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write("".join(out))
    except OSError as exc:
        raise DVisionError(f"Cannot open file {filename}") from exc


def read_pixel_points(filename: str | Path) -> list[PixelPoint]:
    """Read pixel points; reading stops at the first incomplete or bad entry."""
    try:
        with open(filename, encoding="utf-8") as fh:
            tokens = fh.read().split()
    except OSError as exc:
        raise DVisionError(f"Cannot open file {filename}") from exc

    try:
        count = int(tokens[0])
    except (IndexError, ValueError):
        return []

    points = []
    rest = tokens[1:]
    for i in range(count):
        entry = rest[6 * i:6 * i + 6]
        if len(entry) < 6:
            break
        try:
            u, v, x, y, z = (float(tok) for tok in entry[:5])
            idx = int(entry[5])
        except ValueError:
            break
        points.append(PixelPoint(u, v, x, y, z, idx))
    return points