"""Reading and writing PMVS .patch files."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from dvision.errors import DVisionError


@dataclass
class Patch:
    """A PMVS patch: homogeneous position, normal and visibility lists."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    s: float = 1.0
    nx: float = 0.0
    ny: float = 0.0
    nz: float = 0.0
    ns: float = 0.0
    consistency: float = 0.0
    dbg1: float = 0.0
    dbg2: float = 0.0
    strong_visibility_list: list[int] = field(default_factory=list)
    weak_visibility_list: list[int] = field(default_factory=list)


def _read_lines(filename: str | Path) -> Iterator[str]:
    try:
        with open(filename, encoding="utf-8") as fh:
            return iter(fh.read().splitlines())
    except OSError as exc:
        raise DVisionError(f"PatchFile: cannot read file {filename}") from exc


def _next_line(lines: Iterator[str], what: str) -> str:
    line = next(lines, None)
    if line is None:
        raise DVisionError(f"PatchFile: missing {what}")
    return line


def _parse_int(line: str, what: str) -> int:
    tokens = line.split()
    try:
        return int(tokens[0])
    except (IndexError, ValueError) as exc:
        raise DVisionError(f"PatchFile: malformed {what}: {line!r}") from exc


def _parse_floats(line: str, count: int, what: str) -> list[float]:
    tokens = line.split()
    if len(tokens) < count:
        raise DVisionError(f"PatchFile: malformed {what}: {line!r}")
    try:
        return [float(tok) for tok in tokens[:count]]
    except ValueError as exc:
        raise DVisionError(f"PatchFile: malformed {what}: {line!r}") from exc


def _parse_index_list(lines: Iterator[str], what: str) -> list[int]:
    """Read a count line followed by a line holding that many integers."""
    count = _parse_int(_next_line(lines, f"{what} length"), f"{what} length")
    line = _next_line(lines, what)
    tokens = line.split()
    if len(tokens) < count:
        raise DVisionError(f"PatchFile: malformed {what}: {line!r}")
    try:
        return [int(tok) for tok in tokens[:count]]
    except ValueError as exc:
        raise DVisionError(f"PatchFile: malformed {what}: {line!r}") from exc


def _read_header(lines: Iterator[str]) -> int:
    _next_line(lines, "PATCHES keyword")
    return _parse_int(_next_line(lines, "number of patches"), "number of patches")


def read_patches(filename: str | Path) -> list[Patch]:
    """Return every patch of a patch file."""
    lines = _read_lines(filename)
    count = _read_header(lines)
    patches = []
    for _ in range(count):
        _next_line(lines, "PATCHS keyword")
        x, y, z, s = _parse_floats(_next_line(lines, "coordinates"), 4, "coordinates")
        nx, ny, nz, ns = _parse_floats(_next_line(lines, "normal"), 4, "normal")
        consistency, dbg1, dbg2 = _parse_floats(
            _next_line(lines, "consistency"), 3, "consistency"
        )
        strong = _parse_index_list(lines, "strong visibility list")
        weak = _parse_index_list(lines, "weak visibility list")
        next(lines, None)  # blank separator
        patches.append(
            Patch(x, y, z, s, nx, ny, nz, ns, consistency, dbg1, dbg2, strong, weak)
        )
    return patches


def save_patches(filename: str | Path, patches: Iterable[Patch]) -> None:
    """Write patches in the PMVS patch file format."""
    patches = list(patches)
    out = ["PATCHES\n", f"{len(patches)}\n"]
    for p in patches:
        out.append("PATCHS\n")
        out.append(f"{p.x:g} {p.y:g} {p.z:g} {p.s:g}\n")
        out.append(f"{p.nx:g} {p.ny:g} {p.nz:g} {p.ns:g}\n")
        out.append(f"{p.consistency:g} {p.dbg1:g} {p.dbg2:g}\n")
        out.append(f"{len(p.strong_visibility_list)}\n")
        out.append("".join(f"{i} " for i in p.strong_visibility_list) + "\n")
        out.append(f"{len(p.weak_visibility_list)}\n")
        out.append("".join(f"{i} " for i in p.weak_visibility_list) + "\n")
        out.append("\n")
    try:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write("".join(out))
    except OSError as exc:
        raise DVisionError(f"PatchFile: cannot write in {filename}") from exc


def read_visibility(filename: str | Path, use_weak_list: bool = False) -> list[list[int]]:
    """Return, for each image index, the indices of the points seen in it.

    With use_weak_list, points likely visible but without texture
    consistency count as visible too.
    """
    lines = _read_lines(filename)
    count = _read_header(lines)
    visibility: list[list[int]] = []

    def add(indices: list[int], pt_idx: int) -> None:
        for img_idx in indices:
            if img_idx < 0:
                raise DVisionError(f"PatchFile: negative image index {img_idx}")
            while len(visibility) <= img_idx:
                visibility.append([])
            visibility[img_idx].append(pt_idx)

    for pt_idx in range(count):
        for what in ("PATCHS keyword", "coordinates", "normal", "consistency"):
            _next_line(lines, what)
        add(_parse_index_list(lines, "strong visibility list"), pt_idx)
        if use_weak_list:
            add(_parse_index_list(lines, "weak visibility list"), pt_idx)
        else:
            _next_line(lines, "weak visibility list length")
            _next_line(lines, "weak visibility list")
        next(lines, None)  # blank separator
    return visibility


def patch_count(filename: str | Path) -> int:
    """Return the number of patches declared in the header."""
    return _read_header(_read_lines(filename))