"""Files of correspondences between two sets of points."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from dvision.errors import DVisionError

_HEADER = "%YAML:1.0\n---\n"
_ENTRY_RE = re.compile(r"^(\w+)\s*:(.*?)(?=^\w+\s*:|\Z)", re.MULTILINE | re.DOTALL)
_INT_RE = re.compile(r"[+-]?\d+")


def _format(name: str, values: Sequence[int]) -> str:
    if not values:
        return f"{name}: []\n"
    return f"{name}: [ " + ", ".join(str(int(v)) for v in values) + " ]\n"


def save_matches(filename: str | Path, c1: Sequence[int], c2: Sequence[int]) -> None:
    """Save two correspondence vectors under the keys c0 and c1."""
    text = _HEADER + _format("c0", c1) + _format("c1", c2)
    try:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise DVisionError(f"Matches: cannot write {filename}") from exc


def load_matches(filename: str | Path) -> tuple[list[int], list[int]]:
    """Load the two correspondence vectors; a missing key gives an empty list."""
    try:
        with open(filename, encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        raise DVisionError(f"Matches: cannot read {filename}") from exc

    entries = {
        match.group(1): [int(v) for v in _INT_RE.findall(match.group(2))]
        for match in _ENTRY_RE.finditer(text)
    }
    return entries.get("c0", []), entries.get("c1", [])