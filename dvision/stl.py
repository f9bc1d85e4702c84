"""Helpers for removing, sorting and arranging sequence items."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TextIO


def _runs(indices: Sequence[int]) -> list[tuple[int, int]]:
    """Group ascending unique indices into (start, end) runs of consecutive values."""
    runs: list[tuple[int, int]] = []
    for idx in indices:
        if runs and runs[-1][1] + 1 == idx:
            runs[-1] = (runs[-1][0], idx)
        else:
            runs.append((idx, idx))
    return runs


def _remove_sorted(data: Sequence[Any], indices: Sequence[int], preserve_order: bool) -> list[Any]:
    """Remove ascending, unique, valid indices from a copy of data."""
    result = list(data)
    if not indices:
        return result

    if preserve_order:
        for start, end in reversed(_runs(indices)):
            del result[start:end + 1]
        return result

    # Fill the holes with items taken from the end of the list.
    size = len(result)
    runs = _runs(indices)
    removed = 0
    if runs and runs[-1][1] == size - 1:
        start, end = runs.pop()
        removed += end - start + 1

    for start, end in reversed(runs):
        length = end - start + 1
        copy_end = size - removed
        count = min(length, size - 1 - removed - end)
        copy_src = copy_end - count
        result[start:start + count] = result[copy_src:copy_end]
        removed += length

    del result[size - removed:]
    return result


def remove_indices(
    data: Sequence[Any], indices: Iterable[int], preserve_order: bool = True
) -> list[Any]:
    """Return a copy of data without the items at the given indices.

    Out-of-range and repeated indices are ignored. When preserve_order is
    False, holes are filled with items from the end, which changes the order.
    """
    valid = sorted({i for i in indices if 0 <= i < len(data)})
    return _remove_sorted(data, valid, preserve_order)


def remove_by_status(
    data: Sequence[Any], status: Sequence[int], preserve_order: bool = True
) -> list[Any]:
    """Return a copy of data without the items whose status is 0."""
    if len(data) != len(status):
        raise ValueError("data and status must have the same length")
    indices = [i for i, s in enumerate(status) if s == 0]
    return _remove_sorted(data, indices, preserve_order)


def format_vector(values: Iterable[Any], name: str = "") -> str:
    """Format values as '<name> = [ v1 v2 ... ]'."""
    prefix = f"{name} = " if name else ""
    body = "".join(f"{v} " for v in values)
    return f"{prefix}[ {body}]"


def print_vector(values: Iterable[Any], name: str = "", file: TextIO | None = None) -> None:
    """Print values in the format given by format_vector."""
    print(format_vector(values, name), file=file if file is not None else sys.stdout)


def index_sort(values: Sequence[Any], key: Callable[[Any], Any] | None = None) -> list[int]:
    """Return the indices that would sort values, without moving them."""
    if key is None:
        return sorted(range(len(values)), key=values.__getitem__)
    return sorted(range(len(values)), key=lambda i: key(values[i]))


def arrange(data: Sequence[Any], indices: Sequence[int]) -> list[Any]:
    """Return the items of data placed in the given order of indices."""
    if len(indices) != len(data) or sorted(indices) != list(range(len(data))):
        raise ValueError("indices must be a permutation of the data positions")
    return [data[i] for i in indices]