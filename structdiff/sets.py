"""
structdiff.sets — Duplicate and set statistics over arrays.

All comparisons go through canonical_key(), so [1, 2] and [1.0, 2.0]
count as the same element, {"a": 1, "b": 2} equals {"b": 2, "a": 1},
and NaN is a duplicate of NaN.
"""

from dataclasses import dataclass
from typing import Sequence, Union

from .core import Value, VArray, canonical_key

ArrayLike = Union[VArray, Sequence[Value]]


@dataclass(frozen=True)
class DuplicateEntry:
    """A value that occurs `count` (≥ 2) times in one array."""
    item: Value
    count: int

    def __repr__(self) -> str:
        return f"DuplicateEntry({self.item!r} ×{self.count})"


def _elements(arr: ArrayLike) -> Sequence[Value]:
    return arr.items if isinstance(arr, VArray) else arr


def find_duplicates(arr: ArrayLike) -> list[DuplicateEntry]:
    """
    One entry per distinct value occurring more than once.

    Entries are ordered by first occurrence; `item` is that first
    occurrence.
    """
    counts: dict[str, list] = {}
    for item in _elements(arr):
        key = canonical_key(item)
        slot = counts.get(key)
        if slot is None:
            counts[key] = [item, 1]
        else:
            slot[1] += 1
    return [DuplicateEntry(item, n) for item, n in counts.values() if n > 1]


def unique_keys(arr: ArrayLike) -> set[str]:
    return {canonical_key(item) for item in _elements(arr)}


def unique_count(arr: ArrayLike) -> int:
    """Number of distinct values."""
    return len(unique_keys(arr))


def identical(a: ArrayLike, b: ArrayLike) -> bool:
    """Same length and equal element-by-element (order matters)."""
    xs, ys = _elements(a), _elements(b)
    if len(xs) != len(ys):
        return False
    return all(canonical_key(x) == canonical_key(y) for x, y in zip(xs, ys))


def same_unique_set(a: ArrayLike, b: ArrayLike) -> bool:
    """Same distinct values, ignoring order and multiplicity."""
    return unique_keys(a) == unique_keys(b)
