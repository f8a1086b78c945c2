"""
structdiff.diff — Recursive, path-addressed structural diff.

deep_diff(a, b) decomposes both values in parallel and files every
decomposition point into exactly one of four buckets:

    added     present only in b
    removed   present only in a
    changed   present in both, different scalar (or different kinds)
    same      present in both, equal

PATHS
    "(root)"        a scalar compared at the root
    "a.b"           object member
    "a.b[2].c"      array element (index in `a`; unmatched extras of `b`
                    use their index in `b`)
    "tags[#3]"      synthetic slot from an order-free comparison of
                    scalar arrays; the number is a running counter, not
                    a position

ARRAYS — two strategies, chosen by content:

    Bag mode (every element on both sides is a scalar)
        Compare occurrence counts per canonical key:
            min(countA, countB) × same
            surplus in a       × removed
            surplus in b       × added
        Order never matters; duplicates are accounted for.

    Structural mode (at least one element is an array or object)
        Greedy three-pass alignment:
            1. exact matches (first unconsumed equal element of b)
            2. best-scoring same-kind partner for each leftover composite
               of a, then recurse into the pair
                   objects: shared keys + BONUS per matching identity key
                   arrays:  positions whose elements are equal
            3. leftovers → removed / added, with one exception: when
               index i is unconsumed in both a and b, the pair is
               reported as a single CHANGED at [i] instead of REMOVED
               [i] plus ADDED [i], so no path is ever both added and
               removed.  This departs from a plain "leftovers of a are
               removed, leftovers of b are added" rule.

    Complexity: O(n·m) canonical-key comparisons per array level.

Enumeration order is deterministic: object keys in a's insertion order
followed by keys new in b; array elements by ascending index.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .core import (
    Value, VArray, VObject,
    canonical_key, is_composite, is_scalar,
)
from .formats import display, to_jsonable
from .log import get_logger

logger = get_logger("diff")

ROOT = "(root)"


# ═══════════════════════════════════════════════════════════════════
#  RESULT TYPES
# ═══════════════════════════════════════════════════════════════════

class DiffKind(Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    SAME = "same"


@dataclass(frozen=True)
class DiffEntry:
    """
    One decomposition point.

    `value` is set for ADDED / REMOVED / SAME; `old` and `new` for CHANGED.
    """
    kind: DiffKind
    path: str
    value: Optional[Value] = None
    old: Optional[Value] = None
    new: Optional[Value] = None

    def __repr__(self) -> str:
        if self.kind == DiffKind.CHANGED:
            return f"CHANGED at {self.path}: {display(self.old)} → {display(self.new)}"
        return f"{self.kind.name} at {self.path}: {display(self.value)}"

    def to_dict(self) -> dict:
        if self.kind == DiffKind.CHANGED:
            return {"path": self.path, "from": to_jsonable(self.old), "to": to_jsonable(self.new)}
        return {"path": self.path, "value": to_jsonable(self.value)}


@dataclass
class DiffResult:
    """The four-way partition produced by deep_diff()."""
    added: list[DiffEntry] = field(default_factory=list)
    removed: list[DiffEntry] = field(default_factory=list)
    changed: list[DiffEntry] = field(default_factory=list)
    same: list[DiffEntry] = field(default_factory=list)

    def extend(self, other: "DiffResult") -> None:
        """Append all four buckets of `other`, preserving their order."""
        self.added.extend(other.added)
        self.removed.extend(other.removed)
        self.changed.extend(other.changed)
        self.same.extend(other.same)

    @property
    def is_identical(self) -> bool:
        return not (self.added or self.removed or self.changed)

    def counts(self) -> dict[str, int]:
        return {
            "added": len(self.added),
            "removed": len(self.removed),
            "changed": len(self.changed),
            "same": len(self.same),
        }

    def items(self, include_same: bool = False) -> list[DiffEntry]:
        """Changed, then added, then removed (then same, if asked)."""
        entries = self.changed + self.added + self.removed
        if include_same:
            entries += self.same
        return entries

    def to_dict(self) -> dict:
        return {
            "added": [e.to_dict() for e in self.added],
            "removed": [e.to_dict() for e in self.removed],
            "changed": [e.to_dict() for e in self.changed],
            "same": [e.to_dict() for e in self.same],
        }

    def __repr__(self) -> str:
        c = self.counts()
        return (f"DiffResult(added={c['added']}, removed={c['removed']}, "
                f"changed={c['changed']}, same={c['same']})")


@dataclass(frozen=True)
class DiffOptions:
    """
    Tuning for structural array alignment.

    identity_keys:   object keys whose equal values strongly suggest two
                     elements are the same record
    identity_bonus:  score added per matching identity key
    """
    identity_keys: tuple[str, ...] = ("id", "key", "name", "type")
    identity_bonus: int = 10


DEFAULT_OPTIONS = DiffOptions()


# ═══════════════════════════════════════════════════════════════════
#  PATHS
# ═══════════════════════════════════════════════════════════════════

def member_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def slot_path(path: str, counter: int) -> str:
    return f"{path}[#{counter}]"


# ═══════════════════════════════════════════════════════════════════
#  DIFF
# ═══════════════════════════════════════════════════════════════════

def deep_diff(a: Value, b: Value, path: str = "",
              options: DiffOptions = DEFAULT_OPTIONS) -> DiffResult:
    """
    Compare two values and return every difference, addressed by path.

    Pure and total: any pair of Values produces a result.

        deep_diff(from_python({"x": 1, "y": 2}), from_python({"x": 1, "z": 3}))
            removed  y: 2
            added    z: 3
            same     x: 1
    """
    result = DiffResult()

    if isinstance(a, VArray) and isinstance(b, VArray):
        if not a.items and not b.items:
            result.same.append(DiffEntry(DiffKind.SAME, path or ROOT, value=a))
        elif all(is_scalar(v) for v in a.items) and all(is_scalar(v) for v in b.items):
            _bag_diff(a.items, b.items, path, result)
        else:
            _structural_diff(a.items, b.items, path, result, options)
        return result

    if isinstance(a, VObject) and isinstance(b, VObject):
        if not a.entries and not b.entries:
            result.same.append(DiffEntry(DiffKind.SAME, path or ROOT, value=a))
        else:
            _object_diff(a, b, path, result, options)
        return result

    if canonical_key(a) == canonical_key(b):
        result.same.append(DiffEntry(DiffKind.SAME, path or ROOT, value=a))
    else:
        result.changed.append(DiffEntry(DiffKind.CHANGED, path or ROOT, old=a, new=b))
    return result


def _object_diff(a: VObject, b: VObject, path: str,
                 result: DiffResult, options: DiffOptions) -> None:
    keys = list(a.entries) + [k for k in b.entries if k not in a.entries]
    for key in keys:
        child_path = member_path(path, key)
        if key not in a.entries:
            result.added.append(DiffEntry(DiffKind.ADDED, child_path, value=b.entries[key]))
        elif key not in b.entries:
            result.removed.append(DiffEntry(DiffKind.REMOVED, child_path, value=a.entries[key]))
        else:
            result.extend(deep_diff(a.entries[key], b.entries[key], child_path, options))


def _bag_diff(a: tuple[Value, ...], b: tuple[Value, ...], path: str,
              result: DiffResult) -> None:
    """Order-free, duplicate-aware comparison of two scalar arrays."""
    count_a: dict[str, list] = {}
    count_b: dict[str, list] = {}
    for items, counts in ((a, count_a), (b, count_b)):
        for item in items:
            key = canonical_key(item)
            if key in counts:
                counts[key][1] += 1
            else:
                counts[key] = [item, 1]

    counter = 0

    def emit(bucket: list, entry_kind: DiffKind, value: Value, times: int) -> None:
        nonlocal counter
        for _ in range(times):
            bucket.append(DiffEntry(entry_kind, slot_path(path, counter), value=value))
            counter += 1

    for key, (item, n_a) in count_a.items():
        item_b, n_b = count_b.get(key, (item, 0))
        emit(result.same, DiffKind.SAME, item, min(n_a, n_b))
        emit(result.removed, DiffKind.REMOVED, item, n_a - n_b)
        emit(result.added, DiffKind.ADDED, item_b, n_b - n_a)

    for key, (item, n_b) in count_b.items():
        if key not in count_a:
            emit(result.added, DiffKind.ADDED, item, n_b)


def similarity(x: Value, y: Value, options: DiffOptions = DEFAULT_OPTIONS) -> int:
    """
    How alike two same-kind composites look, for pairing in pass 2.

    Objects: number of shared keys, plus `identity_bonus` for each
    identity key present in both with equal values.
    Arrays: number of leading positions holding equal elements.
    """
    if isinstance(x, VObject) and isinstance(y, VObject):
        shared = [k for k in x.entries if k in y.entries]
        score = len(shared)
        for k in options.identity_keys:
            if k in x.entries and k in y.entries and \
                    canonical_key(x.entries[k]) == canonical_key(y.entries[k]):
                score += options.identity_bonus
        return score
    if isinstance(x, VArray) and isinstance(y, VArray):
        return sum(
            1 for xi, yi in zip(x.items, y.items)
            if canonical_key(xi) == canonical_key(yi)
        )
    return 0


def _structural_diff(a: tuple[Value, ...], b: tuple[Value, ...], path: str,
                     result: DiffResult, options: DiffOptions) -> None:
    """Greedy three-pass alignment for arrays holding composites."""
    keys_a = [canonical_key(v) for v in a]
    keys_b = [canonical_key(v) for v in b]
    used_a = [False] * len(a)
    used_b = [False] * len(b)

    # Pass 1: exact matches.  Recursing keeps leaf-level `same` entries.
    for i, ka in enumerate(keys_a):
        for j, kb in enumerate(keys_b):
            if not used_b[j] and kb == ka:
                used_a[i] = used_b[j] = True
                result.extend(deep_diff(a[i], b[j], index_path(path, i), options))
                break

    # Pass 2: pair leftover composites with their most similar partner.
    for i, va in enumerate(a):
        if used_a[i] or not is_composite(va):
            continue
        best_j, best_score = -1, -1
        for j, vb in enumerate(b):
            if used_b[j] or type(vb) is not type(va):
                continue
            score = similarity(va, vb, options)
            if score > best_score:
                best_j, best_score = j, score
        if best_j != -1:
            used_a[i] = used_b[best_j] = True
            logger.debug("paired %s with %s (score %d)",
                         index_path(path, i), index_path(path, best_j), best_score)
            result.extend(deep_diff(va, b[best_j], index_path(path, i), options))

    # Pass 3: leftovers.
    for i, va in enumerate(a):
        if used_a[i]:
            continue
        if i < len(b) and not used_b[i]:
            used_b[i] = True
            result.changed.append(DiffEntry(DiffKind.CHANGED, index_path(path, i), old=va, new=b[i]))
        else:
            result.removed.append(DiffEntry(DiffKind.REMOVED, index_path(path, i), value=va))
    for j, vb in enumerate(b):
        if not used_b[j]:
            result.added.append(DiffEntry(DiffKind.ADDED, index_path(path, j), value=vb))
