"""
structdiff.core — Value model and canonical equality
=====================================================

§1  THE VALUE MODEL
───────────────────

Inputs arrive as pasted text that may be strict JSON or a looser
JavaScript literal.  JavaScript distinguishes values that plain Python
objects conflate or cannot express at all:

    undefined   ≠ null          (absent vs. explicitly empty)
    NaN         ≠ NaN           (under IEEE rules, but "the same value" here)
    Infinity, -Infinity         (not representable in JSON)

So every parsed input is represented as a CLOSED tagged union:

    VNull | VUndefined | VBool | VNumber | VNaN | VPosInfinity
          | VNegInfinity | VString | VArray | VObject

VArray is ORDERED.  VObject keeps insertion order for display, but key
order carries no meaning: two objects with the same members are equal.

Values are immutable and acyclic (they originate from parsed text).


§2  CANONICAL KEYS
──────────────────

canonical_key(v) folds a value into a string such that

    canonical_key(x) == canonical_key(y)   ⟺   x and y are equal

Rules:
    • VUndefined, VNaN, VPosInfinity, VNegInfinity and VNull map to
      mutually distinct sentinels.
    • Numbers use a canonical decimal form (1 and 1.0 agree).
    • Strings are quoted, so the string "null" never equals VNull.
    • Object keys are sorted before folding (key order is irrelevant).
    • Array elements are folded IN ORDER (this is an identity hash,
      not a normalization — see canonicalize() for that).

Every equality test in the engine goes through this function.


§3  CANONICALIZATION
────────────────────

canonicalize(v) rewrites a value into a normal form: object keys sorted
alphabetically, and — only when asked — array elements sorted with a
natural (digit-aware, case-insensitive) ordering.  It reports whether
anything moved, so callers can say "input was reordered" instead of
silently changing what is being compared.
"""

import json
import re
from dataclasses import dataclass
from typing import Union


# ═══════════════════════════════════════════════════════════════════
#  VALUE TYPES
# ═══════════════════════════════════════════════════════════════════

class Value:
    """Base class for parsed values.  Not instantiated directly."""
    __slots__ = ()

    def __repr__(self) -> str:
        # Local import: formats depends on this module.
        from .formats import display
        return f"{type(self).__name__}({display(self)})"


@dataclass(frozen=True, slots=True, repr=False)
class VNull(Value):
    """JSON ``null``."""


@dataclass(frozen=True, slots=True, repr=False)
class VUndefined(Value):
    """JavaScript ``undefined`` — an absent value, never equal to null."""


@dataclass(frozen=True, slots=True, repr=False)
class VNaN(Value):
    """JavaScript ``NaN``.  Equal to itself under canonical_key."""


@dataclass(frozen=True, slots=True, repr=False)
class VPosInfinity(Value):
    """JavaScript ``Infinity``."""


@dataclass(frozen=True, slots=True, repr=False)
class VNegInfinity(Value):
    """JavaScript ``-Infinity``."""


@dataclass(frozen=True, slots=True, repr=False)
class VBool(Value):
    val: bool


@dataclass(frozen=True, slots=True, repr=False)
class VNumber(Value):
    """
    A finite number.

    Holds a Python int or float.  Non-finite floats are never stored
    here; they have their own variants (VNaN, VPosInfinity, VNegInfinity).
    """
    val: Union[int, float]


@dataclass(frozen=True, slots=True, repr=False)
class VString(Value):
    val: str


@dataclass(frozen=True, slots=True, repr=False)
class VArray(Value):
    """
    An ordered sequence of values.

    Examples:
        VArray((VNumber(1), VNumber(2)))                # [1, 2]
        VArray((VString("a"), UNDEFINED))               # ["a", undefined]
    """
    items: tuple[Value, ...]

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True, repr=False)
class VObject(Value):
    """
    A mapping of string keys to values.

    Insertion order is preserved for display only; it does not affect
    equality under canonical_key().

    Examples:
        VObject({"id": VNumber(1), "name": VString("a")})
    """
    entries: dict[str, Value]

    def __init__(self, entries: dict[str, Value]):
        object.__setattr__(self, 'entries', dict(entries))

    def __hash__(self):
        return hash(canonical_key(self))

    def __len__(self) -> int:
        return len(self.entries)


NULL = VNull()
UNDEFINED = VUndefined()
NAN = VNaN()
POS_INF = VPosInfinity()
NEG_INF = VNegInfinity()
TRUE = VBool(True)
FALSE = VBool(False)


def is_composite(v: Value) -> bool:
    """True for arrays and objects."""
    return isinstance(v, (VArray, VObject))


def is_scalar(v: Value) -> bool:
    return not is_composite(v)


def kind(v: Value) -> str:
    """Short type name, as shown in error messages and summaries."""
    if isinstance(v, VArray):
        return "array"
    if isinstance(v, VObject):
        return "object"
    if isinstance(v, VString):
        return "string"
    if isinstance(v, (VNumber, VNaN, VPosInfinity, VNegInfinity)):
        return "number"
    if isinstance(v, VBool):
        return "boolean"
    if isinstance(v, VUndefined):
        return "undefined"
    return "null"


# ═══════════════════════════════════════════════════════════════════
#  CANONICAL KEY
# ═══════════════════════════════════════════════════════════════════

_SENTINEL_KEYS = {
    VUndefined: "__undefined__",
    VNaN: "__NaN__",
    VPosInfinity: "__Infinity__",
    VNegInfinity: "__-Infinity__",
    VNull: "null",
}


def format_number(n: Union[int, float]) -> str:
    """
    Canonical decimal form of a finite number.

    Integral floats print without a fraction (1.0 → "1", -0.0 → "0"),
    everything else uses the shortest round-tripping repr.
    """
    if isinstance(n, float) and n.is_integer():
        n = int(n)
    if isinstance(n, int):
        return str(n)
    return repr(n)


def canonical_key(v: Value) -> str:
    """
    Fold a value into a string that is equal for equal values.

    This is the single source of truth for equality in the engine:
    duplicate detection, set comparison, scalar change detection and
    array element matching all compare canonical keys.
    """
    sentinel = _SENTINEL_KEYS.get(type(v))
    if sentinel is not None:
        return sentinel
    if isinstance(v, VBool):
        return "true" if v.val else "false"
    if isinstance(v, VNumber):
        return format_number(v.val)
    if isinstance(v, VString):
        return json.dumps(v.val, ensure_ascii=False)
    if isinstance(v, VArray):
        return "[" + ",".join(canonical_key(item) for item in v.items) + "]"
    if isinstance(v, VObject):
        return "{" + ",".join(
            json.dumps(k, ensure_ascii=False) + ":" + canonical_key(v.entries[k])
            for k in sorted(v.entries)
        ) + "}"
    raise TypeError(f"Unknown Value type: {type(v)}")


def equal(a: Value, b: Value) -> bool:
    """Semantic equality (canonical keys match)."""
    return a is b or canonical_key(a) == canonical_key(b)


# ═══════════════════════════════════════════════════════════════════
#  CANONICALIZER
# ═══════════════════════════════════════════════════════════════════

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(v: Value) -> tuple:
    """
    Digit-aware, case-insensitive ordering over canonical keys.

    "item2" sorts before "item10", and 9 before 10.  The split always
    yields str, int, str, ... so tuples compare element-wise safely.
    """
    parts = _DIGITS.split(canonical_key(v))
    return tuple(int(p) if i % 2 else p.casefold() for i, p in enumerate(parts))


def canonicalize(v: Value, sort_arrays: bool = False) -> tuple[Value, bool]:
    """
    Normalize `v` for order-insensitive comparison.

    Object keys are always sorted alphabetically.  Array elements are
    sorted (by natural_sort_key) only when `sort_arrays` is set.

    Returns (normalized_value, changed) where `changed` tells whether any
    key or element actually moved anywhere in the tree.
    """
    if isinstance(v, VObject):
        keys = list(v.entries)
        sorted_keys = sorted(keys)
        changed = keys != sorted_keys
        entries: dict[str, Value] = {}
        for k in sorted_keys:
            child, child_changed = canonicalize(v.entries[k], sort_arrays)
            entries[k] = child
            changed = changed or child_changed
        return VObject(entries), changed

    if isinstance(v, VArray):
        results = [canonicalize(item, sort_arrays) for item in v.items]
        items = [item for item, _ in results]
        changed = any(c for _, c in results)
        if sort_arrays:
            ordered = sorted(items, key=natural_sort_key)
            if not changed:
                changed = any(
                    canonical_key(x) != canonical_key(y) for x, y in zip(ordered, items)
                )
            items = ordered
        return VArray(tuple(items)), changed

    return v, False
