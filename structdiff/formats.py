"""
structdiff.formats — Convert between real-world data and Values.

Supported conversions:
    • Python objects (dict, list, str, int, float, bool, None) ↔ Value
    • Strict JSON text → Value
    • Value → JSON text, with the same lossy rules a browser's
      JSON.stringify applies to undefined / NaN / Infinity
    • Value → compact display string that keeps those values visible
"""

import json
import math
from typing import Any

from .core import (
    FALSE, NAN, NEG_INF, NULL, POS_INF, TRUE, UNDEFINED,
    Value, VArray, VBool, VNaN, VNegInfinity, VNull, VNumber, VObject,
    VPosInfinity, VString, VUndefined,
    format_number,
)


class _JSUndefined:
    """Python stand-in for JavaScript ``undefined`` (no built-in equivalent)."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


JS_UNDEFINED = _JSUndefined()


# ═══════════════════════════════════════════════════════════════════
#  PYTHON OBJECTS ↔ VALUES
# ═══════════════════════════════════════════════════════════════════

def from_python(obj: Any) -> Value:
    """
    Convert a Python object to a Value.

    Mapping:
        None          → NULL
        JS_UNDEFINED  → UNDEFINED
        bool          → VBool
        int/float     → VNumber   (nan / ±inf → NAN / POS_INF / NEG_INF)
        str           → VString
        list/tuple    → VArray
        dict          → VObject   (keys coerced to str)

    Nested structures are converted recursively.  Values pass through.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NULL
    if obj is JS_UNDEFINED:
        return UNDEFINED
    if isinstance(obj, bool):  # Must check before int (bool is subclass of int)
        return TRUE if obj else FALSE
    if isinstance(obj, int):
        return VNumber(obj)
    if isinstance(obj, float):
        if math.isnan(obj):
            return NAN
        if math.isinf(obj):
            return POS_INF if obj > 0 else NEG_INF
        return VNumber(obj)
    if isinstance(obj, str):
        return VString(obj)
    if isinstance(obj, (list, tuple)):
        return VArray(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        return VObject({str(k): from_python(v) for k, v in obj.items()})

    # Fallback: convert to string representation
    return VString(str(obj))


def to_python(val: Value) -> Any:
    """
    Convert a Value back to a plain Python object.

    Inverse of from_python:
        to_python(from_python(obj)) == obj
    for JSON-compatible objects.  UNDEFINED becomes JS_UNDEFINED and the
    non-finite numbers become the matching float.
    """
    if isinstance(val, VNull):
        return None
    if isinstance(val, VUndefined):
        return JS_UNDEFINED
    if isinstance(val, VNaN):
        return math.nan
    if isinstance(val, VPosInfinity):
        return math.inf
    if isinstance(val, VNegInfinity):
        return -math.inf
    if isinstance(val, (VBool, VNumber, VString)):
        return val.val
    if isinstance(val, VArray):
        return [to_python(item) for item in val.items]
    if isinstance(val, VObject):
        return {k: to_python(v) for k, v in val.entries.items()}
    raise TypeError(f"Unknown Value type: {type(val)}")


# ═══════════════════════════════════════════════════════════════════
#  JSON TEXT ↔ VALUES
# ═══════════════════════════════════════════════════════════════════

def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(text: str) -> Any:
    """json.loads without Python's NaN / Infinity / -Infinity extension."""
    return json.loads(text, parse_constant=_reject_constant)


def from_json(text: str) -> Value:
    """Parse a strict JSON string into a Value."""
    return from_python(loads_strict(text))


def to_jsonable(val: Value) -> Any:
    """
    Convert a Value to JSON-serializable Python data, JSON.stringify style.

        undefined object member  → member dropped
        undefined array slot     → null
        NaN / ±Infinity          → null
        integral float           → int    (1.0 prints as 1)
    """
    if isinstance(val, (VNull, VUndefined, VNaN, VPosInfinity, VNegInfinity)):
        return None
    if isinstance(val, VNumber):
        if isinstance(val.val, float) and val.val.is_integer():
            return int(val.val)
        return val.val
    if isinstance(val, (VBool, VString)):
        return val.val
    if isinstance(val, VArray):
        return [to_jsonable(item) for item in val.items]
    if isinstance(val, VObject):
        return {
            k: to_jsonable(v) for k, v in val.entries.items()
            if not isinstance(v, VUndefined)
        }
    raise TypeError(f"Unknown Value type: {type(val)}")


def to_json(val: Value, indent: int = 2) -> str:
    """Render a Value as JSON text (see to_jsonable for the lossy cases)."""
    return json.dumps(to_jsonable(val), indent=indent, ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════
#  DISPLAY
# ═══════════════════════════════════════════════════════════════════

_BARE_WORDS = {
    VNull: "null",
    VUndefined: "undefined",
    VNaN: "NaN",
    VPosInfinity: "Infinity",
    VNegInfinity: "-Infinity",
}


def display(val: Value, summarize: bool = False) -> str:
    """
    One-line rendering that keeps undefined / NaN / Infinity visible.

    With `summarize`, arrays and objects collapse to "[3 items]" and
    "{2 keys}" instead of being printed in full.
    """
    word = _BARE_WORDS.get(type(val))
    if word is not None:
        return word
    if isinstance(val, VBool):
        return "true" if val.val else "false"
    if isinstance(val, VNumber):
        return format_number(val.val)
    if isinstance(val, VString):
        return json.dumps(val.val, ensure_ascii=False)
    if isinstance(val, VArray):
        if summarize:
            return f"[{len(val.items)} items]"
        return "[" + ", ".join(display(item) for item in val.items) + "]"
    if isinstance(val, VObject):
        if summarize:
            return f"{{{len(val.entries)} keys}}"
        return "{" + ", ".join(
            f"{json.dumps(k, ensure_ascii=False)}: {display(v)}"
            for k, v in val.entries.items()
        ) + "}"
    raise TypeError(f"Unknown Value type: {type(val)}")
