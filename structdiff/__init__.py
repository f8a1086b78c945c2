"""
structdiff — Structural diff for JSON and JavaScript literals
=============================================================

Compare two pasted documents (arrays or objects, arbitrarily nested) and
get a categorized, path-addressed report:

    >>> from structdiff import compare
    >>> report = compare('[{id: 1, name: "a"}]', '[{"id": 1, "name": "b"}]')
    >>> report.diff.changed
    [CHANGED at [0].name: "a" → "b"]
    >>> report.diff.same
    [SAME at [0].id: 1]

What makes it more than a key-by-key walk:

  • Tolerant input: strict JSON, then a relaxed rewrite (single quotes,
    unquoted keys, trailing commas), then a literal-only JS grammar.
  • Honest values: undefined, null, NaN, Infinity and -Infinity stay
    distinct instead of collapsing into null.
  • Key order never matters; array order matters only where it can.
  • Arrays of scalars compare as bags (duplicate-aware, order-free).
    Arrays of records are aligned by content and identity keys
    (id, key, name, type), so a reordered list with one edited field
    reports that one field — not a whole-record replacement.
"""

from structdiff.core import (
    # Types
    Value,
    VNull, VUndefined, VBool, VNumber, VNaN, VPosInfinity, VNegInfinity,
    VString, VArray, VObject,
    NULL, UNDEFINED, NAN, POS_INF, NEG_INF, TRUE, FALSE,
    # Equality
    canonical_key,
    canonicalize,
)
from structdiff.diff import DiffEntry, DiffKind, DiffOptions, DiffResult, deep_diff
from structdiff.sets import (
    DuplicateEntry, find_duplicates, unique_count, identical, same_unique_set,
)
from structdiff.parse import (
    ParseError, EmptyInput, InvalidSyntax, NotAnArray, NotAnObjectOrArray,
    ParseResult, Shape, Tier,
    parse, parse_as, has_single_quotes, replace_single_quotes,
)
from structdiff.formats import (
    JS_UNDEFINED, from_json, to_json, from_python, to_python, display,
)
from structdiff.analysis import (
    AnalysisReport, Comparison, ComparisonError, ParseStatus, Side, Stage,
    auto_fix, compare, parse_and_classify, parse_status,
)

__version__ = "0.1.0"
__all__ = [
    "Value", "VNull", "VUndefined", "VBool", "VNumber", "VNaN",
    "VPosInfinity", "VNegInfinity", "VString", "VArray", "VObject",
    "NULL", "UNDEFINED", "NAN", "POS_INF", "NEG_INF", "TRUE", "FALSE",
    "canonical_key", "canonicalize",
    "DiffEntry", "DiffKind", "DiffOptions", "DiffResult", "deep_diff",
    "DuplicateEntry", "find_duplicates", "unique_count", "identical",
    "same_unique_set",
    "ParseError", "EmptyInput", "InvalidSyntax", "NotAnArray",
    "NotAnObjectOrArray", "ParseResult", "Shape", "Tier",
    "parse", "parse_as", "has_single_quotes", "replace_single_quotes",
    "JS_UNDEFINED", "from_json", "to_json", "from_python", "to_python",
    "display",
    "AnalysisReport", "Comparison", "ComparisonError", "ParseStatus",
    "Side", "Stage", "auto_fix", "compare", "parse_and_classify",
    "parse_status",
]
