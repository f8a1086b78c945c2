"""
structdiff.parse — Tolerant parsing of pasted JSON / JavaScript literals.

Text is tried against three tiers, most strict first; the first tier that
accepts the input wins:

    Tier.JSON     strict JSON (json.loads, with NaN/Infinity rejected)

    Tier.RELAXED  a regex pre-pass, then strict JSON again:
                    1. ' → "
                    2. unquoted keys  {name: 1}  →  {"name": 1}
                    3. trailing commas removed before } and ]
                    4. undefined / NaN / Infinity / -Infinity in value
                       position → sentinel strings, revived after parsing
                  This is a heuristic, not a tokenizer: quote characters
                  inside strings ("it's") and key-like text inside
                  strings can be rewritten incorrectly.

    Tier.LITERAL  a small recursive-descent parser for JavaScript literal
                  expressions: objects, arrays, strings (', ", `),
                  numbers (incl. hex/octal/binary, leading +/-), true,
                  false, null, undefined, NaN, Infinity, array holes,
                  trailing commas and comments.  No identifiers are
                  evaluated and nothing is executed.

For tiers 2 and 3 the result also carries `normalized`, the equivalent
strict JSON text, so callers can offer to replace the user's input.
"""

import enum
import re
from dataclasses import dataclass
from typing import Optional

from .core import (
    FALSE, NAN, NEG_INF, NULL, POS_INF, TRUE, UNDEFINED,
    Value, VArray, VNumber, VObject, VString,
    format_number, kind,
)
from .formats import from_python, loads_strict, to_json
from .log import get_logger

logger = get_logger("parse")


# ═══════════════════════════════════════════════════════════════════
#  ERRORS
# ═══════════════════════════════════════════════════════════════════

class ParseError(ValueError):
    """Base class: the input could not be turned into a usable Value."""


class EmptyInput(ParseError):
    def __init__(self):
        super().__init__("input is empty")


class InvalidSyntax(ParseError):
    """No tier accepted the text."""

    def __init__(self, detail: str):
        super().__init__(f"could not parse input as JSON or as a JavaScript literal: {detail}")
        self.detail = detail


class NotAnArray(ParseError):
    def __init__(self, found: str):
        super().__init__(f"expected an array, got {found}")
        self.found = found


class NotAnObjectOrArray(ParseError):
    def __init__(self, found: str):
        super().__init__(f"expected an object or an array, got {found}")
        self.found = found


# ═══════════════════════════════════════════════════════════════════
#  RESULT TYPES
# ═══════════════════════════════════════════════════════════════════

class Tier(enum.IntEnum):
    JSON = 1
    RELAXED = 2
    LITERAL = 3


class Shape(enum.Enum):
    """What the top-level value must be."""
    ARRAY = "array"
    OBJECT_OR_ARRAY = "object-or-array"
    ANY = "any"


@dataclass(frozen=True)
class ParseResult:
    value: Value
    tier: Tier
    normalized: Optional[str] = None

    @property
    def was_fixed(self) -> bool:
        return self.tier > Tier.JSON


# ═══════════════════════════════════════════════════════════════════
#  TIER 2 — RELAXED NORMALIZATION
# ═══════════════════════════════════════════════════════════════════

_SENTINELS = {
    "undefined": "__structdiff:undefined__",
    "NaN": "__structdiff:NaN__",
    "Infinity": "__structdiff:Infinity__",
    "-Infinity": "__structdiff:-Infinity__",
}
_REVIVE = {
    _SENTINELS["undefined"]: UNDEFINED,
    _SENTINELS["NaN"]: NAN,
    _SENTINELS["Infinity"]: POS_INF,
    _SENTINELS["-Infinity"]: NEG_INF,
}

_UNQUOTED_KEY = re.compile(r"([{,]\s*)([A-Za-z_$][A-Za-z0-9_$]*)(\s*:)")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_BARE_TOKEN = re.compile(r"(?<=[:,\[])(\s*)(-Infinity|Infinity|undefined|NaN)(?=\s*[,}\]])")
_UNESCAPED_SINGLE_QUOTE = re.compile(r"(?<!\\)'")


def has_single_quotes(text: str) -> bool:
    """True if the text contains an unescaped single quote."""
    return _UNESCAPED_SINGLE_QUOTE.search(text) is not None


def replace_single_quotes(text: str) -> str:
    """Swap every unescaped ' for " (the one-click quote fix)."""
    return _UNESCAPED_SINGLE_QUOTE.sub('"', text)


def relax(text: str) -> str:
    """Apply the tier-2 rewrite rules, in order, to `text`."""
    s = text.replace("'", '"')
    s = _UNQUOTED_KEY.sub(r'\1"\2"\3', s)
    s = _TRAILING_COMMA.sub(r"\1", s)
    s = _BARE_TOKEN.sub(lambda m: f'{m.group(1)}"{_SENTINELS[m.group(2)]}"', s)
    return s


def _revive(val: Value) -> Value:
    """Turn tier-2 sentinel strings back into their special values."""
    if isinstance(val, VString):
        return _REVIVE.get(val.val, val)
    if isinstance(val, VArray):
        return VArray(tuple(_revive(item) for item in val.items))
    if isinstance(val, VObject):
        return VObject({k: _revive(v) for k, v in val.entries.items()})
    return val


# ═══════════════════════════════════════════════════════════════════
#  TIER 3 — LITERAL EXPRESSION GRAMMAR
# ═══════════════════════════════════════════════════════════════════
#
#   value   := object | array | string | number | keyword | '(' value ')'
#   object  := '{' [ member (',' member)* [','] ] '}'
#   member  := (identifier | string | number) ':' value
#   array   := '[' ( value | <hole> ) separated by ',' ']'
#   number  := ['+'|'-'] ( decimal | 0x.. | 0o.. | 0b.. | Infinity )
#   keyword := true | false | null | undefined | NaN

_WS_AND_COMMENTS = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)*", re.S)
_IDENT = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_DECIMAL = re.compile(r"(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?")
_RADIX = re.compile(r"0([xX][0-9a-fA-F_]+|[oO][0-7_]+|[bB][01_]+)")
_KEYWORDS = {
    "true": TRUE,
    "false": FALSE,
    "null": NULL,
    "undefined": UNDEFINED,
    "NaN": NAN,
    "Infinity": POS_INF,
}
_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0",
}
_MAX_DEPTH = 200


class _LiteralParser:
    """Recursive-descent parser over a JavaScript literal expression."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.depth = 0

    # ── helpers ──────────────────────────────────────────────────

    def error(self, message: str) -> InvalidSyntax:
        line = self.text.count("\n", 0, self.pos) + 1
        column = self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1
        return InvalidSyntax(f"{message} at line {line} column {column}")

    def skip(self) -> None:
        self.pos = _WS_AND_COMMENTS.match(self.text, self.pos).end()

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, ch: str) -> None:
        self.skip()
        if self.peek() != ch:
            found = repr(self.peek()) if self.peek() else "end of input"
            raise self.error(f"expected {ch!r}, found {found}")
        self.pos += 1

    # ── grammar ──────────────────────────────────────────────────

    def parse(self) -> Value:
        value = self.value()
        self.skip()
        if self.pos != len(self.text):
            raise self.error(f"unexpected {self.peek()!r} after value")
        return value

    def value(self) -> Value:
        self.skip()
        ch = self.peek()
        if not ch:
            raise self.error("unexpected end of input")
        if ch in "{[(":
            self.depth += 1
            if self.depth > _MAX_DEPTH:
                raise self.error("nesting too deep")
            try:
                if ch == "{":
                    return self.object()
                if ch == "[":
                    return self.array()
                self.pos += 1
                inner = self.value()
                self.expect(")")
                return inner
            finally:
                self.depth -= 1
        if ch in "\"'`":
            return VString(self.string())
        if ch in "+-.0123456789":
            return self.number()
        m = _IDENT.match(self.text, self.pos)
        if m:
            word = m.group()
            if word in _KEYWORDS:
                self.pos = m.end()
                return _KEYWORDS[word]
            raise self.error(f"identifier {word!r} is not a literal")
        raise self.error(f"unexpected {ch!r}")

    def object(self) -> VObject:
        self.pos += 1  # '{'
        entries: dict[str, Value] = {}
        while True:
            self.skip()
            if self.peek() == "}":
                self.pos += 1
                return VObject(entries)
            key = self.key()
            self.expect(":")
            entries[key] = self.value()
            self.skip()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                raise self.error("expected ',' or '}' in object")

    def key(self) -> str:
        ch = self.peek()
        if not ch:
            raise self.error("unexpected end of input in object")
        if ch in "\"'`":
            return self.string()
        if ch in ".0123456789":
            number = self.number()
            if not isinstance(number, VNumber):
                raise self.error("invalid numeric key")
            return format_number(number.val)
        m = _IDENT.match(self.text, self.pos)
        if not m:
            raise self.error(f"expected a property name, found {ch!r}")
        self.pos = m.end()
        return m.group()

    def array(self) -> VArray:
        self.pos += 1  # '['
        items: list[Value] = []
        while True:
            self.skip()
            ch = self.peek()
            if ch == "]":
                self.pos += 1
                return VArray(tuple(items))
            if ch == ",":
                # Hole: [1,,2] reads the middle slot as undefined.
                self.pos += 1
                items.append(UNDEFINED)
                continue
            items.append(self.value())
            self.skip()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "]":
                raise self.error("expected ',' or ']' in array")

    def number(self) -> Value:
        sign = 1
        if self.peek() in "+-":
            sign = -1 if self.peek() == "-" else 1
            self.pos += 1
            self.skip()
        if self.text.startswith("Infinity", self.pos):
            self.pos += len("Infinity")
            return POS_INF if sign > 0 else NEG_INF
        start = self.pos
        m = _RADIX.match(self.text, self.pos)
        try:
            if m:
                self.pos = m.end()
                return VNumber(sign * int(m.group(), 0))
            m = _DECIMAL.match(self.text, self.pos)
            if not m or m.group() in (".", ""):
                raise self.error("invalid number")
            self.pos = m.end()
            raw = m.group().replace("_", "")
            if re.fullmatch(r"\d+", raw):
                return VNumber(sign * int(raw))
            return from_python(sign * float(raw))
        except InvalidSyntax:
            raise
        except ValueError:
            # int() refuses very long digit strings.
            self.pos = start
            raise self.error("number too long") from None

    def string(self) -> str:
        quote = self.peek()
        self.pos += 1
        out: list[str] = []
        text = self.text
        while True:
            if self.pos >= len(text):
                raise self.error("unterminated string")
            ch = text[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(out)
            if ch == "\n" and quote != "`":
                raise self.error("unterminated string")
            if quote == "`" and text.startswith("${", self.pos):
                raise self.error("template substitutions are not literals")
            if ch != "\\":
                out.append(ch)
                self.pos += 1
                continue
            self.pos += 1
            esc = text[self.pos] if self.pos < len(text) else ""
            self.pos += 1
            if esc in _SIMPLE_ESCAPES:
                out.append(_SIMPLE_ESCAPES[esc])
            elif esc == "x":
                out.append(chr(self._hex(2)))
            elif esc == "u":
                if self.peek() == "{":
                    end = text.find("}", self.pos)
                    if end == -1:
                        raise self.error("bad unicode escape")
                    digits = text[self.pos + 1:end]
                    self.pos = end + 1
                    try:
                        out.append(chr(int(digits, 16)))
                    except ValueError:
                        raise self.error("bad unicode escape") from None
                else:
                    out.append(chr(self._hex(4)))
            elif esc == "\n":
                pass  # line continuation
            elif esc == "\r":
                if self.peek() == "\n":
                    self.pos += 1
            elif esc == "":
                raise self.error("unterminated string")
            else:
                out.append(esc)

    def _hex(self, n: int) -> int:
        digits = self.text[self.pos:self.pos + n]
        if len(digits) != n or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise self.error("bad escape sequence")
        self.pos += n
        return int(digits, 16)


def parse_literal(text: str) -> Value:
    """Parse `text` with the tier-3 literal grammar only."""
    return _LiteralParser(text).parse()


# ═══════════════════════════════════════════════════════════════════
#  ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════

def nesting_depth(value: Value) -> int:
    """Deepest chain of nested arrays / objects (a scalar is 0)."""
    deepest = 0
    stack = [(value, 0)]
    while stack:
        v, depth = stack.pop()
        if isinstance(v, VArray):
            children = v.items
        elif isinstance(v, VObject):
            children = v.entries.values()
        else:
            continue
        depth += 1
        deepest = max(deepest, depth)
        stack.extend((child, depth) for child in children)
    return deepest


def _check_depth(value: Value) -> None:
    """Apply the literal grammar's nesting bound to JSON-parsed values too."""
    depth = nesting_depth(value)
    if depth > _MAX_DEPTH:
        raise InvalidSyntax(f"nesting too deep ({depth} levels, at most {_MAX_DEPTH})")


def parse(text: str) -> ParseResult:
    """
    Parse `text` with the first tier that accepts it.

    Raises EmptyInput for blank text and InvalidSyntax when every tier
    fails (the message comes from the most lenient tier).
    """
    trimmed = text.strip()
    if not trimmed:
        raise EmptyInput()

    try:
        value = from_python(loads_strict(trimmed))
    except (ValueError, RecursionError) as e:
        logger.debug("strict JSON rejected input: %s", e)
    else:
        _check_depth(value)
        return ParseResult(value, Tier.JSON)

    relaxed = relax(trimmed)
    try:
        value = _revive(from_python(loads_strict(relaxed)))
    except (ValueError, RecursionError) as e:
        logger.debug("relaxed JSON rejected input: %s", e)
    else:
        _check_depth(value)
        logger.debug("input accepted after relaxed normalization")
        return ParseResult(value, Tier.RELAXED, to_json(value))

    value = parse_literal(trimmed)
    logger.debug("input accepted by the literal grammar")
    return ParseResult(value, Tier.LITERAL, to_json(value))


def check_shape(value: Value, shape: Shape) -> None:
    """Raise NotAnArray / NotAnObjectOrArray if `value` has the wrong shape."""
    if shape == Shape.ARRAY and not isinstance(value, VArray):
        raise NotAnArray(kind(value))
    if shape == Shape.OBJECT_OR_ARRAY and not isinstance(value, (VArray, VObject)):
        raise NotAnObjectOrArray(kind(value))


def parse_as(text: str, shape: Shape) -> ParseResult:
    """
    parse() followed by a top-level shape check.

    `shape` may be a Shape or its value ("array", "object-or-array").
    """
    result = parse(text)
    check_shape(result.value, Shape(shape))
    return result
