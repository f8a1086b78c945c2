"""
structdiff.analysis — The two entry points a front end talks to.

    parse_and_classify(text, shape)   live parse status + auto-fix text
    compare(text_a, text_b, shape)    full AnalysisReport for two inputs

A comparison moves through

    IDLE → PARSING → PARSE_ERROR            (stops; names the failing side)
                   → PARSED → DIFFING → RESULT

and is atomic: if either side fails to parse, no partial report exists.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from .core import Value, VArray, VObject, canonical_key, canonicalize
from .diff import DEFAULT_OPTIONS, DiffOptions, DiffResult, deep_diff
from .formats import to_json, to_jsonable
from .log import get_logger
from .parse import ParseError, ParseResult, Shape, Tier, parse, parse_as
from .sets import DuplicateEntry, find_duplicates, identical, same_unique_set, unique_count

logger = get_logger("analysis")


class Side(enum.Enum):
    A = "A"
    B = "B"


class Stage(enum.Enum):
    IDLE = "idle"
    PARSING = "parsing"
    PARSE_ERROR = "parse-error"
    PARSED = "parsed"
    DIFFING = "diffing"
    RESULT = "result"


class ComparisonError(ParseError):
    """A ParseError raised while comparing, tagged with the side that failed."""

    def __init__(self, side: Side, cause: ParseError):
        super().__init__(f"input {side.value}: {cause}")
        self.side = side
        self.cause = cause


# ═══════════════════════════════════════════════════════════════════
#  SINGLE INPUT
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ParseStatus:
    """The badge shown next to an input box."""
    ok: bool
    label: str
    note: Optional[str] = None


def parse_and_classify(text: str, shape: Shape = Shape.OBJECT_OR_ARRAY) -> ParseResult:
    """Parse one input, enforce its top-level shape, report the tier used."""
    return parse_as(text, shape)


def parse_status(text: str, shape: Shape = Shape.ANY) -> Optional[ParseStatus]:
    """Badge for `text`; None while the input is blank."""
    if not text.strip():
        return None
    try:
        result = parse_as(text, shape)
    except ParseError as e:
        return ParseStatus(False, "invalid format", str(e))
    if result.tier == Tier.JSON:
        return ParseStatus(True, "JSON valid")
    return ParseStatus(True, "JS literal detected", "converted automatically")


def auto_fix(text: str) -> Optional[str]:
    """Strict JSON equivalent of `text`, or None if it does not parse."""
    try:
        result = parse(text)
    except ParseError:
        return None
    return result.normalized or to_json(result.value)


# ═══════════════════════════════════════════════════════════════════
#  TWO INPUTS
# ═══════════════════════════════════════════════════════════════════

@dataclass
class AnalysisReport:
    """
    Everything the front end shows after "compare".

    For array inputs the statistics describe elements; for object inputs
    lengths count keys and there are no duplicates.  Statistics are taken
    on the inputs as parsed, before any normalization.
    """
    length_a: int
    length_b: int
    unique_a: int
    unique_b: int
    duplicates_a: list[DuplicateEntry]
    duplicates_b: list[DuplicateEntry]
    identical: bool
    same_unique_set: bool
    diff: DiffResult
    tier_a: Tier = Tier.JSON
    tier_b: Tier = Tier.JSON
    reordered: bool = False

    def to_dict(self) -> dict:
        return {
            "length_a": self.length_a,
            "length_b": self.length_b,
            "unique_a": self.unique_a,
            "unique_b": self.unique_b,
            "duplicates_a": [{"item": to_jsonable(d.item), "count": d.count} for d in self.duplicates_a],
            "duplicates_b": [{"item": to_jsonable(d.item), "count": d.count} for d in self.duplicates_b],
            "identical": self.identical,
            "same_unique_set": self.same_unique_set,
            "tier_a": self.tier_a.name.lower(),
            "tier_b": self.tier_b.name.lower(),
            "reordered": self.reordered,
            "diff": self.diff.to_dict(),
        }


def _length(v: Value) -> int:
    if isinstance(v, (VArray, VObject)):
        return len(v)
    return 1


def _statistics(a: Value, b: Value) -> dict:
    if isinstance(a, VArray) and isinstance(b, VArray):
        return {
            "length_a": len(a), "length_b": len(b),
            "unique_a": unique_count(a), "unique_b": unique_count(b),
            "duplicates_a": find_duplicates(a), "duplicates_b": find_duplicates(b),
            "identical": identical(a, b),
            "same_unique_set": same_unique_set(a, b),
        }
    equal = canonical_key(a) == canonical_key(b)
    return {
        "length_a": _length(a), "length_b": _length(b),
        "unique_a": _length(a), "unique_b": _length(b),
        "duplicates_a": find_duplicates(a) if isinstance(a, VArray) else [],
        "duplicates_b": find_duplicates(b) if isinstance(b, VArray) else [],
        "identical": equal,
        "same_unique_set": equal,
    }


@dataclass
class Comparison:
    """
    One comparison attempt.  Records the stages it went through so a
    front end can show progress or the point of failure.
    """
    text_a: str
    text_b: str
    shape: Shape = Shape.OBJECT_OR_ARRAY
    normalize: bool = False
    options: DiffOptions = DEFAULT_OPTIONS
    stage: Stage = Stage.IDLE
    history: list[Stage] = field(default_factory=lambda: [Stage.IDLE])
    failed_side: Optional[Side] = None

    def _enter(self, stage: Stage) -> None:
        self.stage = stage
        self.history.append(stage)

    def _parse_side(self, side: Side, text: str) -> ParseResult:
        try:
            return parse_as(text, self.shape)
        except ParseError as e:
            self.failed_side = side
            self._enter(Stage.PARSE_ERROR)
            logger.debug("input %s failed to parse: %s", side.value, e)
            raise ComparisonError(side, e) from e

    def run(self) -> AnalysisReport:
        if self.stage != Stage.IDLE:
            raise RuntimeError(f"comparison already ran (stage: {self.stage.value})")
        self._enter(Stage.PARSING)
        result_a = self._parse_side(Side.A, self.text_a)
        result_b = self._parse_side(Side.B, self.text_b)
        self._enter(Stage.PARSED)

        a, b = result_a.value, result_b.value
        stats = _statistics(a, b)
        reordered = False
        if self.normalize:
            a, changed_a = canonicalize(a, sort_arrays=True)
            b, changed_b = canonicalize(b, sort_arrays=True)
            reordered = changed_a or changed_b
            if reordered:
                logger.debug("inputs were reordered before comparison")

        self._enter(Stage.DIFFING)
        result = deep_diff(a, b, options=self.options)
        self._enter(Stage.RESULT)
        return AnalysisReport(
            diff=result,
            tier_a=result_a.tier,
            tier_b=result_b.tier,
            reordered=reordered,
            **stats,
        )


def compare(text_a: str, text_b: str, shape: Shape = Shape.OBJECT_OR_ARRAY,
            normalize: bool = False,
            options: DiffOptions = DEFAULT_OPTIONS) -> AnalysisReport:
    """
    Parse both inputs and compare them.

    Raises ComparisonError (a ParseError) naming side A or B when either
    input is empty, unparsable or of the wrong shape.
    """
    return Comparison(text_a, text_b, shape, normalize, options).run()
