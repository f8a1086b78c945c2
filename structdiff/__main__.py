"""
Command-line front end:

    python -m structdiff left.json right.js
    cat left.json | python -m structdiff - right.json --shape array

Exit status: 0 identical, 1 differences found, 2 an input failed to parse.
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from .analysis import AnalysisReport, ComparisonError, compare
from .diff import DiffKind
from .formats import display
from .log import configure_logging
from .parse import Shape

_LABELS = {
    DiffKind.CHANGED: "CHANGED",
    DiffKind.ADDED: "ADDED  ",
    DiffKind.REMOVED: "REMOVED",
    DiffKind.SAME: "SAME   ",
}


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _print_report(report: AnalysisReport, show_same: bool) -> None:
    print(f"  A: {report.length_a} items ({report.unique_a} unique), parsed as {report.tier_a.name.lower()}")
    print(f"  B: {report.length_b} items ({report.unique_b} unique), parsed as {report.tier_b.name.lower()}")
    for side, dups in (("A", report.duplicates_a), ("B", report.duplicates_b)):
        for dup in dups:
            print(f"  duplicate in {side}: {display(dup.item, summarize=True)} ×{dup.count}")
    if report.reordered:
        print("  note: inputs were reordered before comparison")
    if report.identical:
        print("  identical")
    elif report.same_unique_set:
        print("  same unique elements, different order or multiplicity")

    counts = report.diff.counts()
    print(f"  changed={counts['changed']} added={counts['added']} "
          f"removed={counts['removed']} same={counts['same']}")
    print()
    for entry in report.diff.items(include_same=show_same):
        label = _LABELS[entry.kind]
        if entry.kind == DiffKind.CHANGED:
            print(f"{label} {entry.path}: {display(entry.old)} → {display(entry.new)}")
        else:
            print(f"{label} {entry.path}: {display(entry.value)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structdiff",
        description="Compare two JSON / JavaScript literal documents.",
    )
    parser.add_argument("a", help="first input file, or - for stdin")
    parser.add_argument("b", help="second input file, or - for stdin")
    parser.add_argument("--shape", choices=[s.value for s in (Shape.ARRAY, Shape.OBJECT_OR_ARRAY)],
                        default=Shape.OBJECT_OR_ARRAY.value,
                        help="required top-level shape (default: object-or-array)")
    parser.add_argument("--normalize", action="store_true",
                        help="sort object keys and array elements before comparing")
    parser.add_argument("--show-same", action="store_true", help="also list unchanged values")
    parser.add_argument("--json", action="store_true", help="print the full report as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="log parsing and alignment decisions")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.a == "-" and args.b == "-":
        print("error: only one input can be read from stdin", file=sys.stderr)
        return 2

    try:
        text_a, text_b = _read(args.a), _read(args.b)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        report = compare(text_a, text_b, Shape(args.shape), normalize=args.normalize)
    except ComparisonError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_report(report, args.show_same)
    return 0 if report.diff.is_identical else 1


if __name__ == "__main__":
    sys.exit(main())
