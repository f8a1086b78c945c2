"""
Benchmark: structdiff on realistic inputs, and next to existing diff tools.

    1. Config diff — nested objects, a handful of edited leaves
    2. Reordered record lists — where content alignment pays off
    3. Parser tiers — cost of strict JSON vs relaxed vs literal grammar
    4. deepdiff / dictdiffer (when installed) on the same inputs
    5. Scaling with array and object size

The point is NOT "we're faster" — the point is:
    a reordered list with one edited field reports ONE change.
"""

import json
import sys
import os
import random
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from structdiff.analysis import compare
from structdiff.diff import deep_diff
from structdiff.formats import from_python
from structdiff.parse import parse


# ═══════════════════════════════════════════════════════════════════
#  TEST DATA
# ═══════════════════════════════════════════════════════════════════

CONFIG_A = {
    "server": {
        "host": "0.0.0.0",
        "port": 443,
        "tls": True,
        "workers": 4,
    },
    "database": {
        "host": "db.internal",
        "port": 5432,
        "name": "production",
        "pool_size": 10,
    },
    "logging": {
        "level": "WARN",
        "outputs": ["stdout", "file"],
    },
}

CONFIG_B = {
    "server": {
        "host": "0.0.0.0",
        "port": 8080,         # Changed
        "tls": False,         # Changed
        "workers": 4,
    },
    "database": {
        "host": "db.internal",
        "port": 5432,
        "name": "production",
        "pool_size": 20,      # Changed
        "replica": "db-ro",   # Added
    },
    "logging": {
        "level": "WARN",
        "outputs": ["file", "stdout", "syslog"],  # Reordered + added
    },
}

USERS_A = [
    {"id": i, "name": f"user{i}", "role": "member", "active": True}
    for i in range(1, 21)
]

# Same records, shuffled, with one edited field and one removal.
random.seed(7)
USERS_B = [dict(u) for u in USERS_A if u["id"] != 13]
USERS_B[4]["role"] = "admin"
random.shuffle(USERS_B)

LITERAL_TEXT = """
// exported from the browser console
[
  {id: 1, name: 'alpha', score: NaN, tags: ['a', 'b',],},
  {id: 2, name: 'beta', score: Infinity, extra: undefined},
  {id: 3, name: `gamma`, score: 0x10, tags: [,'c']},
]
"""


def _try_import(name):
    """Safely attempt to import an optional dependency by name."""
    import importlib
    try:
        return importlib.import_module(name)
    except ImportError:
        return None


def _timed(fn, *args, repeat=20, **kwargs):
    """Run fn repeatedly; return (last result, best time in seconds)."""
    best = float("inf")
    result = None
    for _ in range(repeat):
        t0 = time.perf_counter()
        result = fn(*args, **kwargs)
        best = min(best, time.perf_counter() - t0)
    return result, best


# ═══════════════════════════════════════════════════════════════════
#  BENCHMARKS
# ═══════════════════════════════════════════════════════════════════

def benchmark_config_diff():
    """Nested objects with a few edited leaves."""
    print("=" * 70)
    print("  §1  CONFIG DIFF (realistic use case)")
    print("=" * 70)
    print()

    a = from_python(CONFIG_A)
    b = from_python(CONFIG_B)
    result, dt = _timed(deep_diff, a, b)

    for entry in result.items():
        print(f"    {entry!r}")
    print()
    c = result.counts()
    print(f"  changed={c['changed']} added={c['added']} removed={c['removed']} same={c['same']}")
    print(f"  Time: {dt*1000:.3f}ms")
    print()


def benchmark_reordered_records():
    """A shuffled list of records with one edit and one removal."""
    print("=" * 70)
    print("  §2  REORDERED RECORD LIST")
    print("=" * 70)
    print()

    a = from_python(USERS_A)
    b = from_python(USERS_B)
    result, dt = _timed(deep_diff, a, b)

    c = result.counts()
    ok = c["changed"] == 1 and c["removed"] == 1 and c["added"] == 0
    mark = "✓" if ok else "✗"
    print(f"  {mark} {len(USERS_A)} records vs {len(USERS_B)} shuffled")
    for entry in result.items():
        print(f"    {entry!r}")
    print(f"  Time: {dt*1000:.3f}ms")
    print()


def benchmark_parser_tiers():
    """What each tier costs on the same document."""
    print("=" * 70)
    print("  §3  PARSER TIERS")
    print("=" * 70)
    print()

    value = parse(LITERAL_TEXT).value
    strict_text = json.dumps(json.loads(parse(LITERAL_TEXT).normalized))
    relaxed_text = strict_text.replace('"id"', "id").replace('"name"', "name")

    for label, text in (("strict JSON", strict_text),
                        ("relaxed", relaxed_text),
                        ("literal", LITERAL_TEXT)):
        result, dt = _timed(parse, text, repeat=200)
        print(f"  {label:<12} tier={result.tier.name:<8} time={dt*1e6:>8.1f}µs")

    print()
    print(f"  Literal document kept {len(value)} records with NaN / Infinity / undefined intact.")
    print()


def benchmark_vs_deepdiff():
    """Compare with deepdiff / dictdiffer (if available)."""
    print("=" * 70)
    print("  §4  COMPARISON WITH EXISTING TOOLS")
    print("=" * 70)
    print()

    deepdiff = _try_import("deepdiff")
    dictdiffer = _try_import("dictdiffer")

    result, sd_time = _timed(deep_diff, from_python(USERS_A), from_python(USERS_B))
    c = result.counts()
    print(f"  structdiff:")
    print(f"    Entries:        {c['changed'] + c['added'] + c['removed']} "
          f"(changed={c['changed']} added={c['added']} removed={c['removed']})")
    print(f"    Time:           {sd_time*1000:.3f}ms")
    print()

    if deepdiff:
        dd_result, dd_time = _timed(deepdiff.DeepDiff, USERS_A, USERS_B, repeat=5)
        dd_changes = sum(len(v) if hasattr(v, "__len__") else 1
                         for v in dd_result.values())
        dd_loose, _ = _timed(deepdiff.DeepDiff, USERS_A, USERS_B,
                             ignore_order=True, repeat=1)
        dd_unordered = sum(len(v) if hasattr(v, "__len__") else 1
                           for v in dd_loose.values())
        print(f"  deepdiff:")
        print(f"    Changes found:  {dd_changes} (positional), "
              f"{dd_unordered} (ignore_order=True)")
        print(f"    Time:           {dd_time*1000:.3f}ms")
    else:
        print(f"  deepdiff:         NOT INSTALLED (pip install deepdiff)")
    print()

    if dictdiffer:
        dl_diffs, dl_time = _timed(lambda: list(dictdiffer.diff(USERS_A, USERS_B)), repeat=5)
        print(f"  dictdiffer:")
        print(f"    Diffs found:    {len(dl_diffs)} (positional)")
        print(f"    Time:           {dl_time*1000:.3f}ms")
    else:
        print(f"  dictdiffer:       NOT INSTALLED (pip install dictdiffer)")
    print()

    print("  KEY INSIGHT:")
    print("    Positional tools see a shuffled list as dozens of changes.")
    print("    structdiff aligns records by content and identity keys first,")
    print("    so the report is the edit that was actually made.")
    print()


def benchmark_scaling():
    """How deep_diff scales with data size."""
    print("=" * 70)
    print("  §5  SCALING")
    print("=" * 70)
    print()

    for n in [10, 100, 1000, 10000]:
        a = from_python(list(range(n)))
        b = from_python(list(range(1, n + 1)))  # Shifted by 1
        result, dt = _timed(deep_diff, a, b, repeat=3)
        print(f"  Scalar array {n:>6}: same={len(result.same):>6}  time={dt*1000:>8.2f}ms")

    print()

    for n in [10, 50, 100, 200]:
        a = from_python([{"id": i, "v": i} for i in range(n)])
        b = from_python([{"id": i, "v": i + (i % 2)} for i in reversed(range(n))])
        result, dt = _timed(deep_diff, a, b, repeat=3)
        print(f"  Record array {n:>6}: changed={len(result.changed):>5}  time={dt*1000:>8.2f}ms")

    print()

    for n in [10, 100, 1000]:
        a = {f"key_{i}": i for i in range(n)}
        b = {f"key_{i}": i + 1 for i in range(n)}
        text_a, text_b = json.dumps(a), json.dumps(b)
        report, dt = _timed(compare, text_a, text_b, repeat=3)
        print(f"  Object keys  {n:>6}: changed={len(report.diff.changed):>5}  time={dt*1000:>8.2f}ms")

    print()


def main():
    print()
    print("╔══════════════════════════════════════════════════════════════════════╗")
    print("║          STRUCTURAL JSON DIFF — BENCHMARK SUITE                      ║")
    print("║          structdiff v0.1.0                                           ║")
    print("╚══════════════════════════════════════════════════════════════════════╝")
    print()

    benchmark_config_diff()
    benchmark_reordered_records()
    benchmark_parser_tiers()
    benchmark_vs_deepdiff()
    benchmark_scaling()


if __name__ == "__main__":
    main()
