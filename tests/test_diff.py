"""
Tests for deep_diff — the recursive, path-addressed comparator.

    §1  Scalars
    §2  Objects
    §3  Bag mode (arrays of scalars)
    §4  Structural mode (arrays holding composites)
    §5  Global properties (idempotence, partition, determinism)
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from structdiff.core import NAN, NULL, UNDEFINED, VArray, VNumber, canonical_key
from structdiff.diff import (
    DiffKind, DiffOptions, DiffResult, deep_diff, similarity,
)
from structdiff.formats import from_python, to_python


def _d(a, b, **kwargs) -> DiffResult:
    return deep_diff(from_python(a), from_python(b), **kwargs)


def _pairs(entries) -> list:
    """(path, python value) for added / removed / same entries."""
    return [(e.path, to_python(e.value)) for e in entries]


def _changes(entries) -> list:
    return [(e.path, to_python(e.old), to_python(e.new)) for e in entries]


def _values(entries) -> list:
    return [to_python(e.value) for e in entries]


# ═══════════════════════════════════════════════════════════════════
#  §1  SCALARS
# ═══════════════════════════════════════════════════════════════════

class TestScalars:

    def test_equal_root(self):
        r = _d(1, 1.0)
        assert _pairs(r.same) == [("(root)", 1)]
        assert r.is_identical

    def test_changed_root(self):
        r = _d("a", "b")
        assert _changes(r.changed) == [("(root)", "a", "b")]
        assert r.changed[0].kind == DiffKind.CHANGED

    def test_undefined_is_not_null(self):
        r = deep_diff(UNDEFINED, NULL)
        assert len(r.changed) == 1

    def test_nan_equals_nan(self):
        r = deep_diff(NAN, NAN)
        assert len(r.same) == 1

    def test_kind_mismatch_is_a_change(self):
        r = _d([1], {"a": 1})
        assert len(r.changed) == 1
        assert r.changed[0].path == "(root)"

    def test_explicit_path(self):
        r = _d(1, 2, path="cfg.port")
        assert r.changed[0].path == "cfg.port"


# ═══════════════════════════════════════════════════════════════════
#  §2  OBJECTS
# ═══════════════════════════════════════════════════════════════════

class TestObjects:

    def test_added_removed_same(self):
        r = _d({"x": 1, "y": 2}, {"x": 1, "z": 3})
        assert _pairs(r.removed) == [("y", 2)]
        assert _pairs(r.added) == [("z", 3)]
        assert r.changed == []
        assert _pairs(r.same) == [("x", 1)]

    def test_nested_paths(self):
        r = _d({"a": {"b": {"c": 1}}}, {"a": {"b": {"c": 2}}})
        assert _changes(r.changed) == [("a.b.c", 1, 2)]

    def test_whole_subtree_added(self):
        r = _d({}, {"cfg": {"debug": True}})
        assert _pairs(r.added) == [("cfg", {"debug": True})]

    def test_key_order_irrelevant(self):
        r = _d({"a": 1, "b": 2}, {"b": 2, "a": 1})
        assert r.is_identical

    def test_enumeration_order(self):
        r = _d({"b": 1, "a": 1}, {"c": 1, "a": 2, "b": 1})
        all_paths = [e.path for e in r.same + r.changed + r.added]
        assert all_paths == ["b", "a", "c"]

    def test_empty_objects(self):
        r = _d({}, {})
        assert r.is_identical
        assert _pairs(r.same) == [("(root)", {})]


# ═══════════════════════════════════════════════════════════════════
#  §3  BAG MODE
# ═══════════════════════════════════════════════════════════════════

class TestBagMode:

    def test_duplicate_aware_counts(self):
        r = _d([1, 2, 2, 3], [2, 3, 3, 4])
        assert _values(r.same) == [2, 3]
        assert _values(r.removed) == [1, 2]
        assert _values(r.added) == [3, 4]
        assert r.changed == []

    def test_order_independent(self):
        assert _d([1, 2, 3], [3, 1, 2]).is_identical

    def test_synthetic_paths(self):
        r = _d([1, 2, 2, 3], [2, 3, 3, 4], path="tags")
        paths = [e.path for e in r.same + r.removed + r.added]
        assert all(p.startswith("tags[#") for p in paths)
        assert len(set(paths)) == len(paths)

    def test_synthetic_paths_are_not_positions(self):
        r = _d(["a"], ["b"])
        assert r.removed[0].path == "[#0]"
        assert r.added[0].path == "[#1]"

    def test_empty_vs_nonempty(self):
        r = _d([], [1, 1])
        assert _values(r.added) == [1, 1]

    def test_specials_as_scalars(self):
        r = deep_diff(VArray((NULL,)), VArray((UNDEFINED, NULL)))
        assert _values(r.same) == [None]
        assert [e.value for e in r.added] == [UNDEFINED]

    def test_empty_arrays(self):
        r = _d([], [])
        assert _pairs(r.same) == [("(root)", [])]


# ═══════════════════════════════════════════════════════════════════
#  §4  STRUCTURAL MODE
# ═══════════════════════════════════════════════════════════════════

class TestStructuralMode:

    def test_identity_key_forces_pairing(self):
        r = _d([{"id": 1, "name": "a"}], [{"id": 1, "name": "b"}])
        assert _changes(r.changed) == [("[0].name", "a", "b")]
        assert _pairs(r.same) == [("[0].id", 1)]
        assert r.added == [] and r.removed == []

    def test_reordered_records(self):
        a = [{"id": 1, "v": "x"}, {"id": 2, "v": "y"}]
        b = [{"id": 2, "v": "y"}, {"id": 1, "v": "z"}]
        r = _d(a, b)
        assert _changes(r.changed) == [("[0].v", "x", "z")]
        assert r.added == [] and r.removed == []
        assert {e.path for e in r.same} == {"[1].id", "[1].v", "[0].id"}

    def test_bonus_outweighs_shared_keys(self):
        a = [{"id": 1, "x": 1}]
        b = [{"id": 2, "x": 1, "y": 1, "z": 1}, {"id": 1, "q": 5}]
        r = _d(a, b)
        assert _pairs(r.same) == [("[0].id", 1)]
        assert [e.path for e in r.removed] == ["[0].x"]
        assert [e.path for e in r.added] == ["[0].q", "[0]"]
        assert to_python(r.added[1].value) == b[0]

    def test_ties_go_to_earliest_candidate(self):
        r = _d([{"a": 1}], [{"a": 2}, {"a": 3}])
        assert _changes(r.changed) == [("[0].a", 1, 2)]
        assert _pairs(r.added) == [("[1]", {"a": 3})]

    def test_arrays_pair_by_positional_agreement(self):
        r = _d([[1, 2, 3]], [[9, 9, 9], [1, 2, 4]])
        assert _values(r.removed) == [3]
        assert 4 in _values(r.added)
        assert [9, 9, 9] in _values(r.added)

    def test_extra_record_removed(self):
        r = _d([{"id": 1}, {"id": 2}], [{"id": 1}])
        assert _pairs(r.same) == [("[0].id", 1)]
        assert _pairs(r.removed) == [("[1]", {"id": 2})]

    def test_extra_record_added(self):
        r = _d([{"id": 1}], [{"id": 1}, {"id": 2}])
        assert _pairs(r.added) == [("[1]", {"id": 2})]

    def test_leftover_scalars_at_same_index_become_a_change(self):
        r = _d([{"a": 1}, "x"], [{"a": 1}, "y"])
        assert _changes(r.changed) == [("[1]", "x", "y")]
        assert r.added == [] and r.removed == []

    def test_exact_matches_report_leaf_paths(self):
        r = _d([{"a": {"b": 1}}, 5], [5, {"a": {"b": 1}}])
        assert r.is_identical
        assert sorted(e.path for e in r.same) == ["[0].a.b", "[1]"]

    def test_custom_identity_keys(self):
        a = [{"sku": "A1", "n": 1, "m": 1}]
        b = [{"sku": "B", "n": 1, "m": 1}, {"sku": "A1"}]

        default = _d(a, b)
        assert _changes(default.changed) == [("[0].sku", "A1", "B")]

        by_sku = _d(a, b, options=DiffOptions(identity_keys=("sku",)))
        assert _pairs(by_sku.same) == [("[0].sku", "A1")]
        assert [e.path for e in by_sku.removed] == ["[0].n", "[0].m"]
        assert [e.path for e in by_sku.added] == ["[0]"]

    def test_objects_never_pair_with_arrays(self):
        r = _d([{"a": 1}], [[1]])
        assert r.changed and r.changed[0].path == "[0]"


class TestSimilarity:

    def test_object_score(self):
        x = from_python({"id": 1, "name": "a", "v": 1})
        y = from_python({"id": 1, "name": "b", "w": 1})
        # shared: id, name; bonus: id
        assert similarity(x, y) == 2 + 10

    def test_array_score(self):
        assert similarity(from_python([1, 2, 3]), from_python([1, 0, 3, 4])) == 2

    def test_mixed_kinds_score_zero(self):
        assert similarity(from_python([1]), from_python({"a": 1})) == 0


# ═══════════════════════════════════════════════════════════════════
#  §5  GLOBAL PROPERTIES
# ═══════════════════════════════════════════════════════════════════

DOCUMENTS = [
    {"a": [1, 2, {"b": None}], "c": {"d": "x"}, "e": []},
    [{"id": 1, "tags": ["x", "y", "y"]}, {"id": 2, "tags": []}, 3, "s"],
    {"matrix": [[1, 2], [3, 4]], "flags": [True, False, True]},
    [[], {}, [[]], [{}]],
]


class TestProperties:

    @pytest.mark.parametrize("doc", DOCUMENTS)
    def test_idempotence(self, doc):
        r = _d(doc, doc)
        assert r.added == [] and r.removed == [] and r.changed == []
        assert len(r.same) > 0

    def test_idempotence_reports_every_leaf(self):
        r = _d(DOCUMENTS[0], DOCUMENTS[0])
        assert {e.path for e in r.same} == {"a[0]", "a[1]", "a[2].b", "c.d", "e"}

    @pytest.mark.parametrize("a,b", [
        (DOCUMENTS[0], DOCUMENTS[2]),
        (DOCUMENTS[1], DOCUMENTS[3]),
        ([{"a": 1}, 1, 2], [2, {"a": 2}, "q", "r"]),
        ([[1], "x", "y"], [["z"], 7]),
    ])
    def test_no_path_both_added_and_removed(self, a, b):
        r = _d(a, b)
        assert not ({e.path for e in r.added} & {e.path for e in r.removed})

    def test_deterministic(self):
        a, b = DOCUMENTS[1], list(reversed(DOCUMENTS[1]))
        assert _d(a, b).to_dict() == _d(a, b).to_dict()

    def test_items_presentation_order(self):
        r = _d({"x": 1, "y": 2, "k": 0}, {"x": 2, "z": 3, "k": 0})
        kinds = [e.kind for e in r.items()]
        assert kinds == [DiffKind.CHANGED, DiffKind.ADDED, DiffKind.REMOVED]
        assert r.items(include_same=True)[-1].kind == DiffKind.SAME

    def test_counts_and_to_dict(self):
        r = _d({"x": 1}, {"x": 2})
        assert r.counts() == {"added": 0, "removed": 0, "changed": 1, "same": 0}
        assert r.to_dict()["changed"] == [{"path": "x", "from": 1, "to": 2}]

    def test_entry_repr(self):
        r = _d({"x": 1}, {"x": 2})
        assert repr(r.changed[0]) == "CHANGED at x: 1 → 2"

    def test_equal_values_compare_by_canonical_key(self):
        r = deep_diff(VNumber(1), VNumber(1.0))
        assert canonical_key(r.same[0].value) == "1"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
