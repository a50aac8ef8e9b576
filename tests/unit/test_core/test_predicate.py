"""Unit tests for the composite seek predicate."""
from __future__ import annotations

import itertools

import pytest

from each_batch.core.pagination.config import SortOrder
from each_batch.core.pagination.predicate import (
    Comparison,
    SeekPredicate,
    build_seek_predicate,
)


@pytest.mark.unit
class TestBuildSeekPredicate:
    """Tests for build_seek_predicate()."""

    def test_single_key_is_plain_inequality(self):
        """One key degenerates to ``key > value``."""
        predicate = build_seek_predicate(["id"], [7], "asc")

        assert predicate.terms == ((Comparison("id", "gt", 7),),)
        assert str(predicate) == "(id > 7)"

    def test_descending_uses_less_than(self):
        """Descending order seeks with ``<``."""
        predicate = build_seek_predicate(["id"], [7], SortOrder.DESC)

        assert predicate.terms == ((Comparison("id", "lt", 7),),)

    def test_two_keys_expansion(self):
        """Two keys expand to (a > v1) OR (a = v1 AND b > v2)."""
        predicate = build_seek_predicate(["enabled_at", "id"], [5, 10], "asc")

        assert predicate.terms == (
            (Comparison("enabled_at", "gt", 5),),
            (Comparison("enabled_at", "eq", 5), Comparison("id", "gt", 10)),
        )
        assert str(predicate) == "(enabled_at > 5) OR (enabled_at = 5 AND id > 10)"

    def test_three_keys_expansion(self):
        """Each term adds one equality before the strict comparison."""
        predicate = build_seek_predicate(["a", "b", "c"], [1, 2, 3], "desc")

        assert [len(term) for term in predicate.terms] == [1, 2, 3]
        assert predicate.terms[2] == (
            Comparison("a", "eq", 1),
            Comparison("b", "eq", 2),
            Comparison("c", "lt", 3),
        )
        assert predicate.keys == ("a", "b", "c")

    def test_rejects_length_mismatch(self):
        """Keys and values must pair up."""
        with pytest.raises(ValueError, match="2 values for 1 keys"):
            build_seek_predicate(["id"], [1, 2], "asc")

    def test_rejects_empty_keys(self):
        """At least one key is required."""
        with pytest.raises(ValueError):
            build_seek_predicate([], [], "asc")

    def test_rejects_invalid_order(self):
        """Order is validated like configuration order."""
        with pytest.raises(ValueError):
            build_seek_predicate(["id"], [1], "sideways")


@pytest.mark.unit
class TestSeekPredicateEvaluate:
    """SeekPredicate.evaluate() must match lexicographic tuple comparison."""

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_matches_tuple_comparison(self, order):
        """Every row of a small grid agrees with Python tuple ordering."""
        grid = list(itertools.product(range(3), range(3), range(3)))
        keys = ["a", "b", "id"]

        for cursor in grid:
            predicate = build_seek_predicate(keys, cursor, order)
            for row in grid:
                values = dict(zip(keys, row, strict=True))
                expected = row > cursor if order == "asc" else row < cursor
                assert predicate.evaluate(values.__getitem__) is expected, (cursor, row)

    def test_row_equal_to_cursor_is_excluded(self):
        """The cursor row itself is never selected again."""
        predicate = build_seek_predicate(["a", "id"], [1, 1], "asc")

        assert predicate.evaluate({"a": 1, "id": 1}.__getitem__) is False

    def test_tied_leading_key_uses_next_key(self):
        """Rows tying on the leading key are decided by the tie-breaker."""
        predicate = build_seek_predicate(["a", "id"], [1, 5], "asc")

        assert predicate.evaluate({"a": 1, "id": 6}.__getitem__) is True
        assert predicate.evaluate({"a": 1, "id": 4}.__getitem__) is False
        # Independent per-column filters (a >= 1 AND id > 5) would drop this row
        assert predicate.evaluate({"a": 2, "id": 1}.__getitem__) is True

    def test_is_hashable_value(self):
        """Predicates are frozen values."""
        first = build_seek_predicate(["id"], [1], "asc")
        second = SeekPredicate(terms=((Comparison("id", "gt", 1),),))

        assert first == second
        assert hash(first) == hash(second)
