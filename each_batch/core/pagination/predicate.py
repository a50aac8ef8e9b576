"""Composite seek predicate.

Selects the rows ordered strictly after a cursor. For ordering keys
(k1, ..., kn) and cursor values (v1, ..., vn) the predicate is

    (k1 op v1) OR
    (k1 = v1 AND k2 op v2) OR
    ...
    (k1 = v1 AND ... AND k(n-1) = v(n-1) AND kn op vn)

where ``op`` is ``>`` for ascending and ``<`` for descending order. This is the
lexicographic comparison ``(k1, ..., kn) op (v1, ..., vn)`` spelled out term by
term, so rows whose leading keys tie with the cursor are neither skipped nor
returned twice.

The predicate is a plain value. Query sources decide how to apply it:
``SeekFilter`` compiles it into a SQLAlchemy clause and ``MemoryQuerySource``
calls ``evaluate`` on each record.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from each_batch.core.pagination.config import SortOrder

ComparisonOperator = Literal["gt", "lt", "eq"]

OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "gt": operator.gt,
    "lt": operator.lt,
    "eq": operator.eq,
}

_SYMBOLS = {"gt": ">", "lt": "<", "eq": "="}


@dataclass(frozen=True, slots=True)
class Comparison:
    """Single ``key <operator> value`` test."""

    key: str
    operator: ComparisonOperator
    value: Any

    def evaluate(self, lookup: Callable[[str], Any]) -> bool:
        return bool(OPERATORS[self.operator](lookup(self.key), self.value))

    def __str__(self) -> str:
        return f"{self.key} {_SYMBOLS[self.operator]} {self.value!r}"


@dataclass(frozen=True, slots=True)
class SeekPredicate:
    """Disjunction of conjunctions of comparisons.

    Attributes:
        terms: OR-ed terms; every term is a tuple of AND-ed comparisons
    """

    terms: tuple[tuple[Comparison, ...], ...]

    def evaluate(self, lookup: Callable[[str], Any]) -> bool:
        """Check a row, reading column values through ``lookup``."""
        return any(
            all(comparison.evaluate(lookup) for comparison in term)
            for term in self.terms
        )

    @property
    def keys(self) -> tuple[str, ...]:
        """Keys in comparison order (taken from the last, longest term)."""
        return tuple(comparison.key for comparison in self.terms[-1])

    def __str__(self) -> str:
        return " OR ".join(
            "(" + " AND ".join(str(c) for c in term) + ")" for term in self.terms
        )


def build_seek_predicate(
    keys: Sequence[str],
    values: Sequence[Any],
    order: SortOrder | str,
) -> SeekPredicate:
    """Build the predicate matching rows after ``values`` in key order.

    Args:
        keys: Ordering keys, most significant first
        values: Cursor values, one per key
        order: Direction shared by all keys

    Returns:
        SeekPredicate with one term per key

    Raises:
        ValueError: If keys is empty or keys and values differ in length

    Example:
        >>> str(build_seek_predicate(["enabled_at", "id"], [5, 10], "asc"))
        '(enabled_at > 5) OR (enabled_at = 5 AND id > 10)'
    """
    if not keys:
        raise ValueError("At least one key is required")
    if len(keys) != len(values):
        raise ValueError(
            f"Cursor has {len(values)} values for {len(keys)} keys"
        )

    op = SortOrder.parse(order).comparison
    terms = []
    for i, (key, value) in enumerate(zip(keys, values, strict=True)):
        # Equality on every preceding key, then the strict comparison on this one
        equalities = tuple(
            Comparison(prev_key, "eq", prev_value)
            for prev_key, prev_value in zip(keys[:i], values[:i], strict=True)
        )
        terms.append((*equalities, Comparison(key, op, value)))

    return SeekPredicate(terms=tuple(terms))


__all__ = [
    "Comparison",
    "ComparisonOperator",
    "SeekPredicate",
    "build_seek_predicate",
]
