"""Statement filters for SQLAlchemy selects.

Small helpers that each modify a ``Select`` and return the new statement,
used by SelectQuerySource to apply ordering, bounds and seek conditions.

Usage:
    from sqlalchemy import select
    from each_batch.core.database.filters import OrderBy, LimitOffset

    stmt = select(User)
    stmt = OrderBy([User.created_at, User.id], "desc").apply(stmt)
    stmt = LimitOffset(limit=50).apply(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import Select, and_, false, or_

from each_batch.core.pagination.predicate import OPERATORS

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from each_batch.core.pagination.predicate import Comparison, SeekPredicate


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which modifies a SQLAlchemy statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            Modified select statement
        """
        ...


class OrderBy(StatementFilter):
    """Replace the ordering of a statement.

    Any ORDER BY already present is discarded, so the keyset ordering is the
    only one in effect.

    Example:
        stmt = OrderBy([User.enabled_at, User.id], "desc").apply(stmt)
        # ORDER BY enabled_at DESC, id DESC
    """

    def __init__(
        self,
        fields: Sequence[ColumnElement[Any]],
        sort_order: Literal["asc", "desc"] = "asc",
    ):
        self.fields = list(fields)
        self.sort_order = sort_order

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply ordering to statement."""
        if self.sort_order == "desc":
            clauses = [field.desc() for field in self.fields]
        else:
            clauses = [field.asc() for field in self.fields]
        return statement.order_by(None).order_by(*clauses)


class LimitOffset(StatementFilter):
    """LIMIT and OFFSET bounds; a None bound leaves the statement's own.

    Example:
        # Probe the last row of a 50-row page
        stmt = LimitOffset(limit=1, offset=49).apply(stmt)
    """

    def __init__(self, limit: int | None = None, offset: int | None = None):
        """Initialize bounds.

        Args:
            limit: Maximum number of results
            offset: Number of results to skip
        """
        self.limit = limit
        self.offset = offset

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply bounds to statement."""
        if self.limit is not None:
            statement = statement.limit(self.limit)
        if self.offset is not None:
            statement = statement.offset(self.offset)
        return statement


class CollectionFilter(StatementFilter):
    """Filter by collection (WHERE ... IN).

    Example:
        stmt = CollectionFilter(User.id, [1, 2, 3]).apply(stmt)
        # WHERE user.id IN (1, 2, 3)
    """

    def __init__(self, field: ColumnElement[Any], values: Sequence[Any]):
        self.field = field
        self.values = list(values)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply collection filter to statement."""
        if not self.values:
            # Empty collection - return statement that matches nothing
            return statement.where(false())
        return statement.where(self.field.in_(self.values))


class SeekFilter(StatementFilter):
    """Compile a SeekPredicate into a WHERE clause.

    For keys (a, b, c), ascending, with cursor (v1, v2, v3):
        (a > v1) OR
        (a = v1 AND b > v2) OR
        (a = v1 AND b = v2 AND c > v3)

    A single key compiles to the plain inequality ``a > v1``.

    Example:
        predicate = build_seek_predicate(["enabled_at", "id"], cursor, "asc")
        stmt = SeekFilter(predicate, resolve=lambda key: getattr(Widget, key)).apply(stmt)
    """

    def __init__(
        self,
        predicate: SeekPredicate,
        resolve: Callable[[str], ColumnElement[Any]] | Mapping[str, ColumnElement[Any]],
    ):
        """Initialize seek filter.

        Args:
            predicate: Seek predicate to compile
            resolve: Maps a key to its column, as a callable or a mapping
        """
        self.predicate = predicate
        self.resolve = resolve.__getitem__ if isinstance(resolve, Mapping) else resolve

    def _compile_comparison(self, comparison: Comparison) -> ColumnElement[Any]:
        column = self.resolve(comparison.key)
        return OPERATORS[comparison.operator](column, comparison.value)

    def clause(self) -> ColumnElement[Any]:
        """Build the OR-of-ANDs clause without applying it."""
        terms = []
        for term in self.predicate.terms:
            comparisons = [self._compile_comparison(c) for c in term]
            terms.append(comparisons[0] if len(comparisons) == 1 else and_(*comparisons))
        return terms[0] if len(terms) == 1 else or_(*terms)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply seek condition to statement."""
        return statement.where(self.clause())


__all__ = [
    "CollectionFilter",
    "LimitOffset",
    "OrderBy",
    "SeekFilter",
    "StatementFilter",
]
