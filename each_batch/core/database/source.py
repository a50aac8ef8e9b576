"""Query source protocol.

Enumerators never build or run queries themselves. Everything they need from
the data store goes through a QuerySource: an immutable description of an
ordered query that returns a new source for every refinement and executes
only when one of the ``fetch_*`` methods is called.

Any class implementing these members is compatible; no inheritance needed.
Errors raised by a source propagate to the enumerator's caller unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from each_batch.core.pagination.config import SortOrder
    from each_batch.core.pagination.predicate import SeekPredicate


@runtime_checkable
class QuerySource(Protocol):
    """Protocol for ordered, composable queries."""

    @property
    def primary_key(self) -> str:
        """Name of the primary key column."""
        ...

    @property
    def projection_columns(self) -> tuple[str, ...] | None:
        """Columns the query is already restricted to, or None for full rows."""
        ...

    def filter(self, predicate: SeekPredicate) -> Self:
        """Restrict to rows matching a seek predicate."""
        ...

    def filter_primary_keys(self, values: Iterable[Any]) -> Self:
        """Restrict to rows whose primary key is one of ``values``."""
        ...

    def order_by(self, keys: Sequence[str], order: SortOrder) -> Self:
        """Replace any existing ordering with ``keys`` in one direction."""
        ...

    def limit(self, n: int) -> Self:
        ...

    def offset(self, n: int) -> Self:
        ...

    def disable_result_caching(self) -> Self:
        """Make every fetch read current data instead of cached results."""
        ...

    def fetch_rows(self) -> list[Any]:
        """Execute the query and return its records in order."""
        ...

    def fetch_projected(self, columns: Sequence[str]) -> list[tuple[Any, ...]]:
        """Execute the query returning only ``columns`` as tuples, in order."""
        ...

    def raw_values(self, record: Any, keys: Sequence[str]) -> tuple[Any, ...]:
        """Stored values of ``keys`` in a record returned by fetch_rows()."""
        ...


__all__ = ["QuerySource"]
