"""In-memory query source over a sequence of mappings.

Useful for batching data that is already in memory with the same code path
as database-backed sources, and for exercising enumerators without a
database:

    source = MemoryQuerySource([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])
    for page in each_batch(source, of=1, load=True):
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from each_batch.core.pagination.config import SortOrder

if TYPE_CHECKING:
    from each_batch.core.pagination.predicate import SeekPredicate

Row = Mapping[str, Any]


@dataclass(frozen=True)
class MemoryQuerySource:
    """QuerySource evaluating queries against in-memory records.

    Records are never mutated; fetched rows are fresh dicts.

    Attributes:
        records: Source records, in any order
        primary_key: Name of the primary key field
        columns: Existing projection, or None to return every field
    """

    records: Sequence[Row]
    primary_key: str = "id"
    columns: tuple[str, ...] | None = None
    conditions: tuple[Callable[[Row], bool], ...] = field(default=(), repr=False)
    order_keys: tuple[str, ...] = ()
    sort_order: SortOrder = SortOrder.ASC
    row_limit: int | None = None
    row_offset: int = 0

    @property
    def projection_columns(self) -> tuple[str, ...] | None:
        return self.columns

    def filter(self, predicate: SeekPredicate) -> MemoryQuerySource:
        def matches(row: Row) -> bool:
            return predicate.evaluate(row.__getitem__)

        return replace(self, conditions=(*self.conditions, matches))

    def filter_primary_keys(self, values: Iterable[Any]) -> MemoryQuerySource:
        wanted = frozenset(values)
        primary_key = self.primary_key

        def matches(row: Row) -> bool:
            return row[primary_key] in wanted

        return replace(self, conditions=(*self.conditions, matches))

    def order_by(self, keys: Sequence[str], order: SortOrder | str) -> MemoryQuerySource:
        return replace(self, order_keys=tuple(keys), sort_order=SortOrder.parse(order))

    def limit(self, n: int) -> MemoryQuerySource:
        return replace(self, row_limit=n)

    def offset(self, n: int) -> MemoryQuerySource:
        return replace(self, row_offset=n)

    def disable_result_caching(self) -> MemoryQuerySource:
        # Nothing is cached: every fetch scans ``records``
        return self

    def _select(self) -> list[Row]:
        rows = [row for row in self.records if all(cond(row) for cond in self.conditions)]
        if self.order_keys:
            keys = self.order_keys
            rows.sort(
                key=lambda row: tuple(row[k] for k in keys),
                reverse=self.sort_order is SortOrder.DESC,
            )
        stop = None if self.row_limit is None else self.row_offset + self.row_limit
        return rows[self.row_offset : stop]

    def fetch_rows(self) -> list[dict[str, Any]]:
        rows = self._select()
        if self.columns is None:
            return [dict(row) for row in rows]
        return [{column: row[column] for column in self.columns} for row in rows]

    def fetch_projected(self, columns: Sequence[str]) -> list[tuple[Any, ...]]:
        return [tuple(row[column] for column in columns) for row in self._select()]

    def raw_values(self, record: Any, keys: Sequence[str]) -> tuple[Any, ...]:
        return tuple(record[key] for key in keys)


__all__ = ["MemoryQuerySource"]
