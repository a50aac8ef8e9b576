"""Page yielded by the full-row batch enumerator."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, TypeVar, overload

if TYPE_CHECKING:
    from each_batch.core.database.source import QuerySource


T = TypeVar("T")


class Page(Sequence[T]):
    """One batch of records.

    A page either wraps a bounded query that has not run yet (lazy mode) or
    records that were already fetched (eager mode). Sequence access on a lazy
    page runs its query once and keeps the result, after which the page counts
    as loaded.

    Example:
        for page in each_batch(source, of=100):
            if page.loaded:
                ...
            ids = [record.id for record in page]  # runs the page query
    """

    __slots__ = ("_records", "_source")

    def __init__(self, source: QuerySource, records: Sequence[T] | None = None) -> None:
        self._source = source
        self._records: list[T] | None = None if records is None else list(records)

    @property
    def source(self) -> QuerySource:
        """Query describing exactly the rows of this page."""
        return self._source

    @property
    def loaded(self) -> bool:
        return self._records is not None

    @property
    def records(self) -> list[T]:
        return self.load()

    def load(self) -> list[T]:
        """Fetch the page rows if that has not happened yet."""
        if self._records is None:
            self._records = list(self._source.fetch_rows())
        return self._records

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self.load()[index]

    def __len__(self) -> int:
        return len(self.load())

    def __iter__(self) -> Iterator[T]:
        return iter(self.load())

    def __repr__(self) -> str:
        if self._records is None:
            return "Page(loaded=False)"
        return f"Page(loaded=True, size={len(self._records)})"


__all__ = ["Page"]
