"""Keyset batch iteration over full rows.

Pages are selected with a seek condition built from the last row of the
previous page instead of an OFFSET, so every page costs the same no matter how
deep into the result set it is. The ordering keys may be any columns as long
as the primary key comes last to break ties.

Two ways of finding the next cursor:

- eager (``load=True``): the page is fetched before it is yielded, the cursor
  is read from its last record, and a short page ends the iteration. An
  empty fetch ends it without yielding.
- lazy (default): the page is yielded as an unexecuted bounded query and a
  probe query fetches only the key columns of the page's last row. No row
  means the page was the last one. Because nothing is fetched up front, an
  empty source still yields one empty page, and a row count that is an exact
  multiple of the batch size yields a trailing empty page.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from each_batch.core.pagination.config import OMITTED, BatchConfig, Omitted, SortOrder
from each_batch.core.pagination.cursor import Cursor
from each_batch.core.pagination.page import Page
from each_batch.core.pagination.plucked import PluckedBatchEnumerator
from each_batch.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from each_batch.core.database.source import QuerySource

_lazy = get_lazy_logger(__name__)


def _describe(page: Page[Any]) -> str:
    return f"{len(page.records)} records" if page.loaded else "deferred"


class BatchEnumerator:
    """Iterate over a query source in pages of at most ``batch_size`` rows.

    Example:
        enumerator = BatchEnumerator(source, of=1000, keys=["enabled_at", "id"])

        for page in enumerator:
            archive(page.source)  # lazy page: a bounded query

        for record in BatchEnumerator(source, load=True).each_record():
            ...

    Attributes:
        source: Query being iterated
        config: Validated configuration
    """

    def __init__(
        self,
        source: QuerySource,
        *,
        of: int | Omitted = OMITTED,
        load: bool = False,
        order: SortOrder | str | Omitted = OMITTED,
        keys: Iterable[str] | None = None,
    ) -> None:
        """Validate options and prepare the bounded base query.

        Args:
            source: Query to iterate over
            of: Page size (defaults to BatchSettings.default_batch_size)
            load: Fetch each page before yielding it
            order: "asc" or "desc" (defaults to BatchSettings.default_order)
            keys: Ordering keys, primary key last (defaults to the primary key)

        Raises:
            InvalidConfigurationError: If any option is rejected.
        """
        self._config = BatchConfig.for_source(source, of=of, load=load, order=order, keys=keys)
        self._source = source
        self._base = (
            source.order_by(self._config.keys, self._config.order)
            .limit(self._config.batch_size)
            .disable_result_caching()
        )

    @property
    def source(self) -> QuerySource:
        return self._source

    @property
    def config(self) -> BatchConfig:
        return self._config

    @property
    def batch_size(self) -> int:
        return self._config.batch_size

    @property
    def order(self) -> SortOrder:
        return self._config.order

    @property
    def keys(self) -> tuple[str, ...]:
        return self._config.keys

    def __iter__(self) -> Iterator[Page[Any]]:
        return self.each()

    def each(self) -> Iterator[Page[Any]]:
        """Yield pages until the cursor strategy detects the last one.

        Every call starts a new traversal from the first row.
        """
        config = self._config
        current = self._base
        page_number = 0

        while True:
            if config.load:
                page = self._load_page(current)
                if not page.records:
                    _lazy.debug(lambda: f"each_batch: stopped after {page_number} pages (empty fetch)")
                    return
            else:
                page = Page(current)

            page_number += 1
            _lazy.debug(lambda: f"each_batch: page {page_number} yielded ({_describe(page)})")
            yield page

            cursor = self._next_cursor(page, current)
            if cursor is None:
                _lazy.debug(lambda: f"each_batch: stopped after {page_number} pages")
                return

            _lazy.debug(lambda: f"each_batch: seeking after {cursor.describe()}")
            current = self._base.filter(cursor.seek_predicate(config.order))

    def _load_page(self, bounded: QuerySource) -> Page[Any]:
        """Fetch a page and wrap the records in a page restricted to them."""
        records = bounded.fetch_rows()
        primary_key = self._source.primary_key
        ids = [self._source.raw_values(record, (primary_key,))[0] for record in records]
        restricted = self._source.filter_primary_keys(ids).order_by(
            self._config.keys, self._config.order
        )
        return Page(restricted, records)

    def _next_cursor(self, page: Page[Any], bounded: QuerySource) -> Cursor | None:
        """Cursor after ``page``, or None when it was the last page."""
        keys = self._config.keys
        batch_size = self._config.batch_size

        # Eager pages, and lazy pages the caller loaded while they were yielded
        if page.loaded:
            records = page.records
            if len(records) < batch_size:
                return None
            return Cursor.from_record(self._source, records[-1], keys)

        probe = bounded.offset(batch_size - 1).limit(1).fetch_projected(keys)
        if not probe:
            return None
        return Cursor(keys=keys, values=tuple(probe[0]))

    def each_record(self) -> Iterator[Any]:
        """Yield records one at a time, loading each page."""
        for page in self.each():
            yield from page

    def pluck(self, *columns: str) -> PluckedBatchEnumerator:
        """Pluck ``columns`` in batches using this enumerator's settings.

        Args:
            *columns: Columns to pluck; must include every ordering key

        Returns:
            PluckedBatchEnumerator over the same source, order, keys and batch size

        Raises:
            InvalidConfigurationError: If a key is not among ``columns``.
        """
        return PluckedBatchEnumerator(
            self._source,
            *columns,
            of=self._config.batch_size,
            order=self._config.order,
            keys=self._config.keys,
        )


def each_batch(
    source: QuerySource,
    *,
    of: int | Omitted = OMITTED,
    load: bool = False,
    order: SortOrder | str | Omitted = OMITTED,
    keys: Iterable[str] | None = None,
) -> BatchEnumerator:
    """Build a BatchEnumerator over ``source``.

    Example:
        for page in each_batch(SelectQuerySource(session, select(User)), of=500):
            session.execute(update(User).where(User.id.in_([u.id for u in page])))
    """
    return BatchEnumerator(source, of=of, load=load, order=order, keys=keys)


__all__ = ["BatchEnumerator", "each_batch"]
