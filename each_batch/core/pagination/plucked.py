"""Batches of plucked column values.

Each page is fetched eagerly as tuples of the requested columns. The cursor is
read straight from the last tuple, so no probe query is needed, and an empty
fetch ends the iteration without yielding anything.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from each_batch.core.pagination.config import OMITTED, Omitted, PluckConfig, SortOrder
from each_batch.core.pagination.cursor import Cursor
from each_batch.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from each_batch.core.database.source import QuerySource

_lazy = get_lazy_logger(__name__)


class PluckedBatchEnumerator:
    """Iterate over pages of plucked values.

    Pages are lists of tuples, one value per plucked column, or lists of bare
    values when a single column is plucked.

    Example:
        enumerator = PluckedBatchEnumerator(source, "id", "email", of=500)
        for page in enumerator:
            send_invites(page)  # [(1, "a@example.com"), (2, "b@example.com"), ...]

        for user_id in pluck_batches(source, "id").each_row():
            ...
    """

    def __init__(
        self,
        source: QuerySource,
        *columns: str,
        of: int | Omitted = OMITTED,
        order: SortOrder | str | Omitted = OMITTED,
        keys: Iterable[str] | None = None,
    ) -> None:
        """Validate options.

        Args:
            source: Query to iterate over
            *columns: Columns to pluck; must include every ordering key
            of: Page size (defaults to BatchSettings.default_batch_size)
            order: "asc" or "desc" (defaults to BatchSettings.default_order)
            keys: Ordering keys, primary key last (defaults to the primary key)

        Raises:
            InvalidConfigurationError: If any option is rejected.
        """
        self._config = PluckConfig.for_source(source, columns, of=of, order=order, keys=keys)
        self._source = source
        self._key_indices = self._config.key_indices
        self._base = (
            source.order_by(self._config.keys, self._config.order)
            .limit(self._config.batch_size)
            .disable_result_caching()
        )

    @property
    def source(self) -> QuerySource:
        return self._source

    @property
    def config(self) -> PluckConfig:
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

    @property
    def columns(self) -> tuple[str, ...]:
        return self._config.columns

    def __iter__(self) -> Iterator[list[Any]]:
        return self.each()

    def each(self) -> Iterator[list[Any]]:
        """Yield pages of plucked rows until a short or empty fetch."""
        config = self._config
        single_column = len(config.columns) == 1
        current = self._base
        page_number = 0

        while True:
            rows = current.fetch_projected(config.columns)
            if not rows:
                _lazy.debug(lambda: f"pluck: stopped after {page_number} pages (empty fetch)")
                return

            page_number += 1
            _lazy.debug(lambda: f"pluck: page {page_number} yielded ({len(rows)} rows)")
            yield [row[0] for row in rows] if single_column else rows

            if len(rows) < config.batch_size:
                _lazy.debug(lambda: f"pluck: stopped after {page_number} pages (short page)")
                return

            cursor = Cursor.from_row(rows[-1], config.keys, self._key_indices)
            current = self._base.filter(cursor.seek_predicate(config.order))

    def each_row(self) -> Iterator[Any]:
        """Yield plucked rows one at a time."""
        for page in self.each():
            yield from page


def pluck_batches(
    source: QuerySource,
    *columns: str,
    of: int | Omitted = OMITTED,
    order: SortOrder | str | Omitted = OMITTED,
    keys: Iterable[str] | None = None,
) -> PluckedBatchEnumerator:
    """Build a PluckedBatchEnumerator over ``source``."""
    return PluckedBatchEnumerator(source, *columns, of=of, order=order, keys=keys)


__all__ = ["PluckedBatchEnumerator", "pluck_batches"]
