"""Query source backed by a SQLAlchemy ``Select`` and a synchronous ``Session``.

Usage:
    from sqlalchemy import select
    from sqlalchemy.orm import Session

    from each_batch import each_batch
    from each_batch.core.database import SelectQuerySource

    with Session(engine) as session:
        source = SelectQuerySource(session, select(User).where(User.is_active))
        for page in each_batch(source, of=500, keys=["created_at", "id"]):
            for user in page:
                ...

The statement must select one mapped entity, either whole (``select(User)``)
or as a column projection (``select(User.id, User.email)``). Projections yield
``Row`` objects and restrict which ordering keys are allowed.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as sa_inspect

from each_batch.core.database.filters import (
    CollectionFilter,
    LimitOffset,
    OrderBy,
    SeekFilter,
)
from each_batch.core.exceptions import InvalidConfigurationError
from each_batch.core.pagination.config import SortOrder
from each_batch.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import InstrumentedAttribute, Session

    from each_batch.core.pagination.predicate import SeekPredicate

_lazy = get_lazy_logger(__name__)


class SelectQuerySource:
    """QuerySource over a SQLAlchemy select statement.

    Every refinement returns a new source wrapping a new statement; the session
    is shared and only used when a ``fetch_*`` method runs.

    Attributes:
        session: Session used to execute statements
        statement: Current select statement
    """

    def __init__(self, session: Session, statement: Select[Any]) -> None:
        """Inspect the statement's entity and primary key.

        Args:
            session: Synchronous SQLAlchemy session
            statement: Select over a single mapped entity

        Raises:
            InvalidConfigurationError: If the statement has no mapped entity or
                the entity has a composite primary key.
        """
        descriptions = statement.column_descriptions
        entity = descriptions[0]["entity"] if descriptions else None
        if entity is None:
            raise InvalidConfigurationError(
                "Statement must select from a mapped entity",
                option="statement",
                value=str(statement),
            )

        mapper = sa_inspect(entity).mapper
        if len(mapper.primary_key) != 1:
            raise InvalidConfigurationError(
                "Composite primary keys are not supported",
                option="statement",
                value=mapper.class_.__name__,
            )

        self.session = session
        self.statement = statement
        self._entity = entity
        self._primary_key = mapper.get_property_by_column(mapper.primary_key[0]).key

        whole_entity = len(descriptions) == 1 and descriptions[0]["expr"] is entity
        self._projection = None if whole_entity else tuple(d["name"] for d in descriptions)

    @property
    def primary_key(self) -> str:
        return self._primary_key

    @property
    def projection_columns(self) -> tuple[str, ...] | None:
        return self._projection

    def _derive(self, statement: Select[Any]) -> SelectQuerySource:
        derived = copy.copy(self)
        derived.statement = statement
        return derived

    def _column(self, key: str) -> InstrumentedAttribute[Any]:
        """Resolve a key to the entity's mapped attribute."""
        try:
            return getattr(self._entity, key)
        except AttributeError:
            raise InvalidConfigurationError(
                f"{self._entity.__name__} has no column {key!r}",
                option="keys",
                value=key,
            ) from None

    def filter(self, predicate: SeekPredicate) -> SelectQuerySource:
        return self._derive(SeekFilter(predicate, self._column).apply(self.statement))

    def filter_primary_keys(self, values: Iterable[Any]) -> SelectQuerySource:
        column = self._column(self._primary_key)
        return self._derive(CollectionFilter(column, list(values)).apply(self.statement))

    def order_by(self, keys: Sequence[str], order: SortOrder | str) -> SelectQuerySource:
        columns = [self._column(key) for key in keys]
        return self._derive(OrderBy(columns, SortOrder.parse(order).value).apply(self.statement))

    def limit(self, n: int) -> SelectQuerySource:
        return self._derive(LimitOffset(limit=n).apply(self.statement))

    def offset(self, n: int) -> SelectQuerySource:
        return self._derive(LimitOffset(offset=n).apply(self.statement))

    def disable_result_caching(self) -> SelectQuerySource:
        """Refresh already-loaded instances from each fetched row.

        Without this the identity map hands back objects as they were when
        first loaded in the session.
        """
        return self._derive(self.statement.execution_options(populate_existing=True))

    def fetch_rows(self) -> list[Any]:
        """Execute the statement.

        Returns:
            Entity instances, or ``Row`` objects for column projections
        """
        _lazy.debug(lambda: f"fetch_rows: {self.statement}")
        if self._projection is None:
            return list(self.session.scalars(self.statement).all())
        return list(self.session.execute(self.statement).all())

    def fetch_projected(self, columns: Sequence[str]) -> list[tuple[Any, ...]]:
        """Execute the statement selecting only ``columns``."""
        statement = self.statement.with_only_columns(*(self._column(c) for c in columns))
        _lazy.debug(lambda: f"fetch_projected: {statement}")
        return [tuple(row) for row in self.session.execute(statement)]

    def raw_values(self, record: Any, keys: Sequence[str]) -> tuple[Any, ...]:
        """Read key values already loaded on a fetched record.

        Entity instances are read from their loaded attribute state, rows
        from their mapping; neither issues a query for loaded columns.
        """
        if self._projection is not None:
            mapping = record._mapping
            return tuple(mapping[key] for key in keys)

        loaded = sa_inspect(record).dict
        return tuple(loaded[key] if key in loaded else getattr(record, key) for key in keys)

    def __repr__(self) -> str:
        return f"SelectQuerySource({self._entity.__name__}, primary_key={self._primary_key!r})"


__all__ = ["SelectQuerySource"]
