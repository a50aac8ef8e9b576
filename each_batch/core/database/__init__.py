"""Query sources and SQLAlchemy statement filters."""

from each_batch.core.database.filters import (
    CollectionFilter,
    LimitOffset,
    OrderBy,
    SeekFilter,
    StatementFilter,
)
from each_batch.core.database.memory import MemoryQuerySource
from each_batch.core.database.select_source import SelectQuerySource
from each_batch.core.database.source import QuerySource

__all__ = [
    "CollectionFilter",
    "LimitOffset",
    "MemoryQuerySource",
    "OrderBy",
    "QuerySource",
    "SeekFilter",
    "SelectQuerySource",
    "StatementFilter",
]
