"""Keyset batch iteration for SQLAlchemy selects and other ordered sources."""

from each_batch.core.database import MemoryQuerySource, QuerySource, SelectQuerySource
from each_batch.core.exceptions import EachBatchError, InvalidConfigurationError
from each_batch.core.pagination import (
    BatchEnumerator,
    Page,
    PluckedBatchEnumerator,
    SortOrder,
    each_batch,
    pluck_batches,
)

__version__ = "0.1.0"

__all__ = [
    "BatchEnumerator",
    "EachBatchError",
    "InvalidConfigurationError",
    "MemoryQuerySource",
    "Page",
    "PluckedBatchEnumerator",
    "QuerySource",
    "SelectQuerySource",
    "SortOrder",
    "each_batch",
    "pluck_batches",
]
