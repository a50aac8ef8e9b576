"""Keyset (seek) batch iteration.

Walks an ordered query in fixed-size pages. Each page after the first is
selected by a seek condition on the ordering keys of the previous page's last
row rather than by OFFSET, so deep pages cost the same as the first one and
no row is skipped or repeated when leading keys tie.

Full rows:
    for page in each_batch(source, of=1000, keys=["enabled_at", "id"]):
        process(page)

Plucked columns:
    for ids in each_batch(source, of=1000).pluck("id"):
        enqueue(ids)
"""

from each_batch.core.pagination.config import BatchConfig, PluckConfig, SortOrder
from each_batch.core.pagination.cursor import Cursor
from each_batch.core.pagination.enumerator import BatchEnumerator, each_batch
from each_batch.core.pagination.page import Page
from each_batch.core.pagination.plucked import PluckedBatchEnumerator, pluck_batches
from each_batch.core.pagination.predicate import (
    Comparison,
    SeekPredicate,
    build_seek_predicate,
)

__all__ = [
    # Enumerators
    "BatchEnumerator",
    "PluckedBatchEnumerator",
    "each_batch",
    "pluck_batches",
    # Configuration
    "BatchConfig",
    "PluckConfig",
    "SortOrder",
    # Cursor and predicate
    "Comparison",
    "Cursor",
    "SeekPredicate",
    "build_seek_predicate",
    # Pages
    "Page",
]
