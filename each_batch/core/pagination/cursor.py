"""Cursor taken from the last row of a page."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, model_validator

from each_batch.core.pagination.predicate import SeekPredicate, build_seek_predicate

if TYPE_CHECKING:
    from each_batch.core.database.source import QuerySource
    from each_batch.core.pagination.config import SortOrder


class Cursor(BaseModel):
    """Ordering-key values of the last row yielded.

    A new cursor is built for every page; the previous one is dropped.

    Attributes:
        keys: Ordering keys, most significant first
        values: Value of each key in the last row
    """

    model_config = ConfigDict(frozen=True)

    keys: tuple[str, ...]
    values: tuple[Any, ...]

    @model_validator(mode="after")
    def check_lengths(self) -> Cursor:
        if len(self.keys) != len(self.values):
            raise ValueError(
                f"Cursor has {len(self.values)} values for {len(self.keys)} keys"
            )
        return self

    @classmethod
    def from_record(cls, source: QuerySource, record: Any, keys: Sequence[str]) -> Cursor:
        """Read stored key values of a materialized record."""
        return cls(keys=tuple(keys), values=tuple(source.raw_values(record, keys)))

    @classmethod
    def from_row(cls, row: Sequence[Any], keys: Sequence[str], indices: Sequence[int]) -> Cursor:
        """Pick key values out of a projected row by position."""
        return cls(keys=tuple(keys), values=tuple(row[i] for i in indices))

    def seek_predicate(self, order: SortOrder | str) -> SeekPredicate:
        """Predicate selecting rows ordered after this cursor."""
        return build_seek_predicate(self.keys, self.values, order)

    def describe(self) -> str:
        return ", ".join(f"{k}={v!r}" for k, v in zip(self.keys, self.values, strict=True))


__all__ = ["Cursor"]
