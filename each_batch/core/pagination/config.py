"""Validated batch iteration configuration.

Both enumerators turn their keyword options into one of the frozen models
below before any query is built. Every rejected option surfaces as
InvalidConfigurationError; pydantic's ValidationError never leaks to callers.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum, StrEnum
from functools import cached_property
from typing import TYPE_CHECKING, Any, Final, Literal, Self

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from each_batch.core.exceptions import InvalidConfigurationError
from each_batch.core.settings import get_batch_settings

if TYPE_CHECKING:
    from each_batch.core.database.source import QuerySource


class Omitted(Enum):
    """Default of options that fall back to BatchSettings.

    An explicit None is validated like any other value.
    """

    TOKEN = 0


OMITTED: Final = Omitted.TOKEN


class SortOrder(StrEnum):
    """Direction shared by every ordering key."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> SortOrder:
        """Match a member case-insensitively.

        Raises:
            ValueError: If value is not "asc" or "desc".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid order {value!r}, expected 'asc' or 'desc'")

    @property
    def comparison(self) -> Literal["gt", "lt"]:
        """Operator selecting rows that sort after a cursor."""
        return "lt" if self is SortOrder.DESC else "gt"


class _OrderedBatch(BaseModel):
    """Fields shared by full-row and pluck configurations."""

    model_config = ConfigDict(frozen=True)

    batch_size: int
    order: SortOrder = SortOrder.ASC
    keys: tuple[str, ...]

    @field_validator("batch_size", mode="before")
    @classmethod
    def check_batch_size(cls, v: Any) -> int:
        """Accept only strictly positive ints (bools are rejected)."""
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            raise ValueError("Batch size must be a positive integer")
        return v

    @field_validator("order", mode="before")
    @classmethod
    def normalize_order(cls, v: Any) -> SortOrder:
        return SortOrder.parse(v)

    @field_validator("keys", mode="before")
    @classmethod
    def normalize_keys(cls, v: Any) -> tuple[str, ...]:
        if isinstance(v, str):
            v = (v,)
        elif not isinstance(v, Iterable):
            raise ValueError("Ordering keys must be a sequence of column names")
        keys = tuple(str(key) for key in v)
        if not keys:
            raise ValueError("At least one ordering key is required")
        return keys

    @classmethod
    def _build(cls, **values: Any) -> Self:
        """Construct the model, translating pydantic errors."""
        try:
            return cls(**values)
        except ValidationError as e:
            error = e.errors()[0]
            option = str(error["loc"][0]) if error["loc"] else None
            message = error["msg"].removeprefix("Value error, ")
            raise InvalidConfigurationError(
                message,
                option=option,
                value=values.get(option) if option else None,
            ) from e


def _resolve_keys(source: QuerySource, keys: Iterable[Any] | None) -> Iterable[Any]:
    return (source.primary_key,) if keys is None else keys


def _check_primary_key_last(source: QuerySource, keys: tuple[str, ...]) -> None:
    primary_key = str(source.primary_key)
    if keys[-1] != primary_key:
        raise InvalidConfigurationError(
            "Primary key must be the last key: ordering is not guaranteed "
            "deterministic without the primary key as final tie-breaker",
            option="keys",
            value=keys,
        )


class BatchConfig(_OrderedBatch):
    """Configuration of a full-row batch enumerator.

    Attributes:
        batch_size: Maximum number of rows per page
        order: Direction applied to every key
        keys: Ordering keys, primary key last
        load: Materialize each page before yielding it
    """

    load: bool = False

    @classmethod
    def for_source(
        cls,
        source: QuerySource,
        *,
        of: Any = OMITTED,
        load: bool = False,
        order: Any = OMITTED,
        keys: Iterable[Any] | None = None,
    ) -> BatchConfig:
        """Validate options against a query source.

        Omitted ``of`` and ``order`` come from BatchSettings (an explicit None
        is rejected); omitted ``keys``
        default to the source's primary key.

        Raises:
            InvalidConfigurationError: If any option is rejected.
        """
        settings = get_batch_settings()
        config = cls._build(
            batch_size=settings.default_batch_size if of is OMITTED else of,
            order=settings.default_order if order is OMITTED else order,
            keys=_resolve_keys(source, keys),
            load=load,
        )
        _check_primary_key_last(source, config.keys)

        projection = source.projection_columns
        if projection is not None and not set(config.keys) <= set(projection):
            raise InvalidConfigurationError(
                "Not all keys are included in the custom select clause",
                option="keys",
                value=config.keys,
            )
        return config


class PluckConfig(_OrderedBatch):
    """Configuration of a pluck (column projection) enumerator.

    Attributes:
        columns: Columns returned for every row, in order
    """

    columns: tuple[str, ...]

    @field_validator("columns", mode="before")
    @classmethod
    def normalize_columns(cls, v: Any) -> tuple[str, ...]:
        if isinstance(v, str):
            v = (v,)
        elif not isinstance(v, Iterable):
            raise ValueError("Plucked columns must be a sequence of column names")
        return tuple(str(column) for column in v)

    @model_validator(mode="after")
    def check_columns_cover_keys(self) -> PluckConfig:
        if not self.columns:
            raise ValueError("At least one column must be plucked")
        if not set(self.keys) <= set(self.columns):
            raise ValueError("Not all keys are included in the plucked columns")
        # Cache key positions
        self.key_indices  # noqa: B018
        return self

    @cached_property
    def key_indices(self) -> tuple[int, ...]:
        """Position of each ordering key within ``columns``, built at construction."""
        return tuple(self.columns.index(key) for key in self.keys)

    @classmethod
    def for_source(
        cls,
        source: QuerySource,
        columns: Iterable[Any],
        *,
        of: Any = OMITTED,
        order: Any = OMITTED,
        keys: Iterable[Any] | None = None,
    ) -> PluckConfig:
        """Validate pluck options against a query source.

        Raises:
            InvalidConfigurationError: If any option is rejected or a key is
                missing from ``columns``.
        """
        settings = get_batch_settings()
        config = cls._build(
            batch_size=settings.default_batch_size if of is OMITTED else of,
            order=settings.default_order if order is OMITTED else order,
            keys=_resolve_keys(source, keys),
            columns=columns,
        )
        _check_primary_key_last(source, config.keys)
        return config


__all__ = [
    "BatchConfig",
    "PluckConfig",
    "SortOrder",
]
