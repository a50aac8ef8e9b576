"""Batch iteration defaults.

Environment variables use EACH_BATCH_ prefix.
Example: EACH_BATCH_DEFAULT_BATCH_SIZE=500, EACH_BATCH_DEFAULT_ORDER=desc
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BatchSettings(BaseSettings):
    """Defaults used when an enumerator is built without ``of`` or ``order``.

    Attributes:
        default_batch_size: Page size when ``of`` is omitted.
        default_order: Order direction when ``order`` is omitted.
    """

    default_batch_size: int = Field(
        default=1000,
        ge=1,
        description="Default number of rows per page",
    )
    default_order: Literal["asc", "desc"] = Field(
        default="asc",
        description="Default order direction (asc|desc)",
    )

    @field_validator("default_order", mode="before")
    @classmethod
    def normalize_order(cls, v: str) -> str:
        """Normalize order to lowercase."""
        if isinstance(v, str):
            return v.lower()
        return v

    model_config = SettingsConfigDict(
        env_prefix="EACH_BATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
