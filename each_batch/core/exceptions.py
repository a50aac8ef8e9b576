"""Exceptions raised by batch enumerators.

Only configuration problems are reported through these classes. Errors raised
by the query source while a page is fetched or probed reach the caller
unchanged.
"""

from __future__ import annotations

from typing import Any


class EachBatchError(Exception):
    """Base exception for batch iteration.

    Attributes:
        message: Error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize batch error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidConfigurationError(EachBatchError):
    """Invalid batch size, order, ordering keys or projection.

    Raised while an enumerator is being constructed, before any query runs.
    The caller recovers by fixing the options and building a new enumerator.
    """

    def __init__(self, message: str, option: str | None = None, value: Any = None):
        """Initialize invalid configuration error.

        Args:
            message: Error description
            option: Name of the offending option (if applicable)
            value: The rejected value
        """
        details: dict[str, Any] = {}
        if option is not None:
            details["option"] = option
            details["value"] = value
        self.option = option
        self.value = value
        super().__init__(message, details=details)

    def __repr__(self) -> str:
        """Repr for debugging."""
        return f"InvalidConfigurationError({self.message!r}, option={self.option!r})"


__all__ = [
    "EachBatchError",
    "InvalidConfigurationError",
]
