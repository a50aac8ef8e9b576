"""Lazy evaluation support for logging.

Batch enumerators log once per page. Building those messages means formatting
cursor tuples, which is wasted work when DEBUG is disabled, so messages are
passed as callables and only evaluated once the level check has passed.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that evaluates callable messages and arguments lazily.

    Example:
        ```python
        logger = LazyLoggerAdapter(logging.getLogger(__name__))

        logger.debug(lambda: f"page {number}: cursor={cursor.values!r}")
        logger.debug("page %d: %s", number, lambda: describe(page))
        ```
    """

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Log message, calling it and any callable args only if enabled.

        Args:
            level: Numeric log level (e.g., logging.DEBUG).
            msg: Log message or callable returning message.
            *args: Format arguments (may include callables).
            **kwargs: Additional kwargs for logging.
        """
        if not self.isEnabledFor(level):
            return

        if callable(msg):
            msg = msg()

        if args:
            args = tuple(arg() if callable(arg) else arg for arg in args)

        super().log(level, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)


def get_lazy_logger(name: str) -> LazyLoggerAdapter:
    """Get logger with lazy evaluation support.

    Args:
        name: Logger name (usually __name__).

    Returns:
        Logger adapter with lazy evaluation support.
    """
    return LazyLoggerAdapter(logging.getLogger(name), {})
