"""Logging infrastructure.

Basic usage:
    from each_batch.infra.logging import configure_logging, get_lazy_logger

    configure_logging(log_level="DEBUG")

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"cursor: {cursor.values!r}")  # Only runs if DEBUG enabled
"""

from each_batch.infra.logging.config import configure_logging, setup_logging
from each_batch.infra.logging.formatters import JSONFormatter
from each_batch.infra.logging.lazy import (
    LazyLoggerAdapter,
    get_lazy_logger,
)

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
]
