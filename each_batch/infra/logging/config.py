"""Logging configuration setup.

The library itself only creates loggers. Applications and scripts that want
to see batch progress call :func:`configure_logging` (or :func:`setup_logging`
to read ``LoggingSettings`` from the environment) once at startup.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from each_batch.core.settings.logging_ import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
) -> None:
    """Configure logging once from settings.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from each_batch.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**log_settings.to_logging_kwargs())
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    logger_name: str = "each_batch",
) -> None:
    """Attach a console handler to the package logger with dictConfig.

    Args:
        log_level: Level for the package logger (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of the plain text format.
        logger_name: Logger to configure. Child loggers propagate to it.

    Example:
        configure_logging(log_level="DEBUG")
        for page in each_batch(source, of=500):
            ...
    """
    formatter: dict[str, Any]
    if json_logs:
        formatter = {"()": "each_batch.infra.logging.formatters.JSONFormatter"}
    else:
        formatter = {"format": PLAIN_FORMAT}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                logger_name: {
                    "level": log_level.upper(),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }
    )
    logger.debug("Logging configured: level=%s json=%s", log_level, json_logs)
