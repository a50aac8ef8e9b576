"""Pydantic Settings for batch defaults and logging.

Import settings via cached loaders:
    from each_batch.core.settings import get_batch_settings

    settings = get_batch_settings()
    print(settings.default_batch_size)
"""

from __future__ import annotations

from .batching import BatchSettings
from .loader import clear_all_caches, get_batch_settings, get_logging_settings
from .logging_ import LoggingSettings

__all__ = [
    "BatchSettings",
    "LoggingSettings",
    "clear_all_caches",
    "get_batch_settings",
    "get_logging_settings",
]
