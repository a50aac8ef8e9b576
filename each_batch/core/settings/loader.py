"""LRU-cached settings loaders.

Settings are read from the environment once and cached for the lifetime of the
process. In tests, call ``clear_all_caches()`` after changing environment
variables, or build the settings object directly:

    settings = BatchSettings(default_batch_size=10)
"""

from __future__ import annotations

from functools import lru_cache

from .batching import BatchSettings
from .logging_ import LoggingSettings


@lru_cache(maxsize=1)
def get_batch_settings() -> BatchSettings:
    """Get cached batch iteration defaults.

    Returns:
        Validated and frozen BatchSettings instance.
    """
    return BatchSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear all settings caches."""
    get_batch_settings.cache_clear()
    get_logging_settings.cache_clear()
