"""Disk-persisted memoization and stale-while-revalidate caching for async functions."""

from swrcache.api import (
    clear_all_caches,
    get_default_context,
    memo,
    reset_default_context,
    set_default_context,
    swr,
)
from swrcache.core.context import CacheContext
from swrcache.core.registry import CacheRegistry
from swrcache.domain.exceptions import CacheConfigError, CacheError, KeyDerivationError
from swrcache.domain.interfaces.cache import CachedFunction
from swrcache.domain.models.options import CacheSettings

__version__ = "0.1.0"

__all__ = [
    "CacheConfigError",
    "CacheContext",
    "CacheError",
    "CacheRegistry",
    "CacheSettings",
    "CachedFunction",
    "KeyDerivationError",
    "clear_all_caches",
    "get_default_context",
    "memo",
    "reset_default_context",
    "set_default_context",
    "swr",
]
