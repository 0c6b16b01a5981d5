"""Package-level convenience API backed by a default CacheContext.

The default context is built on first use from load_cache_settings().
Hosts that need a different setup, and tests, install their own with
set_default_context() or create CacheContext instances directly.
"""

import logging
from typing import Optional, Union

from swrcache.core.context import CacheContext, Decorator, Producer
from swrcache.domain.interfaces.cache import CachedFunction
from swrcache.infrastructure.config.settings import load_cache_settings

logger = logging.getLogger(__name__)

_default_context: Optional[CacheContext] = None


def get_default_context() -> CacheContext:
    global _default_context
    if _default_context is None:
        _default_context = CacheContext(load_cache_settings())
    return _default_context


def set_default_context(context: CacheContext) -> None:
    global _default_context
    if _default_context is not None and len(_default_context.registry):
        logger.warning(
            f"Replacing the default cache context; its {len(_default_context.registry)} "
            "caches will no longer be reached by clear_all_caches()."
        )
    _default_context = context


def reset_default_context() -> None:
    """Drops the default context; the next call builds a new one from configuration."""
    global _default_context
    _default_context = None


def swr(
    producer: Optional[Producer] = None,
    name: Optional[str] = None,
    max_entries: int = 0,
) -> Union[CachedFunction, Decorator]:
    """Wraps an async function with stale-while-revalidate caching.

    See CacheContext.swr.
    """
    return get_default_context().swr(producer, name=name, max_entries=max_entries)


def memo(
    producer: Optional[Producer] = None,
    name: Optional[str] = None,
    max_entries: int = 0,
    ttl: Optional[float] = None,
    persist: bool = True,
) -> Union[CachedFunction, Decorator]:
    """Wraps an async function with TTL memoization.

    See CacheContext.memo.
    """
    return get_default_context().memo(producer, name=name, max_entries=max_entries, ttl=ttl, persist=persist)


def clear_all_caches() -> None:
    """Clears all caches created by swr() and memo()."""
    get_default_context().clear_all_caches()
