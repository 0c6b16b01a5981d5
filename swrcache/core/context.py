"""The CacheContext: explicit owner of settings and the cache registry.

Acts as the factory for cached functions. The caching strategy is chosen
once, when a function is wrapped: with caching disabled the caller gets a
PassthroughCache and nothing is registered or written to disk.
"""

import logging
import time
from typing import Awaitable, Callable, Optional, Set, Union

from swrcache.domain.interfaces.cache import CachedFunction, P, V
from swrcache.domain.models.common import Clock
from swrcache.domain.models.options import CacheSettings, MemoOptions, SwrOptions
from swrcache.core.memo import MemoCache
from swrcache.core.passthrough import PassthroughCache
from swrcache.core.registry import CacheRegistry
from swrcache.core.swr import SwrCache
from swrcache.infrastructure.cache.persistent_store import PersistentStore

logger = logging.getLogger(__name__)

Producer = Callable[P, Awaitable[V]]
Decorator = Callable[[Producer], CachedFunction]


class CacheContext:
    """Creates cached functions and remembers them for bulk invalidation."""

    def __init__(
        self,
        settings: CacheSettings,
        registry: Optional[CacheRegistry] = None,
        clock: Clock = time.time,
    ):
        self.settings = settings
        self.registry = registry if registry is not None else CacheRegistry()
        self._clock = clock
        self._names: Set[str] = set()
        logger.info(
            f"CacheContext initialized. enabled={settings.enabled}, dir={settings.cache_dir}, "
            f"stale_after={settings.min_time_to_stale}s, ttl={settings.max_time_to_live}s"
        )

    def _claim_name(self, name: str) -> None:
        if name in self._names:
            logger.warning(f"Cache name '{name}' is already in use; both caches will share one store file.")
        self._names.add(name)

    def swr(
        self,
        producer: Optional[Producer] = None,
        name: Optional[str] = None,
        max_entries: int = 0,
    ) -> Union[CachedFunction, Decorator]:
        """Wraps ``producer`` with stale-while-revalidate caching.

        Stale data is served instantly while fresh data is fetched in the
        background. Usable as ``ctx.swr(fn, name="x")`` or as a decorator,
        ``@ctx.swr(name="x")``.

        Args:
            producer: The async function to cache.
            name: Unique cache identifier, also the store file name.
            max_entries: LRU size limit. ``0`` means unlimited.

        Returns:
            A cached version of ``producer`` with a ``clear()`` method.
        """
        if producer is None:
            return lambda fn: self.swr(fn, name=name, max_entries=max_entries)

        options = SwrOptions(name=name, max_entries=max_entries)
        if not self.settings.enabled:
            logger.debug(f"Caching disabled, SWR '{options.name}' is a pass-through")
            return PassthroughCache(producer)

        self._claim_name(options.name)
        store = PersistentStore(
            name=options.name,
            cache_dir=self.settings.cache_dir,
            ttl=self.settings.backstop_ttl,
            # Two entries per key (value + timestamp)
            max_entries=options.max_entries * 2,
            clock=self._clock,
        )
        store.load()
        cached = SwrCache(
            producer,
            store,
            name=options.name,
            min_time_to_stale=self.settings.min_time_to_stale,
            max_time_to_live=self.settings.max_time_to_live,
            clock=self._clock,
        )
        return self.registry.register(cached)

    def memo(
        self,
        producer: Optional[Producer] = None,
        name: Optional[str] = None,
        max_entries: int = 0,
        ttl: Optional[float] = None,
        persist: bool = True,
    ) -> Union[CachedFunction, Decorator]:
        """Wraps ``producer`` with TTL memoization backed by a Persistent Store.

        Use for values where serving stale data is not acceptable, or with
        ``persist=False`` for values that cannot be pickled.

        Args:
            producer: The async function to cache.
            name: Unique cache identifier, also the store file name.
            max_entries: LRU size limit. ``0`` means unlimited.
            ttl: Time-to-live in seconds. Defaults to ``min_time_to_stale``.
            persist: Write the cache to disk. Defaults to ``True``.

        Returns:
            A cached version of ``producer`` with a ``clear()`` method.
        """
        if producer is None:
            return lambda fn: self.memo(fn, name=name, max_entries=max_entries, ttl=ttl, persist=persist)

        options = MemoOptions(name=name, max_entries=max_entries, ttl=ttl, persist=persist)
        if not self.settings.enabled:
            logger.debug(f"Caching disabled, memo '{options.name}' is a pass-through")
            return PassthroughCache(producer)

        self._claim_name(options.name)
        store = PersistentStore(
            name=options.name,
            cache_dir=self.settings.cache_dir,
            ttl=options.ttl if options.ttl is not None else self.settings.min_time_to_stale,
            max_entries=options.max_entries,
            clock=self._clock,
        )
        if options.persist:
            store.load()
        cached = MemoCache(producer, store, name=options.name, persist=options.persist)
        return self.registry.register(cached)

    def clear_all_caches(self) -> None:
        """Clears every cache created through this context."""
        self.registry.clear_all()
