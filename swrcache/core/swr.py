"""Stale-while-revalidate caching over a Persistent Store.

Each key is stored twice: the value under the key itself, and the time it
was stored under ``key + TIME_KEY_SUFFIX``. On every call the entry is
classified by its age:

* absent or expired: await the producer, store, return the new value
* fresh: return the stored value
* stale: return the stored value and refresh it in a background task

There is no per-key revalidation lock; overlapping refreshes of one key
are allowed and the last write wins.
"""

import asyncio
import functools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Set, Tuple

from swrcache.domain.interfaces.cache import CachedFunction, KeyValueStore, P, V
from swrcache.domain.models.common import CacheKey, Clock, Freshness, Timestamp
from swrcache.core.key_deriver import derive_key

logger = logging.getLogger(__name__)

TIME_KEY_SUFFIX = "__swr_time__"

_MISSING = object()


def time_key(key: CacheKey) -> CacheKey:
    return CacheKey(f"{key}{TIME_KEY_SUFFIX}")


def classify_freshness(age: float, min_time_to_stale: float, max_time_to_live: float) -> Freshness:
    """Classifies a stored entry of the given age (seconds)."""
    if age >= max_time_to_live:
        return Freshness.EXPIRED
    if age >= min_time_to_stale:
        return Freshness.STALE
    return Freshness.FRESH


class SwrCache(CachedFunction[P, V]):
    """Stale-while-revalidate wrapper around an async producer."""

    def __init__(
        self,
        producer: Callable[P, Awaitable[V]],
        store: KeyValueStore,
        name: str,
        min_time_to_stale: float,
        max_time_to_live: float,
        clock: Clock = time.time,
    ):
        """Initializes the SWR cache.

        Args:
            producer: The async function whose results are cached.
            store: Backing store, already loaded, sized for two entries per key.
            name: Cache name, used in log messages and task names.
            min_time_to_stale: Age in seconds after which entries are refreshed.
            max_time_to_live: Age in seconds after which entries are refetched.
            clock: Returns the current time in seconds.
        """
        self._producer = producer
        self._store = store
        self.name = name
        self.min_time_to_stale = min_time_to_stale
        self.max_time_to_live = max_time_to_live
        self._clock = clock
        # Strong references so the event loop does not drop running refreshes
        self._pending: Set["asyncio.Task[None]"] = set()
        # Bumped by clear(); fetches started under an older generation are not stored
        self._generation = 0
        functools.update_wrapper(self, producer, updated=())

    def _lookup(self, key: CacheKey) -> Tuple[Freshness, Any]:
        value = self._store.get(key, _MISSING)
        stored_at = self._store.get(time_key(key), _MISSING)
        if value is _MISSING or stored_at is _MISSING:
            return Freshness.ABSENT, None
        if isinstance(stored_at, bool) or not isinstance(stored_at, (int, float)):
            logger.warning(f"SWR '{self.name}' has an invalid timestamp for key {key[:40]}, refetching")
            return Freshness.ABSENT, None
        age = self._clock() - stored_at
        return classify_freshness(age, self.min_time_to_stale, self.max_time_to_live), value

    async def __call__(self, *args: P.args, **kwargs: P.kwargs) -> V:
        key = derive_key(args, kwargs)
        freshness, value = self._lookup(key)

        if freshness is Freshness.FRESH:
            logger.debug(f"SWR '{self.name}' FRESH hit for key: {key[:40]}")
            return value

        if freshness is Freshness.STALE:
            logger.debug(f"SWR '{self.name}' STALE hit for key: {key[:40]}, revalidating")
            self._schedule_revalidation(key, args, kwargs)
            return value

        logger.debug(f"SWR '{self.name}' {freshness.value.upper()} for key: {key[:40]}, fetching")
        return await self._fetch(key, args, kwargs, self._generation)

    async def _fetch(self, key: CacheKey, args: Tuple[Any, ...], kwargs: Dict[str, Any], generation: int) -> V:
        value = await self._producer(*args, **kwargs)
        if generation != self._generation:
            logger.debug(f"SWR '{self.name}' was cleared while fetching key {key[:40]}, result not stored")
            return value
        # Value and timestamp are written together, then flushed once
        self._store.set(key, value)
        self._store.set(time_key(key), Timestamp(self._clock()))
        self._store.save()
        return value

    def _schedule_revalidation(self, key: CacheKey, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(
            self._revalidate(key, args, kwargs, self._generation),
            name=f"swr-revalidate:{self.name}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _revalidate(self, key: CacheKey, args: Tuple[Any, ...], kwargs: Dict[str, Any], generation: int) -> None:
        try:
            await self._fetch(key, args, kwargs, generation)
            logger.debug(f"SWR '{self.name}' revalidated key: {key[:40]}")
        except Exception as e:
            # The stored value stays authoritative
            logger.warning(f"Background revalidation failed for SWR '{self.name}' key {key[:40]}: {e}", exc_info=True)

    @property
    def pending_revalidations(self) -> int:
        return len(self._pending)

    async def wait_for_revalidations(self) -> None:
        """Waits until every background revalidation in flight has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def clear(self) -> None:
        self._generation += 1
        self._store.clear()
        self._store.save()
