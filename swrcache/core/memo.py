"""TTL memoization over a Persistent Store.

A miss awaits the producer and stores the result; a hit returns the stored
value without calling the producer. Stored falsy values (``None``, ``0``,
``False``, ``""``) are hits.

Concurrent misses on the same key are not deduplicated: two calls that
both miss before either stores will both await the producer.
"""

import functools
import logging
from typing import Awaitable, Callable

from swrcache.domain.interfaces.cache import CachedFunction, KeyValueStore, P, V
from swrcache.core.key_deriver import derive_key

logger = logging.getLogger(__name__)

_MISSING = object()


class MemoCache(CachedFunction[P, V]):
    """Blocking memoization of an async producer."""

    def __init__(
        self,
        producer: Callable[P, Awaitable[V]],
        store: KeyValueStore,
        name: str,
        persist: bool = True,
    ):
        """Initializes the memo cache.

        Args:
            producer: The async function whose results are cached.
            store: Backing store, already loaded when ``persist`` is set.
            name: Cache name, used in log messages.
            persist: Save the store after every mutation.
        """
        self._producer = producer
        self._store = store
        self.name = name
        self.persist = persist
        functools.update_wrapper(self, producer, updated=())

    async def __call__(self, *args: P.args, **kwargs: P.kwargs) -> V:
        key = derive_key(args, kwargs)
        existing = self._store.get(key, _MISSING)
        if existing is not _MISSING:
            logger.debug(f"Memo '{self.name}' HIT for key: {key[:40]}")
            return existing

        logger.debug(f"Memo '{self.name}' MISS for key: {key[:40]}")
        value = await self._producer(*args, **kwargs)
        self._store.set(key, value)
        if self.persist:
            self._store.save()
        return value

    def clear(self) -> None:
        self._store.clear()
        if self.persist:
            self._store.save()
