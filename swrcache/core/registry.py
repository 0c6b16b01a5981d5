"""Registry of every cache created through a CacheContext, for bulk clears."""

import logging
from typing import Iterator, List, TypeVar

from swrcache.domain.interfaces.cache import Clearable

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Clearable)


class CacheRegistry:
    """Ordered, append-only collection of clearable caches."""

    def __init__(self) -> None:
        self._caches: List[Clearable] = []

    def register(self, cache: C) -> C:
        self._caches.append(cache)
        logger.debug(f"Registered cache #{len(self._caches)}: {getattr(cache, 'name', cache)!r}")
        return cache

    def clear_all(self) -> None:
        """Clears every registered cache in registration order.

        A failing ``clear()`` is logged and does not stop the remaining
        caches from being cleared.
        """
        failures = 0
        for cache in self._caches:
            try:
                cache.clear()
            except Exception as e:
                failures += 1
                logger.error(f"Failed to clear cache {getattr(cache, 'name', cache)!r}: {e}", exc_info=True)
        logger.info(f"Cleared {len(self._caches) - failures}/{len(self._caches)} registered caches.")

    def __len__(self) -> int:
        return len(self._caches)

    def __iter__(self) -> Iterator[Clearable]:
        return iter(list(self._caches))
