"""Interfaces for caching mechanisms.

Defines the contract for the key-value store that backs every cache, and
for the cached function objects handed back to callers.
"""

import abc
from typing import Any, Generic, Optional, ParamSpec, Protocol, TypeVar

from swrcache.domain.models.common import CacheKey

P = ParamSpec("P")
V = TypeVar("V")


class Clearable(Protocol):
    """Anything the registry can reset."""

    def clear(self) -> None:
        ...


class KeyValueStore(abc.ABC):
    """Abstract Base Class for a named, bounded key-value store."""

    @abc.abstractmethod
    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Retrieves an item from the store.

        Args:
            key: The cache key to retrieve.
            default: Returned when the key is absent or expired. Pass a
                private sentinel to tell a stored ``None`` apart from a miss.

        Returns:
            The stored value, or ``default``.
        """
        pass

    @abc.abstractmethod
    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        """Stores an item, evicting the least recently used entry if full.

        Args:
            key: The cache key to store the item under.
            value: The item to store.
            ttl: Time-to-live in seconds (uses the store default if None).
        """
        pass

    @abc.abstractmethod
    def remove(self, key: CacheKey) -> None:
        """Deletes an item if present."""
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes every item from the in-memory index."""
        pass

    @abc.abstractmethod
    def load(self) -> None:
        """Populates the in-memory index from disk, starting empty on failure."""
        pass

    @abc.abstractmethod
    def save(self) -> None:
        """Flushes the in-memory index to disk."""
        pass


class CachedFunction(abc.ABC, Generic[P, V]):
    """An awaitable wrapper around a producer with a ``clear()`` method."""

    @abc.abstractmethod
    async def __call__(self, *args: P.args, **kwargs: P.kwargs) -> V:
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        pass
