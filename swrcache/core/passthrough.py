"""Disabled-mode strategy: every call goes straight to the producer."""

import functools
from typing import Awaitable, Callable

from swrcache.domain.interfaces.cache import CachedFunction, P, V


class PassthroughCache(CachedFunction[P, V]):
    """Calls the producer every time. ``clear()`` does nothing."""

    def __init__(self, producer: Callable[P, Awaitable[V]]):
        self._producer = producer
        functools.update_wrapper(self, producer, updated=())

    async def __call__(self, *args: P.args, **kwargs: P.kwargs) -> V:
        return await self._producer(*args, **kwargs)

    def clear(self) -> None:
        pass
