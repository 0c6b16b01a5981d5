"""Exceptions raised by the cache engine."""

from typing import Optional


class CacheError(Exception):
    """Base class for all errors raised by swrcache."""


class CacheConfigError(CacheError, ValueError):
    """Raised when cache options or settings are invalid."""


class KeyDerivationError(CacheError, TypeError):
    """Raised when call arguments cannot be turned into a stable cache key."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        self.original_exception = original_exception
        super().__init__(message)
