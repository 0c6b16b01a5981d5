"""Configuration value objects: per-cache options and process-wide settings.

All of them are frozen: once a wrapped function exists its configuration
cannot change.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from swrcache.domain.exceptions import CacheConfigError
from swrcache.domain.models.common import CacheName

_RESERVED_NAMES = {"", ".", ".."}


def validate_name(name: str) -> CacheName:
    """Checks that a cache name can be used as a store file name."""
    if not isinstance(name, str) or name.strip() in _RESERVED_NAMES:
        raise CacheConfigError(f"Cache name must be a non-empty string, got {name!r}")
    if "/" in name or "\\" in name or "\x00" in name:
        raise CacheConfigError(f"Cache name {name!r} must not contain path separators")
    return CacheName(name)


@dataclass(frozen=True)
class SwrOptions:
    """Options for a stale-while-revalidate cache."""
    name: str
    max_entries: int = 0  # 0 = unlimited

    def __post_init__(self) -> None:
        validate_name(self.name)
        if self.max_entries < 0:
            raise CacheConfigError(f"max_entries must be >= 0, got {self.max_entries}")


@dataclass(frozen=True)
class MemoOptions:
    """Options for a TTL memo cache.

    ``ttl`` is in seconds; ``None`` means "use the configured
    minimum time to stale".
    """
    name: str
    max_entries: int = 0
    ttl: Optional[float] = None
    persist: bool = True

    def __post_init__(self) -> None:
        validate_name(self.name)
        if self.max_entries < 0:
            raise CacheConfigError(f"max_entries must be >= 0, got {self.max_entries}")
        if self.ttl is not None and self.ttl < 0:
            raise CacheConfigError(f"ttl must be >= 0, got {self.ttl}")


DEFAULT_MIN_TIME_TO_STALE = 30 * 60  # 30 minutes
DEFAULT_MAX_TIME_TO_LIVE = 7 * 24 * 60 * 60  # 7 days


@dataclass(frozen=True)
class CacheSettings:
    """Process-wide settings shared by every cache of a context.

    Times are in seconds.
    """
    cache_dir: Path
    enabled: bool = True
    min_time_to_stale: float = DEFAULT_MIN_TIME_TO_STALE
    max_time_to_live: float = DEFAULT_MAX_TIME_TO_LIVE

    def __post_init__(self) -> None:
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))
        if self.min_time_to_stale < 0:
            raise CacheConfigError(f"min_time_to_stale must be >= 0, got {self.min_time_to_stale}")
        if self.max_time_to_live <= self.min_time_to_stale:
            raise CacheConfigError(
                f"max_time_to_live ({self.max_time_to_live}) must be greater than "
                f"min_time_to_stale ({self.min_time_to_stale})"
            )

    @property
    def backstop_ttl(self) -> float:
        """Physical expiry for SWR store entries, after any refetch would have happened."""
        return self.max_time_to_live * 2
