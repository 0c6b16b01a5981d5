"""Defines common Value Objects used by the cache engine.

These objects represent simple values or concepts like cache keys, store
names and freshness states, ensuring consistency across the layers.
"""

import enum
from typing import Callable, NewType

# === Caching Context ===
CacheKey = NewType("CacheKey", str)      # Derived from call arguments
CacheName = NewType("CacheName", str)    # Unique per cache, also the store file name
Timestamp = NewType("Timestamp", float)  # Seconds since the epoch

# Returns the current time in seconds; time.time in production, a fake in tests
Clock = Callable[[], float]


class Freshness(enum.Enum):
    """Classification of a stored SWR entry by its age."""
    ABSENT = "absent"    # Nothing usable stored, must fetch and block
    FRESH = "fresh"      # Serve as-is
    STALE = "stale"      # Serve, then revalidate in the background
    EXPIRED = "expired"  # Too old to serve, must fetch and block
