"""Concrete implementation of the disk-backed Persistent Store.

Keeps an in-memory LRU index bounded by entry count, with a per-entry
absolute expiry acting as a garbage-collection backstop. The whole index is
written to a single pickle file per store, one record per entry, so a
corrupt record only loses that entry.
"""

import logging
import os
import pickle
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

# Domain Layer Imports
from swrcache.domain.interfaces.cache import KeyValueStore
from swrcache.domain.models.common import CacheKey, Clock, Timestamp

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1

# Anything pickle.load can raise on a truncated, foreign or stale file
LOAD_ERRORS = (
    pickle.UnpicklingError, EOFError, OSError, AttributeError,
    ImportError, IndexError, KeyError, TypeError, ValueError,
)


def _read_payload(path: Path) -> Dict[str, Any]:
    with open(path, 'rb') as f:
        payload = pickle.load(f)
    if not isinstance(payload, dict) or payload.get("version") != STORE_FORMAT_VERSION:
        raise ValueError(f"unsupported store format in {path}")
    return payload


def is_store_file(path: Path) -> bool:
    """True when ``path`` holds a store written by PersistentStore.save()."""
    try:
        _read_payload(path)
    except LOAD_ERRORS:
        return False
    return True


@dataclass
class StoredItem:
    """Internal representation of a store entry with expiry."""
    value: Any
    expires_at: Optional[Timestamp]  # None = never


class PersistentStore(KeyValueStore):
    """Named LRU key-value store persisted to ``cache_dir / name``."""

    def __init__(
        self,
        name: str,
        cache_dir: Union[str, Path],
        ttl: Optional[float] = None,
        max_entries: int = 0,
        clock: Clock = time.time,
    ):
        """Initializes the store without touching the disk.

        Args:
            name: Store identifier, used as the file name.
            cache_dir: Directory holding the store file.
            ttl: Default time-to-live in seconds. ``None`` or ``0`` disables expiry.
            max_entries: LRU capacity. ``0`` means unlimited.
            clock: Returns the current time in seconds.
        """
        self.name = name
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._items: "OrderedDict[str, StoredItem]" = OrderedDict()
        logger.debug(f"PersistentStore '{name}' created (dir={self.cache_dir}, ttl={ttl}, max={max_entries})")

    @property
    def path(self) -> Path:
        return self.cache_dir / self.name

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        item = self._items.get(key)
        return item is not None and not self._is_expired(item)

    def keys(self) -> Iterator[str]:
        """Iterates the keys from least to most recently used."""
        return iter(list(self._items.keys()))

    def _is_expired(self, item: StoredItem, now: Optional[float] = None) -> bool:
        if item.expires_at is None:
            return False
        return (now if now is not None else self._clock()) >= item.expires_at

    def _expiry_for(self, ttl: Optional[float]) -> Optional[Timestamp]:
        effective_ttl = ttl if ttl is not None else self.ttl
        if not effective_ttl:
            return None
        return Timestamp(self._clock() + effective_ttl)

    def _evict_overflow(self) -> None:
        if self.max_entries <= 0:
            return
        while len(self._items) > self.max_entries:
            lru_key, _ = self._items.popitem(last=False)
            logger.debug(f"Store '{self.name}' EVICTED key (LRU): {lru_key[:40]}")

    def prune(self) -> int:
        """Drops expired entries. Returns how many were removed."""
        now = self._clock()
        expired_keys = [k for k, item in self._items.items() if self._is_expired(item, now)]
        for k in expired_keys:
            del self._items[k]
        if expired_keys:
            logger.debug(f"Store '{self.name}' pruned {len(expired_keys)} expired entries")
        return len(expired_keys)

    # --- KeyValueStore Interface Implementation ---

    def get(self, key: CacheKey, default: Any = None) -> Any:
        item = self._items.get(key)
        if item is None:
            return default
        if self._is_expired(item):
            del self._items[key]
            logger.debug(f"Store '{self.name}' entry expired: {key[:40]}")
            return default
        self._items.move_to_end(key)
        return item.value

    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        self._items[key] = StoredItem(value=value, expires_at=self._expiry_for(ttl))
        self._items.move_to_end(key)
        self._evict_overflow()

    def remove(self, key: CacheKey) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()
        logger.info(f"Cleared store '{self.name}'.")

    def load(self) -> None:
        """Populates the index from disk.

        A missing file yields an empty store. An unreadable file yields an
        empty store and a warning. Records that fail to unpickle are skipped
        individually, as are records that have already expired.
        """
        self._items.clear()
        if not self.path.exists():
            logger.debug(f"No store file for '{self.name}' at {self.path}, starting empty.")
            return

        try:
            records = list(_read_payload(self.path)["items"])
        except LOAD_ERRORS as e:
            logger.warning(f"Failed to read store file {self.path}: {e}. Starting empty.")
            return

        now = self._clock()
        skipped = 0
        for record in records:
            try:
                key, raw_value, expires_at = record
                item = StoredItem(value=pickle.loads(raw_value), expires_at=expires_at)
            except LOAD_ERRORS as e:
                skipped += 1
                logger.warning(f"Skipping unreadable record in store '{self.name}': {e}")
                continue
            if self._is_expired(item, now):
                continue
            self._items[key] = item

        self._evict_overflow()
        logger.debug(f"Loaded {len(self._items)} entries into store '{self.name}' (skipped {skipped}).")

    def save(self) -> None:
        """Writes the index to disk atomically.

        Failures are logged, never raised: the in-memory state stays
        authoritative for this process.
        """
        self.prune()
        records: List[tuple] = []
        for key, item in self._items.items():
            try:
                records.append((key, pickle.dumps(item.value), item.expires_at))
            except (pickle.PicklingError, TypeError, AttributeError) as e:
                logger.warning(f"Value for key {key[:40]} in store '{self.name}' is not picklable, kept in memory only: {e}")

        temp_filepath = self.path.with_name(self.path.name + '.tmp')
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_filepath, 'wb') as f:
                pickle.dump({"version": STORE_FORMAT_VERSION, "items": records}, f)
            # os.replace is atomic on both Windows and Unix
            os.replace(str(temp_filepath), str(self.path))
            logger.debug(f"Saved {len(records)} entries for store '{self.name}' to {self.path}")
        except OSError as e:
            logger.error(f"Failed to write store file {self.path}: {e}")
            try:
                if temp_filepath.exists():
                    temp_filepath.unlink(missing_ok=True)
            except OSError as unlink_err:
                logger.warning(f"Failed to delete temporary store file: {unlink_err}")
