"""Offline inspection and clearing of the stores in a cache directory.

Used by the command line; a running process clears its own caches through
its CacheContext instead. Only files that read back as a store are ever
listed or rewritten, so a cache directory shared with other files is safe.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Tuple

from swrcache.infrastructure.cache.persistent_store import PersistentStore, is_store_file

logger = logging.getLogger(__name__)


@dataclass
class StoreSummary:
    """What `swrcache list` shows for one store file."""
    name: str
    path: Path
    entries: int
    size_bytes: int
    modified_at: datetime


@dataclass
class ClearResult:
    """Outcome of clear_stores(), by store name."""
    cleared: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # present but not a store


def _scan(cache_dir: Path) -> Tuple[List[Path], List[Path]]:
    """Splits the files in ``cache_dir`` into ``(stores, foreign)``."""
    if not cache_dir.is_dir():
        return [], []
    stores, foreign = [], []
    for path in sorted(cache_dir.iterdir()):
        if not path.is_file() or path.name.endswith('.tmp'):
            continue
        (stores if is_store_file(path) else foreign).append(path)
    return stores, foreign


def list_stores(cache_dir: Path) -> List[StoreSummary]:
    """Loads every store file in ``cache_dir`` and summarizes it.

    Entry counts exclude records that have expired or cannot be read.
    Files that are not stores are left out.
    """
    stores, foreign = _scan(cache_dir)
    if foreign:
        logger.debug(f"Ignoring {len(foreign)} non-store files in {cache_dir}")
    summaries = []
    for path in stores:
        store = PersistentStore(name=path.name, cache_dir=cache_dir)
        store.load()
        stat = path.stat()
        summaries.append(StoreSummary(
            name=path.name,
            path=path,
            entries=len(store),
            size_bytes=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime),
        ))
    return summaries


def clear_stores(cache_dir: Path, names: Iterable[str] = ()) -> ClearResult:
    """Empties the named stores on disk, or every store when ``names`` is empty.

    Files that exist but are not stores are reported as skipped and left
    untouched, whether named explicitly or found by a clear-everything run.
    """
    stores, foreign = _scan(cache_dir)
    store_names = {p.name for p in stores}
    foreign_names = {p.name for p in foreign}
    result = ClearResult()

    requested = list(names)
    if not requested:
        requested = sorted(store_names)
        result.skipped.extend(sorted(foreign_names))

    for name in requested:
        if name in foreign_names:
            if name not in result.skipped:
                result.skipped.append(name)
            continue
        if name not in store_names:
            result.missing.append(name)
            continue
        store = PersistentStore(name=name, cache_dir=cache_dir)
        store.clear()
        store.save()
        result.cleared.append(name)

    logger.info(
        f"Cleared {len(result.cleared)} stores in {cache_dir} "
        f"(missing: {result.missing or 'none'}, skipped: {result.skipped or 'none'})"
    )
    return result
