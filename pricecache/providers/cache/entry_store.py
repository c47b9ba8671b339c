"""In-memory entry store for memoized prices.

Maps an item code to at most one :class:`CacheEntry`.  Presence does not
imply validity; the cache decides that from ``fetched_at``.  There is no
size bound and no background sweep: entries leave only when a lookup finds
them expired, or when a caller invalidates them.

Every operation takes a ``threading.Lock`` for the duration of a single dict
access, so the store is safe to share between coroutines and threads and no
operation ever waits on upstream I/O.
"""

from __future__ import annotations

import threading

import structlog

from pricecache.models.cache_entry import CacheEntry
from pricecache.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class EntryStore:
    """Concurrency-safe mapping of item code to :class:`CacheEntry`."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def load(self, key: str) -> CacheEntry | None:
        """Return the stored entry for *key*, or ``None`` if absent."""
        with self._lock:
            return self._entries.get(key)

    def store(self, key: str, entry: CacheEntry) -> None:
        """Store *entry* under *key*.

        Unconditional overwrite.  Two writers racing on the same key both
        hold a value that was valid when fetched, so whichever lands last
        wins.
        """
        with self._lock:
            self._entries[key] = entry
        logger.debug("cache_store", key=key, price=entry.price)

    def delete(self, key: str) -> None:
        """Remove *key* from the store (no-op if absent)."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> dict[str, CacheEntry]:
        """Return a shallow copy of the current mapping."""
        with self._lock:
            return dict(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
