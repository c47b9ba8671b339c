"""Cache storage providers.

EntryStore is a lock-guarded dict: fast, but not shared across processes.
"""

from pricecache.providers.cache.entry_store import EntryStore

__all__ = ["EntryStore"]
