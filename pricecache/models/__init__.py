"""pricecache domain models."""

from __future__ import annotations

from pricecache.models.cache_entry import CacheEntry

__all__ = ["CacheEntry"]
