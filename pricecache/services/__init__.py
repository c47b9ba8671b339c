"""Cache services."""

from pricecache.services.transparent_cache import TransparentCache

__all__ = ["TransparentCache"]
