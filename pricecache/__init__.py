"""pricecache -- read-through TTL cache for a slow upstream price service.

Typical use::

    cache = TransparentCache(my_price_service, max_age=timedelta(seconds=30))
    price = await cache.get_price_for("apple")
    prices = await cache.get_prices_for("apple", "pear", "plum")
"""

from pricecache.config.settings import CacheSettings
from pricecache.interfaces.price_service import IPriceService
from pricecache.models.cache_entry import CacheEntry
from pricecache.services.transparent_cache import TransparentCache
from pricecache.utils.errors import (
    BatchLookupError,
    ConfigurationError,
    PriceCacheError,
    UpstreamLookupError,
)

__all__ = [
    "BatchLookupError",
    "CacheEntry",
    "CacheSettings",
    "ConfigurationError",
    "IPriceService",
    "PriceCacheError",
    "TransparentCache",
    "UpstreamLookupError",
]
