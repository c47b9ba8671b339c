"""Utility modules for pricecache.

- **errors** -- Exception hierarchy rooted at PriceCacheError.
- **concurrency** -- asyncio fan-out helpers with optional semaphore throttling.
- **logging** -- structlog setup: coloured console output in development,
  structured JSON in production.
"""

from pricecache.utils.concurrency import make_semaphore, throttled_gather
from pricecache.utils.errors import (
    BatchLookupError,
    ConfigurationError,
    PriceCacheError,
    UpstreamLookupError,
)
from pricecache.utils.logging import configure_logging, get_logger

__all__ = [
    "BatchLookupError",
    "ConfigurationError",
    "PriceCacheError",
    "UpstreamLookupError",
    "configure_logging",
    "get_logger",
    "make_semaphore",
    "throttled_gather",
]
