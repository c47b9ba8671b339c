"""Abstract base class for upstream price services.

The cache wraps exactly one of these.  Calls are expensive (network / IO
latency) and may fail; the cache is what keeps callers from paying that cost
on every lookup.  Concrete services are injected at construction time, so
tests can substitute a stub without touching the cache.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IPriceService(ABC):
    """Contract for the upstream price lookup.

    Implementations must be safe to call concurrently from multiple tasks;
    the cache makes no assumption about their internal concurrency limits.
    """

    @abstractmethod
    async def get_price_for(self, item_code: str) -> float:
        """Return the current price for *item_code*.

        Parameters
        ----------
        item_code:
            Identifier of the item to price.

        Raises
        ------
        Exception
            Any exception signals a failed lookup.  The cache wraps it in
            :class:`~pricecache.utils.errors.UpstreamLookupError`.
        """

    def get_provider_name(self) -> str:
        """Return a short name for log output and error prefixes."""
        return type(self).__name__
