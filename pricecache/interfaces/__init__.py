"""Interface definitions for external collaborators of the cache.

Re-exports
----------
IPriceService
    Upstream price lookup contract.
"""

from pricecache.interfaces.price_service import IPriceService

__all__ = ["IPriceService"]
