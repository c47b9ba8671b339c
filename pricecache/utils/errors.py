"""Custom exception hierarchy for pricecache.

All package exceptions inherit from :class:`PriceCacheError`, which carries
an optional ``provider_name`` so error handlers can identify which upstream
price service caused the failure.

    PriceCacheError  (base -- catch-all for any pricecache error)
    +-- UpstreamLookupError  (upstream price service failed for one item)
    +-- BatchLookupError     (one or more items in a batch failed)
    +-- ConfigurationError   (invalid construction / settings values)

Upstream failures are never cached and never retried internally; they are
raised to the caller exactly once per lookup.
"""

from __future__ import annotations


class PriceCacheError(Exception):
    """Base exception for all pricecache errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream service triggered the
    error.  ``__str__`` prefixes the provider name in brackets, e.g.
    ``[QuoteService] getting price from service: timeout``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class UpstreamLookupError(PriceCacheError):
    """Raised when the upstream price service fails for a single item.

    The original exception is always chained as ``__cause__``.
    """

    def __init__(
        self,
        item_code: str,
        message: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._item_code = item_code
        super().__init__(
            message=message or f"getting price for {item_code!r} from service failed",
            provider_name=provider_name,
        )

    @property
    def item_code(self) -> str:
        return self._item_code


class BatchLookupError(PriceCacheError):
    """Raised when at least one item in a batch lookup failed.

    ``__cause__`` is the first failure observed.  The partial results hold
    only the items that succeeded and are informational: an error means the
    result set is incomplete, not that every item failed.
    """

    def __init__(
        self,
        first_error: UpstreamLookupError,
        partial_results: list[float],
        partial_prices: dict[str, float],
        failures: dict[str, UpstreamLookupError],
    ) -> None:
        self._first_error = first_error
        self._partial_results = partial_results
        self._partial_prices = partial_prices
        self._failures = failures
        super().__init__(
            message=(
                f"price lookup failed for {len(failures)} item(s): "
                f"{first_error.message}"
            ),
            provider_name=first_error.provider_name,
        )

    @property
    def first_error(self) -> UpstreamLookupError:
        return self._first_error

    @property
    def partial_results(self) -> list[float]:
        return list(self._partial_results)

    @property
    def partial_prices(self) -> dict[str, float]:
        return dict(self._partial_prices)

    @property
    def failures(self) -> dict[str, UpstreamLookupError]:
        return dict(self._failures)


class ConfigurationError(PriceCacheError):
    """Raised when cache configuration is invalid."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
