"""Read-through TTL cache in front of a slow upstream price service.

The cache remembers prices it has fetched so callers do not wait on the
upstream service for every lookup.  A remembered price is only served while
it is younger than ``max_age``; older entries are evicted lazily, on the
lookup that finds them expired, and refetched.

Two operation surfaces:

* ``get_price_for(item_code)`` -- single-item read-through lookup.
* ``get_prices_for(*item_codes)`` -- concurrent fan-out of single-item
  lookups.  Every item runs to completion even when a sibling fails; any
  failure makes the whole batch raise :class:`BatchLookupError` carrying the
  prices that did resolve.

Concurrency notes
-----------------
There is no "fetching" state.  Two lookups that miss on the same key at the
same time both call upstream and both store their result; the later write
wins.  That duplicates upstream work but never corrupts the store.  If that
cost matters, an in-flight registry (item code -> shared future awaited by
late arrivals) would slot in around the upstream call in ``get_price_for``.

Failures are never cached: the next lookup for a failed key goes upstream
again.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog
from pydantic import ValidationError

from pricecache.config.settings import CacheSettings
from pricecache.interfaces.price_service import IPriceService
from pricecache.models.cache_entry import CacheEntry
from pricecache.providers.cache.entry_store import EntryStore
from pricecache.utils.concurrency import make_semaphore, throttled_gather
from pricecache.utils.errors import (
    BatchLookupError,
    ConfigurationError,
    UpstreamLookupError,
)
from pricecache.utils.logging import get_logger

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _resolve_provider_name(service: IPriceService) -> str:
    # Any object with an async get_price_for is accepted; the ABC is optional.
    get_name = getattr(service, "get_provider_name", None)
    return get_name() if callable(get_name) else type(service).__name__


def _coerce_max_age(max_age: timedelta | float) -> timedelta:
    if isinstance(max_age, timedelta):
        value = max_age
    elif isinstance(max_age, (int, float)) and not isinstance(max_age, bool):
        value = timedelta(seconds=max_age)
    else:
        raise ConfigurationError(
            f"max_age must be a timedelta or a number of seconds, got {type(max_age).__name__}"
        )
    if value < timedelta(0):
        raise ConfigurationError(f"max_age must not be negative, got {value}")
    return value


class TransparentCache:
    """Cache that wraps the actual price service.

    Parameters
    ----------
    actual_price_service:
        Upstream lookup the cache calls on a miss.  Injected, never owned.
    max_age:
        How long a fetched price stays valid, as a ``timedelta`` or seconds.
        Fixed for the lifetime of the instance.  Zero disables reuse.
    clock:
        Zero-argument callable returning the current timezone-aware UTC
        time.  Defaults to the system clock.
    max_concurrency:
        Optional cap on how many items of one batch resolve at once.
        ``None`` fans every item out immediately.
    """

    def __init__(
        self,
        actual_price_service: IPriceService,
        max_age: timedelta | float,
        *,
        clock: Clock | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ConfigurationError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._actual_price_service = actual_price_service
        self._max_age = _coerce_max_age(max_age)
        self._clock: Clock = clock or utc_now
        self._max_concurrency = max_concurrency
        self._prices = EntryStore()
        self._provider_name = _resolve_provider_name(actual_price_service)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        actual_price_service: IPriceService,
        settings: CacheSettings | None = None,
        *,
        clock: Clock | None = None,
    ) -> TransparentCache:
        """Build a cache from :class:`CacheSettings` (environment when omitted)."""
        settings = settings or CacheSettings()
        return cls(
            actual_price_service,
            settings.max_age,
            clock=clock,
            max_concurrency=settings.max_concurrency,
        )

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    @property
    def max_concurrency(self) -> int | None:
        return self._max_concurrency

    # -- Public API -----------------------------------------------------------

    async def get_price_for(self, item_code: str) -> float:
        """Return the price for *item_code*, from the cache or the actual service.

        Serves the stored price while it is younger than ``max_age``.  An
        expired entry is evicted, then the price is fetched upstream and
        stored with the time this lookup started.

        Raises
        ------
        UpstreamLookupError
            The upstream service failed (or returned something that is not
            a price).  Nothing is stored.
        """
        now = self._clock()
        if now.tzinfo is None:
            raise ConfigurationError("clock must return timezone-aware datetimes")
        entry = self._prices.load(item_code)
        if entry is not None:
            if entry.is_valid(now, self._max_age):
                self._logger.debug("Cache hit", item_code=item_code)
                return entry.price
            self._logger.debug(
                "Cache entry expired, evicting",
                item_code=item_code,
                fetched_at=entry.fetched_at.isoformat(),
            )
            self._prices.delete(item_code)
        else:
            self._logger.debug("Cache miss", item_code=item_code)

        provider_name = self._provider_name
        try:
            price = await self._actual_price_service.get_price_for(item_code)
        except Exception as exc:
            self._logger.warning(
                "Upstream price lookup failed",
                item_code=item_code,
                provider=provider_name,
                error=str(exc),
            )
            raise UpstreamLookupError(
                item_code,
                message=f"getting price for {item_code!r} from service: {exc}",
                provider_name=provider_name,
            ) from exc

        try:
            entry = CacheEntry(price=price, fetched_at=now)
        except ValidationError as exc:
            self._logger.warning(
                "Upstream returned an invalid price",
                item_code=item_code,
                provider=provider_name,
                price=repr(price),
            )
            raise UpstreamLookupError(
                item_code,
                message=f"service returned an invalid price for {item_code!r}: {price!r}",
                provider_name=provider_name,
            ) from exc

        self._prices.store(item_code, entry)
        return entry.price

    async def get_prices_for(self, *item_codes: str) -> list[float]:
        """Return prices for several items at once.

        Each item code gets its own concurrent lookup; some may be served
        from the cache, others fetched upstream.  All lookups run to
        completion before this returns, even after one has failed.

        Prices come back in the order the item codes were given.  Earlier
        versions appended results as lookups finished, which made the order
        depend on upstream timing; results are now written to per-position
        slots instead.

        Raises
        ------
        BatchLookupError
            At least one lookup failed.  ``__cause__`` is the first failure
            to complete; ``partial_results`` holds the prices that did
            resolve, with no placeholders for the failed items.
        """
        if not item_codes:
            return []

        slots: list[float | None] = [None] * len(item_codes)
        failures: list[tuple[int, UpstreamLookupError]] = []
        lock = threading.Lock()

        async def _resolve(index: int, item_code: str) -> None:
            try:
                price = await self.get_price_for(item_code)
            except UpstreamLookupError as exc:
                with lock:
                    failures.append((index, exc))
                return
            with lock:
                slots[index] = price

        outcomes = await throttled_gather(
            [_resolve(i, code) for i, code in enumerate(item_codes)],
            semaphore=make_semaphore(self._max_concurrency),
            return_exceptions=True,
        )
        # _resolve only lets non-lookup errors (e.g. cancellation) escape.
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        if not failures:
            return [price for price in slots if price is not None]

        failed_indexes = {index for index, _ in failures}
        partial_results: list[float] = []
        partial_prices: dict[str, float] = {}
        for index, item_code in enumerate(item_codes):
            price = slots[index]
            if index in failed_indexes or price is None:
                continue
            partial_results.append(price)
            partial_prices[item_code] = price

        failures_by_code: dict[str, UpstreamLookupError] = {}
        for _, exc in failures:
            failures_by_code.setdefault(exc.item_code, exc)

        first_error = failures[0][1]
        self._logger.warning(
            "Batch price lookup failed",
            failed=sorted(failures_by_code),
            failed_count=len(failures),
            succeeded_count=len(partial_results),
        )
        raise BatchLookupError(
            first_error,
            partial_results=partial_results,
            partial_prices=partial_prices,
            failures=failures_by_code,
        ) from first_error

    # -- Inspection / maintenance ---------------------------------------------

    def peek(self, item_code: str) -> CacheEntry | None:
        """Return the stored entry for *item_code* without applying the TTL policy."""
        return self._prices.load(item_code)

    def invalidate(self, item_code: str) -> None:
        """Drop the entry for *item_code* so the next lookup goes upstream."""
        self._prices.delete(item_code)

    def clear(self) -> None:
        self._prices.clear()

    def __len__(self) -> int:
        return len(self._prices)
