"""Unit tests for TransparentCache.get_prices_for (concurrent batch lookup)."""

from __future__ import annotations

import asyncio

import pytest

from pricecache.services.transparent_cache import TransparentCache
from pricecache.utils.errors import BatchLookupError, UpstreamLookupError


class TestBatchSuccess:
    @pytest.mark.asyncio
    async def test_all_succeed_returns_every_price(self, price_service, clock) -> None:
        cache = TransparentCache(price_service, 60, clock=clock)
        prices = await cache.get_prices_for("apple", "pear", "plum")

        assert len(prices) == 3
        assert set(prices) == {10.0, 3.5, 7.25}

    @pytest.mark.asyncio
    async def test_results_follow_input_order_not_completion_order(self, make_service, clock) -> None:
        service = make_service(
            prices={"a": 1.0, "b": 2.0, "c": 3.0},
            delays={"a": 0.05, "b": 0.02, "c": 0.0},
        )
        cache = TransparentCache(service, 60, clock=clock)

        assert await cache.get_prices_for("a", "b", "c") == [1.0, 2.0, 3.0]
        assert service.completed == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_calls(self, price_service, clock) -> None:
        cache = TransparentCache(price_service, 60, clock=clock)
        assert await cache.get_prices_for() == []
        assert price_service.total_calls == 0

    @pytest.mark.asyncio
    async def test_batch_mixes_cached_and_fetched(self, price_service, clock) -> None:
        cache = TransparentCache(price_service, 60, clock=clock)
        await cache.get_price_for("apple")

        prices = await cache.get_prices_for("apple", "pear")
        assert prices == [10.0, 3.5]
        assert price_service.calls["apple"] == 1
        assert price_service.calls["pear"] == 1

    @pytest.mark.asyncio
    async def test_duplicate_codes_each_get_a_slot(self, price_service, clock) -> None:
        cache = TransparentCache(price_service, 60, clock=clock)
        prices = await cache.get_prices_for("pear", "pear")
        assert prices == [3.5, 3.5]

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self, make_service, clock) -> None:
        service = make_service(
            prices={code: 1.0 for code in "abcde"},
            delays={code: 0.02 for code in "abcde"},
        )
        cache = TransparentCache(service, 60, clock=clock)
        await cache.get_prices_for(*"abcde")
        assert service.max_in_flight == 5

    @pytest.mark.asyncio
    async def test_max_concurrency_bounds_in_flight_lookups(self, make_service, clock) -> None:
        service = make_service(
            prices={code: 1.0 for code in "abcdef"},
            delays={code: 0.01 for code in "abcdef"},
        )
        cache = TransparentCache(service, 60, clock=clock, max_concurrency=2)

        prices = await cache.get_prices_for(*"abcdef")
        assert prices == [1.0] * 6
        assert service.max_in_flight == 2


class TestBatchFailure:
    @pytest.mark.asyncio
    async def test_failure_raises_with_partial_results(self, make_service, clock) -> None:
        service = make_service(prices={"A": 1.5}, failing={"B"})
        cache = TransparentCache(service, 60, clock=clock)

        with pytest.raises(BatchLookupError) as exc_info:
            await cache.get_prices_for("A", "B")

        err = exc_info.value
        assert err.partial_results == [1.5]
        assert err.partial_prices == {"A": 1.5}
        assert 0.0 not in err.partial_results
        assert set(err.failures) == {"B"}
        assert isinstance(err.__cause__, UpstreamLookupError)
        assert err.__cause__.item_code == "B"
        assert err.first_error is err.__cause__

    @pytest.mark.asyncio
    async def test_failure_does_not_cancel_slower_siblings(self, make_service, clock) -> None:
        service = make_service(prices={"slow": 9.0}, failing={"fast"}, delays={"slow": 0.05})
        cache = TransparentCache(service, 60, clock=clock)

        with pytest.raises(BatchLookupError) as exc_info:
            await cache.get_prices_for("fast", "slow")

        assert service.completed == ["fast", "slow"]
        assert exc_info.value.partial_results == [9.0]
        # The sibling's result was stored, so it is not wasted.
        assert cache.peek("slow") is not None
        assert cache.peek("fast") is None

    @pytest.mark.asyncio
    async def test_first_completed_failure_is_the_cause(self, make_service, clock) -> None:
        service = make_service(failing={"x", "y"}, delays={"x": 0.04, "y": 0.0})
        cache = TransparentCache(service, 60, clock=clock)

        with pytest.raises(BatchLookupError) as exc_info:
            await cache.get_prices_for("x", "y")

        err = exc_info.value
        assert err.__cause__.item_code == "y"
        assert set(err.failures) == {"x", "y"}
        assert err.partial_results == []
        assert "2 item(s)" in str(err)

    @pytest.mark.asyncio
    async def test_failed_items_retry_on_next_batch(self, make_service, clock) -> None:
        service = make_service(prices={"A": 1.0, "B": 2.0}, failing={"B"})
        cache = TransparentCache(service, 60, clock=clock)

        with pytest.raises(BatchLookupError):
            await cache.get_prices_for("A", "B")

        service.failing.clear()
        assert await cache.get_prices_for("A", "B") == [1.0, 2.0]
        assert service.calls["A"] == 1
        assert service.calls["B"] == 2

    @pytest.mark.asyncio
    async def test_outer_cancellation_propagates(self, make_service, clock) -> None:
        service = make_service(prices={"a": 1.0}, delays={"a": 1.0})
        cache = TransparentCache(service, 60, clock=clock)

        task = asyncio.create_task(cache.get_prices_for("a"))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert cache.peek("a") is None
