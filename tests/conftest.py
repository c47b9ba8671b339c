"""Shared pytest fixtures for the pricecache test suite."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest

from pricecache.interfaces.price_service import IPriceService


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class StubPriceService(IPriceService):
    """Upstream stub with per-item scripted prices and call counting.

    ``prices`` maps an item code to either a single price or a list of
    prices returned on successive calls (the last one repeats).  Item codes
    in ``failing`` raise ``RuntimeError``.  ``delays`` adds an
    ``asyncio.sleep`` before answering.
    """

    def __init__(
        self,
        prices: dict[str, float | list[float]] | None = None,
        failing: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.prices = dict(prices or {})
        self.failing = set(failing or ())
        self.delays = dict(delays or {})
        self.calls: dict[str, int] = defaultdict(int)
        self.returned: dict[str, list[float]] = defaultdict(list)
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def get_price_for(self, item_code: str) -> float:
        call_index = self.calls[item_code]
        self.calls[item_code] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(item_code, 0.0)
            if delay:
                await asyncio.sleep(delay)
            if item_code in self.failing:
                raise RuntimeError(f"no price for {item_code}")
            scripted = self.prices[item_code]
            if isinstance(scripted, list):
                price = scripted[min(call_index, len(scripted) - 1)]
            else:
                price = scripted
            self.returned[item_code].append(price)
            return price
        finally:
            self.in_flight -= 1
            self.completed.append(item_code)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def price_service() -> StubPriceService:
    return StubPriceService(
        prices={"apple": [10.0, 20.0], "pear": 3.5, "plum": 7.25},
    )


@pytest.fixture
def make_service() -> type[StubPriceService]:
    """Return the stub class so tests can script their own upstream."""
    return StubPriceService
