"""Shared concurrency primitives for batched price lookups.

**throttled_gather** is a drop-in replacement for ``asyncio.gather`` that
optionally wraps each awaitable in a semaphore acquire/release.  With no
semaphore every awaitable runs at once; with one, at most ``limit``
awaitables execute simultaneously while the rest wait for a slot.

Unlike ``asyncio.TaskGroup``, a failure in one awaitable never cancels its
siblings: every awaitable runs to completion and exceptions are returned in
place of results when ``return_exceptions`` is true.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

import structlog

from pricecache.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


def make_semaphore(limit: int | None) -> asyncio.Semaphore | None:
    """Return a semaphore bounding concurrency to *limit*, or ``None`` for unbounded."""
    if limit is None:
        return None
    return asyncio.Semaphore(limit)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with optional semaphore throttling.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Optional semaphore for concurrency control.  ``None`` runs every
        awaitable at once.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input awaitables.
    """
    if semaphore is None:
        return await asyncio.gather(*coros, return_exceptions=return_exceptions)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    _logger.debug("throttled_gather", tasks=len(coros))
    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
