"""Cache entry model.

A ``CacheEntry`` is one memoized upstream lookup: the price and the UTC time
it was fetched.  Entries are frozen; a refetch stores a brand-new entry
rather than mutating the old one, so ``fetched_at`` always belongs to the
price stored next to it.

Validity is derived, never stored: an entry is valid at ``now`` iff
``now < fetched_at + max_age``.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator


class CacheEntry(BaseModel):
    """Most recently fetched price for one item code."""

    model_config = ConfigDict(frozen=True)

    price: float
    fetched_at: datetime

    @field_validator("fetched_at")
    @classmethod
    def _require_timezone(cls, value: datetime) -> datetime:
        # Naive datetimes cannot be compared with the cache's UTC clock.
        if value.tzinfo is None:
            raise ValueError("fetched_at must be timezone-aware")
        return value

    def expires_at(self, max_age: timedelta) -> datetime:
        return self.fetched_at + max_age

    def is_valid(self, now: datetime, max_age: timedelta) -> bool:
        """Return ``True`` while ``now`` is strictly before expiry."""
        return now < self.expires_at(max_age)
