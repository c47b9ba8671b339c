"""Cache settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``PRICECACHE_MAX_AGE_SECONDS=30``
  2. A ``.env`` file in the working directory

Defaults below apply when neither source sets a field.
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """pricecache settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRICECACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache policy ===
    max_age_seconds: float = Field(default=60.0, ge=0)
    # None = launch every batch item at once.
    max_concurrency: int | None = Field(default=None, ge=1)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def max_age(self) -> timedelta:
        return timedelta(seconds=self.max_age_seconds)
