"""Configuration module — exports CacheSettings and the YAML loader.

Settings are read from the environment only when a caller asks for them
(``CacheSettings()``, ``load_config`` or ``TransparentCache.from_settings``),
never at import time.
"""

from pricecache.config.loader import load_config, settings_from_config
from pricecache.config.settings import CacheSettings

__all__ = ["CacheSettings", "load_config", "settings_from_config"]
