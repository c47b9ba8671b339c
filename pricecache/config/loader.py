"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- static defaults checked into the repo
  2. .env file           -- local developer overrides
  3. Environment vars    -- set at deploy time

Only settings explicitly provided by the environment (or .env) override the
YAML file; pydantic defaults never clobber a YAML value.
"""

from pathlib import Path

import yaml

from pricecache.config.settings import CacheSettings

# Settings field -> (section, key) in the YAML document.
_FIELD_PATHS: dict[str, tuple[str, str]] = {
    "max_age_seconds": ("cache", "max_age_seconds"),
    "max_concurrency": ("cache", "max_concurrency"),
    "app_env": ("app", "env"),
    "log_level": ("logging", "level"),
}


def load_config(path: str = "config/config.yaml") -> dict:
    """Load YAML config and merge with environment-based CacheSettings.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = CacheSettings()
    defaults: dict = {}
    env_overrides: dict = {}
    for field_name, (section, key) in _FIELD_PATHS.items():
        value = getattr(settings, field_name)
        target = env_overrides if field_name in settings.model_fields_set else defaults
        target.setdefault(section, {})[key] = value

    _deep_merge(defaults, yaml_config)
    _deep_merge(defaults, env_overrides)
    return defaults


def settings_from_config(config: dict) -> CacheSettings:
    """Build validated CacheSettings from a resolved configuration dict."""
    values = {}
    for field_name, (section, key) in _FIELD_PATHS.items():
        section_values = config.get(section) or {}
        if key in section_values:
            values[field_name] = section_values[key]
    return CacheSettings(**values)


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
