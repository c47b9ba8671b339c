"""Storage backends used by the cache."""
