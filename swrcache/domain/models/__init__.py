"""Value objects shared across the cache engine."""
