# src/cache/cache_factory.py - v2
"""Factory for format cache instantiation."""

from __future__ import annotations

from kaiville_research.cache.base_cache_store import BaseFormatCache
from kaiville_research.config.settings import Settings
from kaiville_research.storage.database import Database


def create_format_cache(
    settings: Settings | None = None, db: Database | None = None
) -> BaseFormatCache:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the sqlite backend.
        db: Pipeline database, required for the sqlite backend.

    Returns:
        Configured BaseFormatCache implementation.
    """
    backend = "sqlite" if settings is None else settings.cache_backend

    if backend == "memory":
        from kaiville_research.cache.memory_store import MemoryFormatCache
        return MemoryFormatCache()

    if backend == "sqlite":
        from kaiville_research.cache.sqlite_store import SqliteFormatCache
        if db is None:
            raise ValueError("A Database is required when CACHE_BACKEND=sqlite")
        return SqliteFormatCache(db)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
