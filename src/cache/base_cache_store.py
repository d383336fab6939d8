# src/cache/base_cache_store.py - v1
"""Abstract format cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from kaiville_research.cache.models import CacheStats, FormattedResult


class BaseFormatCache(ABC):
    """Content hash -> formatted result. Append-only, never evicted."""

    @abstractmethod
    async def lookup(self, content_hash: str) -> FormattedResult | None:
        """Return the cached result for a hash, or None on a miss."""

    @abstractmethod
    async def store(
        self,
        content_hash: str,
        formatted_output: str,
        model_used: str,
        token_count: int = 0,
    ) -> FormattedResult:
        """Insert a result. An existing entry for the hash is kept as-is."""

    @abstractmethod
    async def touch(self, content_hash: str) -> None:
        """Record a hit: bump access_count and last_accessed."""

    @abstractmethod
    async def stats(self) -> CacheStats:
        """Entry count and access totals."""
