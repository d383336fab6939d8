# src/cache/sqlite_store.py - v2
"""SQLite-backed format cache (CACHE_BACKEND=sqlite, the default).

Lives in the `llm_format_cache` table of the pipeline database.
"""

from __future__ import annotations

import logging

from kaiville_research.cache.base_cache_store import BaseFormatCache
from kaiville_research.cache.fingerprint import is_content_hash
from kaiville_research.cache.models import CacheStats, FormattedResult
from kaiville_research.storage.database import Database
from kaiville_research.storage.models import utcnow

logger = logging.getLogger(__name__)


class SqliteFormatCache(BaseFormatCache):
    """Format cache persisted next to articles and jobs."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def lookup(self, content_hash: str) -> FormattedResult | None:
        """Retrieve the cached result for a content hash."""
        row = self._db.fetch_one(
            "SELECT * FROM llm_format_cache WHERE content_hash = ?", (content_hash,)
        )
        if row is None:
            return None
        return FormattedResult(**dict(row))

    async def store(
        self,
        content_hash: str,
        formatted_output: str,
        model_used: str,
        token_count: int = 0,
    ) -> FormattedResult:
        """Insert a result; the first payload for a hash wins."""
        if not is_content_hash(content_hash):
            raise ValueError(f"Not a SHA-256 content hash: {content_hash!r}")
        now = utcnow().isoformat()
        cursor = self._db.execute(
            """INSERT OR IGNORE INTO llm_format_cache
               (content_hash, formatted_output, model_used, token_count,
                created_at, last_accessed, access_count)
               VALUES (?, ?, ?, ?, ?, ?, 0)""",
            (content_hash, formatted_output, model_used, token_count, now, now),
        )
        if cursor.rowcount == 0:
            logger.info("Cache entry %s already present; keeping original", content_hash[:12])
        stored = await self.lookup(content_hash)
        assert stored is not None
        return stored

    async def touch(self, content_hash: str) -> None:
        """Bump access metadata on a hit."""
        self._db.execute(
            """UPDATE llm_format_cache
               SET access_count = access_count + 1, last_accessed = ?
               WHERE content_hash = ?""",
            (utcnow().isoformat(), content_hash),
        )

    async def stats(self) -> CacheStats:
        row = self._db.fetch_one(
            """SELECT COUNT(*) AS entries,
                      COALESCE(SUM(access_count), 0) AS total_accesses,
                      COALESCE(SUM(access_count * token_count), 0) AS total_tokens_saved
               FROM llm_format_cache"""
        )
        return CacheStats(**dict(row)) if row else CacheStats()
