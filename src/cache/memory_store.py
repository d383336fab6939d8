# src/cache/memory_store.py - v1
"""In-process format cache (CACHE_BACKEND=memory).

Lost on restart; meant for tests and dry runs.
"""

from __future__ import annotations

from kaiville_research.cache.base_cache_store import BaseFormatCache
from kaiville_research.cache.fingerprint import is_content_hash
from kaiville_research.cache.models import CacheStats, FormattedResult
from kaiville_research.storage.models import utcnow


class MemoryFormatCache(BaseFormatCache):
    """Dict-backed format cache."""

    def __init__(self) -> None:
        self._entries: dict[str, FormattedResult] = {}

    async def lookup(self, content_hash: str) -> FormattedResult | None:
        entry = self._entries.get(content_hash)
        return entry.model_copy() if entry else None

    async def store(
        self,
        content_hash: str,
        formatted_output: str,
        model_used: str,
        token_count: int = 0,
    ) -> FormattedResult:
        if not is_content_hash(content_hash):
            raise ValueError(f"Not a SHA-256 content hash: {content_hash!r}")
        if content_hash not in self._entries:
            now = utcnow()
            self._entries[content_hash] = FormattedResult(
                content_hash=content_hash,
                formatted_output=formatted_output,
                model_used=model_used,
                token_count=token_count,
                created_at=now,
                last_accessed=now,
            )
        return self._entries[content_hash].model_copy()

    async def touch(self, content_hash: str) -> None:
        entry = self._entries.get(content_hash)
        if entry is None:
            return
        entry.access_count += 1
        entry.last_accessed = utcnow()

    async def stats(self) -> CacheStats:
        entries = list(self._entries.values())
        return CacheStats(
            entries=len(entries),
            total_accesses=sum(e.access_count for e in entries),
            total_tokens_saved=sum(e.access_count * e.token_count for e in entries),
        )
