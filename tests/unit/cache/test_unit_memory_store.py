# tests/unit/cache/test_unit_memory_store.py - v1
"""Tests for cache/memory_store.py."""

from __future__ import annotations

import pytest

from kaiville_research.cache.fingerprint import compute_content_hash

H1 = compute_content_hash("Hello world")


class TestMemoryFormatCache:
    @pytest.mark.asyncio
    async def test_store_and_lookup(self, memory_cache):
        await memory_cache.store(H1, "out", "sonar-pro", 42)
        hit = await memory_cache.lookup(H1)
        assert hit.formatted_output == "out"
        assert hit.token_count == 42

    @pytest.mark.asyncio
    async def test_first_payload_wins(self, memory_cache):
        await memory_cache.store(H1, "first", "m")
        await memory_cache.store(H1, "second", "m")
        assert (await memory_cache.lookup(H1)).formatted_output == "first"

    @pytest.mark.asyncio
    async def test_lookup_returns_copy(self, memory_cache):
        await memory_cache.store(H1, "out", "m")
        hit = await memory_cache.lookup(H1)
        hit.formatted_output = "mutated"
        assert (await memory_cache.lookup(H1)).formatted_output == "out"

    @pytest.mark.asyncio
    async def test_touch_and_stats(self, memory_cache):
        await memory_cache.store(H1, "out", "m", 10)
        await memory_cache.touch(H1)
        stats = await memory_cache.stats()
        assert stats.entries == 1
        assert stats.total_accesses == 1
        assert stats.total_tokens_saved == 10

    @pytest.mark.asyncio
    async def test_rejects_non_hash_key(self, memory_cache):
        with pytest.raises(ValueError):
            await memory_cache.store("short", "out", "m")
