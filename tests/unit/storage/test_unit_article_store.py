# tests/unit/storage/test_unit_article_store.py - v1
"""Tests for storage/article_store.py."""

from __future__ import annotations

import pytest

from kaiville_research.cache.fingerprint import compute_content_hash


class TestArticleStore:
    @pytest.mark.asyncio
    async def test_create_computes_hash(self, article_store):
        article = await article_store.create(
            title="Tidal Energy", category="energy", raw_content="Hello world",
        )
        assert article.content_hash == compute_content_hash("Hello world")
        assert article.formatted_content is None
        assert article.id

    @pytest.mark.asyncio
    async def test_get_round_trip(self, article_store):
        created = await article_store.create(
            title="Tidal Energy",
            category="energy",
            raw_content="Body",
            template_used="research-paper",
            abstract="Short",
            author_name="R. Ortiz",
        )
        loaded = await article_store.get(created.id)
        assert loaded == created

    @pytest.mark.asyncio
    async def test_get_missing(self, article_store):
        assert await article_store.get("nope") is None

    @pytest.mark.asyncio
    async def test_set_formatted_content(self, article_store):
        article = await article_store.create(title="T", category="c", raw_content="raw")
        assert await article_store.set_formatted_content(article.id, "# T\n\nraw")
        loaded = await article_store.get(article.id)
        assert loaded.formatted_content == "# T\n\nraw"
        assert loaded.raw_content == "raw"

    @pytest.mark.asyncio
    async def test_set_formatted_content_missing(self, article_store):
        assert not await article_store.set_formatted_content("nope", "x")

    @pytest.mark.asyncio
    async def test_identical_content_same_hash(self, article_store):
        a = await article_store.create(title="A", category="c", raw_content="same")
        b = await article_store.create(title="B", category="d", raw_content="same")
        assert a.id != b.id
        assert a.content_hash == b.content_hash
