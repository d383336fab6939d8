# tests/unit/tracking/test_unit_metrics.py - v1
"""Tests for tracking/metrics.py - daily counters."""

from __future__ import annotations

from datetime import date

import pytest

from kaiville_research.tracking.metrics import CACHE_HITS, LLM_TOKENS_USED, MetricsTracker

DAY = date(2026, 2, 1)


@pytest.fixture
def fixed_tracker(db) -> MetricsTracker:
    return MetricsTracker(db, today=lambda: DAY)


class TestTrack:
    @pytest.mark.asyncio
    async def test_insert_then_increment(self, fixed_tracker):
        assert await fixed_tracker.track(CACHE_HITS)
        assert await fixed_tracker.track(CACHE_HITS)
        assert await fixed_tracker.get_metric(CACHE_HITS) == 2

    @pytest.mark.asyncio
    async def test_value(self, fixed_tracker):
        await fixed_tracker.track(LLM_TOKENS_USED, 150)
        await fixed_tracker.track(LLM_TOKENS_USED, 75)
        assert await fixed_tracker.get_metric(LLM_TOKENS_USED, DAY) == 225

    @pytest.mark.asyncio
    async def test_metadata_merge(self, fixed_tracker):
        await fixed_tracker.track("llm_api_calls", 1, {"provider": "openai", "model": "gpt-4"})
        await fixed_tracker.track("llm_api_calls", 1, {"provider": "xai"})
        [row] = await fixed_tracker.get_metric_range("llm_api_calls", DAY, DAY)
        assert row.metadata == {"provider": "xai", "model": "gpt-4"}

    @pytest.mark.asyncio
    async def test_one_row_per_day(self, db):
        days = iter([date(2026, 2, 1), date(2026, 2, 2), date(2026, 2, 2)])
        tracker = MetricsTracker(db, today=lambda: next(days))
        await tracker.track(CACHE_HITS)
        await tracker.track(CACHE_HITS)
        await tracker.track(CACHE_HITS)
        rows = await tracker.get_metric_range(CACHE_HITS, date(2026, 2, 1), date(2026, 2, 28))
        assert [(r.metric_date, r.metric_value) for r in rows] == [
            ("2026-02-01", 1), ("2026-02-02", 2),
        ]

    @pytest.mark.asyncio
    async def test_failure_returns_false(self, db, fixed_tracker):
        db.close()
        assert await fixed_tracker.track(CACHE_HITS) is False

    @pytest.mark.asyncio
    async def test_unserializable_metadata_returns_false(self, fixed_tracker):
        assert await fixed_tracker.track(CACHE_HITS, 1, {"obj": object()}) is False


class TestQueries:
    @pytest.mark.asyncio
    async def test_missing_metric(self, fixed_tracker):
        assert await fixed_tracker.get_metric("nothing") is None

    @pytest.mark.asyncio
    async def test_track_many(self, fixed_tracker):
        assert await fixed_tracker.track_many([("llm_api_calls", 1), (LLM_TOKENS_USED, 300)])
        assert await fixed_tracker.daily_summary() == {
            "llm_api_calls": 1, LLM_TOKENS_USED: 300,
        }

    @pytest.mark.asyncio
    async def test_daily_summary_other_day_empty(self, fixed_tracker):
        await fixed_tracker.track(CACHE_HITS)
        assert await fixed_tracker.daily_summary(date(2026, 1, 1)) == {}
