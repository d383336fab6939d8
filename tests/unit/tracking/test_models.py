# tests/unit/tracking/test_models.py - v1
"""Tests for tracking/models.py."""

from __future__ import annotations

from kaiville_research.tracking.models import WorkerMetrics


class TestWorkerMetrics:
    def test_starts_at_zero(self):
        m = WorkerMetrics()
        assert m.jobs_processed == m.cache_hits == m.llm_calls == m.failures == 0

    def test_summary(self):
        m = WorkerMetrics(jobs_processed=3, cache_hits=1, cache_misses=2, llm_calls=2,
                          failures=1, total_tokens=450)
        summary = m.summary()
        assert "jobs=3" in summary
        assert "cache_hits=1" in summary
        assert "tokens=450" in summary
        assert "failures=1" in summary
