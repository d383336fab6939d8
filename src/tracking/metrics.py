# src/tracking/metrics.py - v1
"""Daily analytics counters in `research_analytics`.

Writes are best-effort: a failed metric write is logged and reported as
False, never raised, so it cannot abort a formatting job. The upsert is a
read-then-write and can lose an increment if two workers race on the same
counter.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date
from typing import Any, Callable

from kaiville_research.storage.database import Database
from kaiville_research.storage.models import AnalyticsMetric, utcnow

logger = logging.getLogger(__name__)

CACHE_HITS = "cache_hits"
CACHE_MISSES = "cache_misses"
LLM_API_CALLS = "llm_api_calls"
LLM_TOKENS_USED = "llm_tokens_used"
FORMATTING_FAILURES = "formatting_failures"


def _today() -> date:
    return utcnow().date()


class MetricsTracker:
    """Upsert and query daily counters."""

    def __init__(self, db: Database, today: Callable[[], date] = _today) -> None:
        self._db = db
        self._today = today

    async def track(
        self, metric_name: str, value: float = 1, metadata: dict[str, Any] | None = None
    ) -> bool:
        """Add `value` to today's counter, creating it if absent."""
        metric_date = self._today().isoformat()
        metadata = metadata or {}
        try:
            existing = self._db.fetch_one(
                """SELECT id, metric_value, metadata FROM research_analytics
                   WHERE metric_name = ? AND metric_date = ?""",
                (metric_name, metric_date),
            )
            if existing is not None:
                merged = {**json.loads(existing["metadata"] or "{}"), **metadata}
                self._db.execute(
                    """UPDATE research_analytics
                       SET metric_value = ?, metadata = ?
                       WHERE id = ?""",
                    (existing["metric_value"] + value, json.dumps(merged), existing["id"]),
                )
            else:
                self._db.execute(
                    """INSERT INTO research_analytics
                       (metric_name, metric_date, metric_value, metadata)
                       VALUES (?, ?, ?, ?)""",
                    (metric_name, metric_date, value, json.dumps(metadata)),
                )
        except (sqlite3.Error, ValueError, TypeError) as e:
            logger.error("Failed to track metric %s: %s", metric_name, e)
            return False
        return True

    async def track_many(self, items: list[tuple[str, float]]) -> bool:
        """Track several (name, value) pairs; True only if all succeeded."""
        results = [await self.track(name, value) for name, value in items]
        return all(results)

    async def get_metric(self, metric_name: str, metric_date: date | None = None) -> float | None:
        day = (metric_date or self._today()).isoformat()
        row = self._db.fetch_one(
            """SELECT metric_value FROM research_analytics
               WHERE metric_name = ? AND metric_date = ?""",
            (metric_name, day),
        )
        return row["metric_value"] if row else None

    async def get_metric_range(
        self, metric_name: str, start: date, end: date
    ) -> list[AnalyticsMetric]:
        """Daily values between two dates inclusive, oldest first."""
        rows = self._db.fetch_all(
            """SELECT metric_name, metric_date, metric_value, metadata
               FROM research_analytics
               WHERE metric_name = ? AND metric_date >= ? AND metric_date <= ?
               ORDER BY metric_date ASC""",
            (metric_name, start.isoformat(), end.isoformat()),
        )
        return [
            AnalyticsMetric(
                metric_name=r["metric_name"],
                metric_date=r["metric_date"],
                metric_value=r["metric_value"],
                metadata=json.loads(r["metadata"] or "{}"),
            )
            for r in rows
        ]

    async def daily_summary(self, metric_date: date | None = None) -> dict[str, float]:
        """All counters for one day as name -> value."""
        day = (metric_date or self._today()).isoformat()
        rows = self._db.fetch_all(
            """SELECT metric_name, metric_value FROM research_analytics
               WHERE metric_date = ? ORDER BY metric_name""",
            (day,),
        )
        return {r["metric_name"]: r["metric_value"] for r in rows}
