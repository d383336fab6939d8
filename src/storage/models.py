# src/storage/models.py - v1
"""Storage domain models: Article, FormattingJob, AnalyticsMetric."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel

JobStatus = Literal["queued", "processing", "completed", "failed"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Article(BaseModel):
    """Raw research submission. Raw content is never edited in place."""

    id: str
    title: str
    category: str
    template_used: str | None = None
    raw_content: str
    content_hash: str
    abstract: str | None = None
    author_name: str | None = None
    formatted_content: str | None = None
    created_at: datetime


class FormattingJob(BaseModel):
    """One attempt at formatting one article. Retries are new rows."""

    id: str
    article_id: str
    status: JobStatus = "queued"
    retry_count: int = 0
    error_message: str | None = None
    provider_used: str | None = None
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in ("completed", "failed")


class AnalyticsMetric(BaseModel):
    """Daily counter keyed by (metric_name, metric_date)."""

    metric_name: str
    metric_date: str  # YYYY-MM-DD
    metric_value: float
    metadata: dict[str, Any] = {}
