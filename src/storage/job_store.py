# src/storage/job_store.py - v1
"""Formatting job queue backed by `research_formatting_jobs`.

Polling-based: the worker asks for the oldest queued row. There is no
lease or row lock, so two workers polling the same database could pick the
same job.
"""

from __future__ import annotations

import logging
import uuid

from kaiville_research.storage.database import Database
from kaiville_research.storage.models import FormattingJob, JobStatus, utcnow

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, article_id, status, retry_count, error_message, provider_used, "
    "created_at, started_at, completed_at"
)


class JobStore:
    """Queue operations for formatting jobs."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def enqueue(self, article_id: str, retry_count: int = 0) -> FormattingJob:
        """Create a new job in `queued` state."""
        job = FormattingJob(
            id=str(uuid.uuid4()),
            article_id=article_id,
            status="queued",
            retry_count=retry_count,
            created_at=utcnow(),
        )
        self._db.execute(
            """INSERT INTO research_formatting_jobs
               (id, article_id, status, retry_count, created_at)
               VALUES (?, ?, 'queued', ?, ?)""",
            (job.id, job.article_id, job.retry_count, job.created_at.isoformat()),
        )
        logger.debug("Enqueued job %s for article %s (retry %d)", job.id, article_id, retry_count)
        return job

    async def get(self, job_id: str) -> FormattingJob | None:
        row = self._db.fetch_one(
            f"SELECT {_COLUMNS} FROM research_formatting_jobs WHERE id = ?", (job_id,)
        )
        return FormattingJob(**dict(row)) if row else None

    async def next_queued(self) -> FormattingJob | None:
        """Oldest queued job (FIFO by creation time, then insertion order)."""
        row = self._db.fetch_one(
            f"""SELECT {_COLUMNS} FROM research_formatting_jobs
                WHERE status = 'queued'
                ORDER BY created_at ASC, seq ASC
                LIMIT 1"""
        )
        return FormattingJob(**dict(row)) if row else None

    async def mark_processing(self, job_id: str) -> None:
        self._db.execute(
            """UPDATE research_formatting_jobs
               SET status = 'processing', started_at = ?
               WHERE id = ?""",
            (utcnow().isoformat(), job_id),
        )

    async def mark_completed(self, job_id: str, provider_used: str | None) -> None:
        self._db.execute(
            """UPDATE research_formatting_jobs
               SET status = 'completed', completed_at = ?, provider_used = ?
               WHERE id = ?""",
            (utcnow().isoformat(), provider_used, job_id),
        )

    async def mark_failed(self, job_id: str, error_message: str, retry_count: int) -> None:
        self._db.execute(
            """UPDATE research_formatting_jobs
               SET status = 'failed', error_message = ?, retry_count = ?,
                   completed_at = ?
               WHERE id = ?""",
            (error_message, retry_count, utcnow().isoformat(), job_id),
        )

    async def list_for_article(self, article_id: str) -> list[FormattingJob]:
        """All jobs for an article, oldest first (the retry history)."""
        rows = self._db.fetch_all(
            f"""SELECT {_COLUMNS} FROM research_formatting_jobs
                WHERE article_id = ?
                ORDER BY created_at ASC, seq ASC""",
            (article_id,),
        )
        return [FormattingJob(**dict(r)) for r in rows]

    async def count_by_status(self) -> dict[JobStatus, int]:
        rows = self._db.fetch_all(
            "SELECT status, COUNT(*) AS n FROM research_formatting_jobs GROUP BY status"
        )
        counts: dict[JobStatus, int] = {
            "queued": 0, "processing": 0, "completed": 0, "failed": 0,
        }
        for r in rows:
            counts[r["status"]] = r["n"]
        return counts
