# src/storage/database.py - v1
"""SQLite database holding the four tables the formatting pipeline uses.

Uses stdlib sqlite3. Every store method commits its own write; nothing
spans tables in one transaction, so a crash between steps can leave, for
example, a cached result whose article was not yet updated.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS research_center_articles (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    category TEXT NOT NULL,
    template_used TEXT,
    raw_content TEXT NOT NULL,
    content_hash TEXT NOT NULL,
    abstract TEXT,
    author_name TEXT,
    formatted_content TEXT,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_articles_content_hash
    ON research_center_articles(content_hash);

CREATE TABLE IF NOT EXISTS research_formatting_jobs (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    article_id TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'queued',
    retry_count INTEGER NOT NULL DEFAULT 0,
    error_message TEXT,
    provider_used TEXT,
    created_at TEXT NOT NULL,
    started_at TEXT,
    completed_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_jobs_status_created
    ON research_formatting_jobs(status, created_at);
CREATE INDEX IF NOT EXISTS idx_jobs_article
    ON research_formatting_jobs(article_id);

CREATE TABLE IF NOT EXISTS llm_format_cache (
    content_hash TEXT PRIMARY KEY,
    formatted_output TEXT NOT NULL,
    model_used TEXT NOT NULL,
    token_count INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    last_accessed TEXT NOT NULL,
    access_count INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS research_analytics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    metric_name TEXT NOT NULL,
    metric_date TEXT NOT NULL,
    metric_value REAL NOT NULL DEFAULT 0,
    metadata TEXT NOT NULL DEFAULT '{}',
    UNIQUE (metric_name, metric_date)
);
"""

MEMORY = ":memory:"


class Database:
    """Thin wrapper over a single sqlite3 connection."""

    def __init__(self, db_path: Path | str = MEMORY) -> None:
        if str(db_path) == MEMORY:
            self._path = MEMORY
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._path = str(path)
        self._conn = sqlite3.connect(self._path)
        self._conn.row_factory = sqlite3.Row
        if self._path != MEMORY:
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("Opened database %s", self._path)

    @property
    def path(self) -> str:
        return self._path

    def execute(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Cursor:
        """Run one statement and commit it."""
        cursor = self._conn.execute(sql, tuple(params))
        self._conn.commit()
        return cursor

    def fetch_one(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Row | None:
        return self._conn.execute(sql, tuple(params)).fetchone()

    def fetch_all(self, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
        return self._conn.execute(sql, tuple(params)).fetchall()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()


def connect(db_path: Path | str = MEMORY) -> Database:
    """Open (and create if needed) the pipeline database."""
    return Database(db_path)
