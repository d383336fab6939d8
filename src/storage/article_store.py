# src/storage/article_store.py - v1
"""Articles: created by the submission path, read and annotated by the worker."""

from __future__ import annotations

import logging
import uuid

from kaiville_research.cache.fingerprint import compute_content_hash
from kaiville_research.storage.database import Database
from kaiville_research.storage.models import Article, utcnow

logger = logging.getLogger(__name__)


class ArticleStore:
    """CRUD over `research_center_articles`."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(
        self,
        title: str,
        category: str,
        raw_content: str,
        template_used: str | None = None,
        abstract: str | None = None,
        author_name: str | None = None,
    ) -> Article:
        """Insert a new article; the content hash is computed here."""
        article = Article(
            id=str(uuid.uuid4()),
            title=title,
            category=category,
            template_used=template_used,
            raw_content=raw_content,
            content_hash=compute_content_hash(raw_content),
            abstract=abstract,
            author_name=author_name,
            created_at=utcnow(),
        )
        self._db.execute(
            """INSERT INTO research_center_articles
               (id, title, category, template_used, raw_content, content_hash,
                abstract, author_name, formatted_content, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, NULL, ?)""",
            (
                article.id,
                article.title,
                article.category,
                article.template_used,
                article.raw_content,
                article.content_hash,
                article.abstract,
                article.author_name,
                article.created_at.isoformat(),
            ),
        )
        logger.info("Created article %s (%s)", article.id, article.content_hash[:12])
        return article

    async def get(self, article_id: str) -> Article | None:
        row = self._db.fetch_one(
            "SELECT * FROM research_center_articles WHERE id = ?", (article_id,)
        )
        return Article(**dict(row)) if row else None

    async def set_formatted_content(self, article_id: str, formatted_content: str) -> bool:
        """Write the worker's output onto the article. Returns False if missing."""
        cursor = self._db.execute(
            "UPDATE research_center_articles SET formatted_content = ? WHERE id = ?",
            (formatted_content, article_id),
        )
        return cursor.rowcount > 0
