# src/cache/models.py - v1
"""Cache domain models: FormattedResult, CacheStats."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class FormattedResult(BaseModel):
    """Formatted output previously computed for one content hash.

    The payload fields (formatted_output, model_used, token_count) never
    change after insert; only the access metadata does.
    """

    content_hash: str
    formatted_output: str
    model_used: str
    token_count: int = 0
    created_at: datetime
    last_accessed: datetime
    access_count: int = 0


class CacheStats(BaseModel):
    """Aggregate view of the cache."""

    entries: int = 0
    total_accesses: int = 0
    total_tokens_saved: int = 0
