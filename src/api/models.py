# src/api/models.py - v1
"""API-level models: GenerationResult, SubmissionResult."""

from __future__ import annotations

from pydantic import BaseModel

from kaiville_research.llm.models import TokenUsage
from kaiville_research.storage.models import Article, FormattingJob


class GenerationResult(BaseModel):
    """Return value of facade.generate()."""

    content: str
    usage: TokenUsage
    model: str
    provider: str
    latency_ms: int = 0
    estimated_cost_usd: float = 0.0


class SubmissionResult(BaseModel):
    """Return value of facade.submit_article(): the article and its first job."""

    article: Article
    job: FormattingJob
