# src/api/facade.py - v1
"""Public API facade for the research formatting pipeline.

Two paths share the LLM layer:
  - generate(): interactive, synchronous generation with failover and a
    hard time budget.
  - submit_article() / queue_formatting_job(): asynchronous formatting,
    picked up later by the FormattingWorker.

Usage:
    from kaiville_research.api.facade import generate
    result = await generate("Draft an abstract on tidal energy")
"""

from __future__ import annotations

import asyncio
import logging

from kaiville_research.api.models import GenerationResult, SubmissionResult
from kaiville_research.config.settings import Settings
from kaiville_research.core.errors import ArticleNotFoundError, GenerationTimeoutError
from kaiville_research.llm.client import LLMClient
from kaiville_research.llm.failover import complete_with_failover
from kaiville_research.llm.models import CompletionOptions
from kaiville_research.storage.article_store import ArticleStore
from kaiville_research.storage.database import Database, connect
from kaiville_research.storage.job_store import JobStore
from kaiville_research.storage.models import FormattingJob
from kaiville_research.tracking.cost_calculator import compute_response_cost

logger = logging.getLogger(__name__)


async def generate(
    prompt: str,
    options: CompletionOptions | dict | None = None,
    settings: Settings | None = None,
    client: LLMClient | None = None,
    timeout_s: float | None = None,
    fallback_chain: list[str] | None = None,
) -> GenerationResult:
    """Generate research content for a prompt, failing over across providers.

    Args:
        prompt: User prompt.
        options: Per-call overrides (max_tokens, temperature, model).
        settings: Global settings. Loaded from .env if None.
        client: LLM client. Built from settings if None.
        timeout_s: Total time budget. Defaults to GENERATE_TIMEOUT_S.
        fallback_chain: Providers after the primary. Defaults to
            LLM_FALLBACK_PROVIDERS.

    Raises:
        ValueError: Empty prompt.
        GenerationTimeoutError: The budget ran out before any provider answered.
        FailoverExhaustedError: Every provider failed or was unconfigured.
    """
    if not prompt or not prompt.strip():
        raise ValueError("prompt must not be empty")

    if client is None:
        settings = settings or Settings()
        client = LLMClient.from_settings(settings)
    settings = client.settings
    timeout = timeout_s if timeout_s is not None else settings.generate_timeout_s

    logger.info("Generating with %s (timeout %ss)", client.provider, timeout)
    try:
        response = await asyncio.wait_for(
            complete_with_failover(client, prompt, options, fallback_chain),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        logger.error("Generation timed out after %ss", timeout)
        raise GenerationTimeoutError(timeout) from e

    cost = compute_response_cost(response)
    return GenerationResult(
        content=response.content,
        usage=response.usage,
        model=response.model,
        provider=response.provider,
        latency_ms=response.latency_ms,
        estimated_cost_usd=cost.total_cost_usd,
    )


async def submit_article(
    title: str,
    category: str,
    raw_content: str,
    template_used: str | None = None,
    abstract: str | None = None,
    author_name: str | None = None,
    db: Database | None = None,
    settings: Settings | None = None,
) -> SubmissionResult:
    """Store a new article and queue its first formatting job.

    Raises:
        ValueError: Missing title, category or content.
    """
    for field, value in (("title", title), ("category", category), ("raw_content", raw_content)):
        if not value or not value.strip():
            raise ValueError(f"{field} must not be empty")

    db = db or _open_db(settings)
    article = await ArticleStore(db).create(
        title=title,
        category=category,
        raw_content=raw_content,
        template_used=template_used,
        abstract=abstract,
        author_name=author_name,
    )
    job = await JobStore(db).enqueue(article.id)
    logger.info("Submitted article %s, queued job %s", article.id, job.id)
    return SubmissionResult(article=article, job=job)


async def queue_formatting_job(
    article_id: str,
    db: Database | None = None,
    settings: Settings | None = None,
) -> FormattingJob:
    """Queue a (re)formatting job for an existing article.

    Raises:
        ArticleNotFoundError: No article with this id.
    """
    db = db or _open_db(settings)
    if await ArticleStore(db).get(article_id) is None:
        raise ArticleNotFoundError(article_id)
    return await JobStore(db).enqueue(article_id)


async def job_status(
    job_id: str,
    db: Database | None = None,
    settings: Settings | None = None,
) -> FormattingJob | None:
    """Current state of a job, or None if unknown."""
    db = db or _open_db(settings)
    return await JobStore(db).get(job_id)


def _open_db(settings: Settings | None) -> Database:
    settings = settings or Settings()
    return connect(settings.database_path)
