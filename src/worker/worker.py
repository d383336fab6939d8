# src/worker/worker.py - v1
"""Background formatting worker.

Polls `research_formatting_jobs` for the oldest queued job and formats the
article behind it: a cache hit on the article's content hash reuses the
stored output, a miss goes through provider failover. Failed jobs are kept
as `failed` rows and a fresh `queued` row is inserted while the retry
budget lasts.

Usage:
    worker = FormattingWorker.from_settings(settings)
    await worker.run()
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time

from kaiville_research.cache.base_cache_store import BaseFormatCache
from kaiville_research.cache.cache_factory import create_format_cache
from kaiville_research.config.settings import Settings
from kaiville_research.core.errors import ArticleNotFoundError
from kaiville_research.llm.client import LLMClient
from kaiville_research.llm.client_factory import ClientFactory, create_llm_client
from kaiville_research.llm.failover import complete_with_failover
from kaiville_research.logging.context import clear_context, set_job_context
from kaiville_research.storage.article_store import ArticleStore
from kaiville_research.storage.database import Database, connect
from kaiville_research.storage.job_store import JobStore
from kaiville_research.storage.models import Article, FormattingJob
from kaiville_research.tracking import metrics as metric_names
from kaiville_research.tracking.metrics import MetricsTracker
from kaiville_research.tracking.models import WorkerMetrics
from kaiville_research.worker.parsing import extract_formatted_content
from kaiville_research.worker.prompts import build_formatting_prompt

logger = logging.getLogger(__name__)

CACHE_PROVIDER = "cache"


class FormattingWorker:
    """Single-process job loop over the formatting queue."""

    def __init__(
        self,
        settings: Settings,
        articles: ArticleStore,
        jobs: JobStore,
        cache: BaseFormatCache,
        tracker: MetricsTracker,
        client: LLMClient,
    ) -> None:
        self._settings = settings
        self._articles = articles
        self._jobs = jobs
        self._cache = cache
        self._tracker = tracker
        self._client = client
        self._metrics = WorkerMetrics()
        self._stop_event = asyncio.Event()
        self._last_metrics_log = time.monotonic()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        db: Database | None = None,
        factory: ClientFactory = create_llm_client,
    ) -> FormattingWorker:
        """Wire stores, cache, tracker and LLM client from settings."""
        db = db or connect(settings.database_path)
        return cls(
            settings=settings,
            articles=ArticleStore(db),
            jobs=JobStore(db),
            cache=create_format_cache(settings, db),
            tracker=MetricsTracker(db),
            client=LLMClient.from_settings(settings, factory=factory),
        )

    @property
    def metrics(self) -> WorkerMetrics:
        return self._metrics

    def stop(self) -> None:
        """Ask the loop to exit after the current job."""
        self._stop_event.set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    # -- job processing ---------------------------------------------------

    async def process_job(self, job: FormattingJob) -> bool:
        """Format one job's article. Returns True on success.

        Failures never propagate: the job is marked failed and, if the
        retry budget allows, a new queued job is inserted. Jobs that are
        already completed or failed are skipped.
        """
        if job.is_terminal:
            logger.warning("Job %s is already %s, skipping", job.id, job.status)
            return False

        set_job_context(job.id, job.article_id)
        logger.info("Processing article %s (retry %d)", job.article_id, job.retry_count)
        try:
            await self._jobs.mark_processing(job.id)
            try:
                article = await self._articles.get(job.article_id)
                if article is None:
                    raise ArticleNotFoundError(job.article_id)
                formatted, provider_used = await self._format(article)
                await self._articles.set_formatted_content(article.id, formatted)
                await self._jobs.mark_completed(job.id, provider_used)
            except Exception as e:
                await self._handle_failure(job, e)
                return False
            self._metrics.jobs_processed += 1
            logger.info("Job complete (provider=%s)", provider_used)
            return True
        finally:
            clear_context()

    async def _format(self, article: Article) -> tuple[str, str]:
        """Return (formatted_content, provider_used) for an article."""
        cached = await self._cache.lookup(article.content_hash)
        if cached is not None:
            logger.info("Cache hit for %s", article.content_hash[:12])
            self._metrics.cache_hits += 1
            await self._touch_cache(article.content_hash)
            await self._tracker.track(metric_names.CACHE_HITS, 1)
            return cached.formatted_output, CACHE_PROVIDER

        logger.info("Cache miss for %s, calling LLM", article.content_hash[:12])
        self._metrics.cache_misses += 1
        await self._tracker.track(metric_names.CACHE_MISSES, 1)

        prompt = build_formatting_prompt(article)
        response = await complete_with_failover(self._client, prompt)

        formatted, parsed = extract_formatted_content(response.content)
        if not parsed:
            logger.warning("Response from %s is not a JSON envelope, using raw text", response.provider)

        tokens = response.total_tokens
        logger.info("Formatted with %s/%s (%d tokens)", response.provider, response.model, tokens)
        await self._store_cache(article.content_hash, formatted, response.model, tokens)

        self._metrics.llm_calls += 1
        self._metrics.total_tokens += tokens
        await self._tracker.track(metric_names.LLM_API_CALLS, 1)
        await self._tracker.track(metric_names.LLM_TOKENS_USED, tokens)
        return formatted, response.provider

    async def _touch_cache(self, content_hash: str) -> None:
        try:
            await self._cache.touch(content_hash)
        except sqlite3.Error as e:
            logger.warning("Failed to update cache access stats: %s", e)

    async def _store_cache(
        self, content_hash: str, formatted: str, model: str, tokens: int
    ) -> None:
        try:
            await self._cache.store(content_hash, formatted, model, tokens)
        except (sqlite3.Error, ValueError) as e:
            logger.warning("Failed to cache formatted output: %s", e)

    async def _handle_failure(self, job: FormattingJob, error: Exception) -> None:
        """Mark the job failed and requeue while retries remain."""
        self._metrics.failures += 1
        logger.error("Job failed: %s", error)
        await self._jobs.mark_failed(job.id, str(error), job.retry_count + 1)

        if job.retry_count < self._settings.worker_max_retries:
            retry = await self._jobs.enqueue(job.article_id, retry_count=job.retry_count + 1)
            logger.info(
                "Requeued as %s (retry %d of %d)",
                retry.id, retry.retry_count, self._settings.worker_max_retries,
            )
        else:
            logger.error("Max retries exceeded for article %s, giving up", job.article_id)

        await self._tracker.track(metric_names.FORMATTING_FAILURES, 1)

    # -- loop -------------------------------------------------------------

    async def run_once(self) -> bool:
        """Process the oldest queued job, if any. Returns whether one ran."""
        job = await self._jobs.next_queued()
        if job is None:
            return False
        await self.process_job(job)
        return True

    async def run(self, max_jobs: int | None = None, until_idle: bool = False) -> WorkerMetrics:
        """Poll and process jobs until stopped.

        Args:
            max_jobs: Exit after this many jobs (successful or not).
            until_idle: Exit the first time the queue is empty instead of
                sleeping.
        """
        logger.info(
            "Formatting worker started (poll=%dms, max_retries=%d)",
            self._settings.worker_poll_interval, self._settings.worker_max_retries,
        )
        handled = 0
        while not self.stopping:
            if max_jobs is not None and handled >= max_jobs:
                break
            try:
                ran = await self.run_once()
            except Exception:
                logger.exception("Worker loop error")
                await self._sleep(self._settings.poll_interval_s)
                continue

            if ran:
                handled += 1
            elif until_idle:
                break
            else:
                await self._sleep(self._settings.poll_interval_s)
            self._maybe_log_metrics()

        logger.info("Formatting worker stopped. Final metrics: %s", self._metrics.summary())
        return self._metrics

    async def _sleep(self, seconds: float) -> None:
        """Sleep, waking early if stop() is called."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    def _maybe_log_metrics(self) -> None:
        now = time.monotonic()
        if now - self._last_metrics_log >= self._settings.worker_metrics_log_interval:
            logger.info("Worker metrics: %s", self._metrics.summary())
            self._last_metrics_log = now
