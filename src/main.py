# src/main.py - v1
"""CLI entry point: worker, submit, enqueue, generate, health, status, stats.

Usage:
    kaiville-research worker [--once] [--max-jobs N]
    kaiville-research submit <file> --title T --category C [options]
    kaiville-research enqueue <article_id>
    kaiville-research generate <prompt>
    kaiville-research health [--provider P]
    kaiville-research status <job_id>
    kaiville-research stats [--date YYYY-MM-DD]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from kaiville_research.config.settings import ConfigurationError, Settings
from kaiville_research.logging.logger import setup_logging
from kaiville_research.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = Settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file or None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    args.settings = settings

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="kaiville-research",
        description=f"kaiville-research v{__version__}: research article formatting pipeline",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- worker ---
    p_worker = subparsers.add_parser("worker", help="Run the formatting worker")
    p_worker.add_argument(
        "--once", action="store_true",
        help="Process at most one queued job and exit",
    )
    p_worker.add_argument(
        "--max-jobs", type=int, default=None,
        help="Exit after processing N jobs",
    )
    p_worker.set_defaults(func=_cmd_worker)

    # --- submit ---
    p_submit = subparsers.add_parser("submit", help="Submit an article for formatting")
    p_submit.add_argument("file", type=Path, help="File with the raw article content")
    p_submit.add_argument("--title", required=True, help="Article title")
    p_submit.add_argument("--category", required=True, help="Article category")
    p_submit.add_argument("--template", default=None, help="Template name (default: free-form)")
    p_submit.add_argument("--abstract", default=None, help="Short abstract")
    p_submit.add_argument("--author", default=None, help="Author name")
    p_submit.set_defaults(func=_cmd_submit)

    # --- enqueue ---
    p_enqueue = subparsers.add_parser("enqueue", help="Queue a formatting job for an article")
    p_enqueue.add_argument("article_id", help="Article ID")
    p_enqueue.set_defaults(func=_cmd_enqueue)

    # --- generate ---
    p_generate = subparsers.add_parser("generate", help="Generate content with failover")
    p_generate.add_argument("prompt", help="Prompt text")
    p_generate.add_argument("--max-tokens", type=int, default=None, help="Max completion tokens")
    p_generate.add_argument("--timeout", type=float, default=None, help="Time budget in seconds")
    p_generate.set_defaults(func=_cmd_generate)

    # --- health ---
    p_health = subparsers.add_parser("health", help="Check LLM provider health")
    p_health.add_argument(
        "--provider", default=None,
        help="Check one provider (default: all)",
    )
    p_health.set_defaults(func=_cmd_health)

    # --- status ---
    p_status = subparsers.add_parser("status", help="Show a formatting job")
    p_status.add_argument("job_id", help="Job ID")
    p_status.set_defaults(func=_cmd_status)

    # --- stats ---
    p_stats = subparsers.add_parser("stats", help="Show daily analytics and queue counts")
    p_stats.add_argument(
        "--date", type=date.fromisoformat, default=None,
        help="Day to report (YYYY-MM-DD, default: today)",
    )
    p_stats.set_defaults(func=_cmd_stats)

    return parser


async def _cmd_worker(args: argparse.Namespace) -> int:
    """Run the formatting worker until stopped."""
    from kaiville_research.worker.worker import FormattingWorker

    worker = FormattingWorker.from_settings(args.settings)
    if args.once:
        ran = await worker.run_once()
        print("Processed 1 job" if ran else "Queue is empty")
        return 0

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, worker.stop)
        except NotImplementedError:
            # Windows event loops; Ctrl+C still raises KeyboardInterrupt
            pass

    await worker.run(max_jobs=args.max_jobs)
    return 0


async def _cmd_submit(args: argparse.Namespace) -> int:
    """Store an article from a file and queue it."""
    from kaiville_research.api.facade import submit_article

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    result = await submit_article(
        title=args.title,
        category=args.category,
        raw_content=file_path.read_text(encoding="utf-8"),
        template_used=args.template,
        abstract=args.abstract,
        author_name=args.author,
        settings=args.settings,
    )
    print(f"\nSubmitted:")
    print(f"  Article ID:   {result.article.id}")
    print(f"  Content hash: {result.article.content_hash}")
    print(f"  Job ID:       {result.job.id}")
    return 0


async def _cmd_enqueue(args: argparse.Namespace) -> int:
    """Queue a formatting job for an existing article."""
    from kaiville_research.api.facade import queue_formatting_job
    from kaiville_research.core.errors import ArticleNotFoundError

    try:
        job = await queue_formatting_job(args.article_id, settings=args.settings)
    except ArticleNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    print(f"Queued job {job.id}")
    return 0


async def _cmd_generate(args: argparse.Namespace) -> int:
    """Generate content and print it with usage."""
    from kaiville_research.api.facade import generate
    from kaiville_research.llm.models import CompletionOptions

    result = await generate(
        args.prompt,
        options=CompletionOptions(max_tokens=args.max_tokens),
        settings=args.settings,
        timeout_s=args.timeout,
    )
    print(result.content)
    print(
        f"\n[{result.provider}/{result.model}] "
        f"{result.usage.total_tokens} tokens, ~${result.estimated_cost_usd:.4f}",
        file=sys.stderr,
    )
    return 0


async def _cmd_health(args: argparse.Namespace) -> int:
    """Print provider health. Non-zero exit if any checked provider is unhealthy."""
    from kaiville_research.llm.client import LLMClient

    client = LLMClient.from_settings(args.settings)
    if args.provider:
        results = [await client.health_check(args.provider.lower())]
    else:
        results = await client.health_check_all()

    print(f"\nProvider health:")
    for status in results:
        line = f"  {status.provider:<12} {status.status:<13} {status.model or '-'}"
        if status.latency_ms is not None:
            line += f" ({status.latency_ms}ms)"
        if status.error:
            line += f"  {status.error}"
        print(line)
    return 1 if any(s.status == "unhealthy" for s in results) else 0


async def _cmd_status(args: argparse.Namespace) -> int:
    """Show one job."""
    from kaiville_research.api.facade import job_status

    job = await job_status(args.job_id, settings=args.settings)
    if job is None:
        logger.error("Job not found: %s", args.job_id)
        return 1

    print(f"\nJob {job.id}:")
    print(f"  Article:  {job.article_id}")
    print(f"  Status:   {job.status}")
    print(f"  Retries:  {job.retry_count}")
    if job.provider_used:
        print(f"  Provider: {job.provider_used}")
    if job.error_message:
        print(f"  Error:    {job.error_message}")
    return 0


async def _cmd_stats(args: argparse.Namespace) -> int:
    """Display daily metrics, queue counts and cache totals."""
    from kaiville_research.cache.cache_factory import create_format_cache
    from kaiville_research.storage.database import connect
    from kaiville_research.storage.job_store import JobStore
    from kaiville_research.storage.models import utcnow
    from kaiville_research.tracking.metrics import MetricsTracker

    db = connect(args.settings.database_path)
    summary = await MetricsTracker(db).daily_summary(args.date)
    counts = await JobStore(db).count_by_status()
    cache_stats = await create_format_cache(args.settings, db).stats()

    day = (args.date or utcnow().date()).isoformat()
    print(f"\nMetrics for {day}:")
    if not summary:
        print("  (none)")
    for name, value in summary.items():
        print(f"  {name:<20} {value:g}")

    print(f"\nJobs:")
    for status, n in counts.items():
        print(f"  {status:<12} {n}")

    print(f"\nCache:")
    print(f"  Entries:      {cache_stats.entries}")
    print(f"  Hits served:  {cache_stats.total_accesses}")
    print(f"  Tokens saved: {cache_stats.total_tokens_saved}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
