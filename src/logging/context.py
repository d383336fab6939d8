# src/logging/context.py - v1
"""Contextual logging support: attach job_id, article_id, provider to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per formatting job.
_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_article_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "article_id", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    job_id: str | None = None
    article_id: str | None = None
    provider: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        job_id=_job_id.get(),
        article_id=_article_id.get(),
        provider=_provider.get(),
    )


def set_job_context(job_id: str, article_id: str) -> None:
    """Set job-level context (called once per processed job)."""
    _job_id.set(job_id)
    _article_id.set(article_id)


def set_provider_context(provider: str | None) -> None:
    """Set the provider currently being attempted."""
    _provider.set(provider)


def clear_context() -> None:
    """Reset all context variables."""
    _job_id.set(None)
    _article_id.set(None)
    _provider.set(None)
