# src/core/errors.py - v1
"""Error taxonomy for the formatting pipeline.

ConfigurationError lives in config/settings.py and is re-exported here so
callers can import every pipeline error from one place.
"""

from __future__ import annotations

from kaiville_research.config.settings import ConfigurationError

__all__ = [
    "ArticleNotFoundError",
    "ConfigurationError",
    "FailoverExhaustedError",
    "GenerationTimeoutError",
    "ParseError",
    "ProviderError",
]


class ProviderError(Exception):
    """A single provider attempt failed (HTTP error, bad response, stub provider)."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class FailoverExhaustedError(Exception):
    """Every candidate provider in the failover chain failed or was skipped."""

    def __init__(self, attempted: list[str], last_error: Exception | None):
        self.attempted = attempted
        self.last_error = last_error
        if attempted:
            detail = f"all providers failed ({', '.join(attempted)}); last error: {last_error}"
        else:
            detail = f"no provider has a configured API key; {last_error}"
        super().__init__(f"LLM failover exhausted: {detail}")


class ArticleNotFoundError(LookupError):
    """A job or request references an article that does not exist."""

    def __init__(self, article_id: str):
        self.article_id = article_id
        super().__init__(f"Article not found: {article_id}")


class ParseError(ValueError):
    """LLM output was not the expected JSON envelope. Recovered locally."""


class GenerationTimeoutError(TimeoutError):
    """The synchronous generate call exceeded its time budget."""

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(
            f"Research generation timed out after {timeout_s:.0f}s. "
            "The LLM provider may be slow or rate limited; try again, "
            "shorten the prompt, or lower max_tokens."
        )
