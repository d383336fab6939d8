# src/llm/failover.py - v1
"""Ordered provider failover.

Candidates are the client's active provider followed by the fallback chain,
de-duplicated in order. Providers without credentials are skipped, the first
successful completion wins, and only exhaustion of every candidate surfaces
as an error. Each attempt uses its own ProviderConfig, so the client's
active configuration is the same before and after the call.
"""

from __future__ import annotations

import logging

from kaiville_research.config.settings import ConfigurationError
from kaiville_research.core.errors import FailoverExhaustedError
from kaiville_research.llm.client import LLMClient
from kaiville_research.llm.models import CompletionOptions, LLMResponse
from kaiville_research.logging.context import set_provider_context

logger = logging.getLogger(__name__)


def candidate_providers(primary: str, fallback_chain: list[str] | tuple[str, ...]) -> list[str]:
    """Primary first, then the fallback chain, without duplicates."""
    seen: set[str] = set()
    ordered: list[str] = []
    for name in (primary, *fallback_chain):
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


async def complete_with_failover(
    client: LLMClient,
    prompt: str,
    options: CompletionOptions | dict | None = None,
    fallback_chain: list[str] | tuple[str, ...] | None = None,
) -> LLMResponse:
    """Try each candidate provider in order and return the first success.

    Args:
        client: Client whose active provider is tried first.
        prompt: User prompt.
        options: Per-call overrides (max_tokens, temperature). A `model`
            override only applies to the primary provider.
        fallback_chain: Providers to try after the primary. Defaults to
            LLM_FALLBACK_PROVIDERS; an empty value disables fallback.

    Raises:
        FailoverExhaustedError: Every candidate failed or had no credential.
    """
    if fallback_chain is None:
        fallback_chain = client.settings.fallback_providers_list

    if isinstance(options, dict):
        options = CompletionOptions(**options)

    attempted: list[str] = []
    last_error: Exception | None = None
    primary = client.provider

    try:
        for provider in candidate_providers(primary, fallback_chain):
            if provider == primary:
                config = client.config
                call_options = options
            else:
                config = client.config_for(provider)
                # A pinned model name belongs to the primary vendor only
                call_options = options.model_copy(update={"model": None}) if options else None

            if not config.is_enabled:
                logger.info("Skipping %s: no API key configured", provider)
                continue

            set_provider_context(provider)
            attempted.append(provider)
            try:
                response = await client.complete_with(config, prompt, call_options)
            except Exception as e:
                last_error = e
                logger.warning("Provider %s failed: %s", provider, e)
                continue

            if provider != primary:
                logger.info("Failover succeeded with %s (primary %s)", provider, primary)
            return response
    finally:
        set_provider_context(None)

    if last_error is None:
        last_error = ConfigurationError(
            "LLM not configured: set an API key for at least one of "
            + ", ".join(candidate_providers(primary, fallback_chain))
        )
    raise FailoverExhaustedError(attempted, last_error)
