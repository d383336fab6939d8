# src/llm/client.py - v1
"""Unified LLM client for research formatting.

The actual call is the stateless `complete(config, prompt, options)`; the
LLMClient class only holds the active ProviderConfig and the adapter
factory. Health checks and failover pass their own per-call config, so
they never change what `client.config` returns.

Usage:
    client = LLMClient.from_settings(settings)
    response = await client.complete(prompt, CompletionOptions(max_tokens=500))
"""

from __future__ import annotations

import logging
import time

from kaiville_research.config.settings import ConfigurationError, Settings
from kaiville_research.llm.client_factory import ClientFactory, create_llm_client
from kaiville_research.llm.config import (
    ProviderConfig,
    resolve_primary_config,
    resolve_provider_config,
)
from kaiville_research.llm.models import (
    CompletionOptions,
    HealthStatus,
    LLMResponse,
    Message,
)
from kaiville_research.llm.providers import PROVIDERS
from kaiville_research.llm.token_budget import estimate_tokens

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a formatting assistant for the Kaiville Research Center. "
    "Preserve all original text; do not summarize or remove content."
)

_HEALTH_PROMPT = "Say OK"
_HEALTH_MAX_TOKENS = 5


def _merge_options(
    config: ProviderConfig, options: CompletionOptions | dict | None
) -> CompletionOptions:
    """Caller options win over the configured defaults."""
    if options is None:
        options = CompletionOptions()
    elif isinstance(options, dict):
        options = CompletionOptions(**options)
    return CompletionOptions(
        max_tokens=options.max_tokens or config.max_tokens,
        temperature=(
            options.temperature if options.temperature is not None else config.temperature
        ),
        model=options.model or config.model,
    )


async def complete(
    config: ProviderConfig,
    prompt: str,
    options: CompletionOptions | dict | None = None,
    factory: ClientFactory = create_llm_client,
) -> LLMResponse:
    """Send one chat completion to the provider described by `config`.

    Raises:
        ConfigurationError: No API key for the provider (no request is sent).
        ProviderError: The provider call failed or the provider is a stub.
    """
    if not config.is_enabled:
        raise ConfigurationError(
            f"LLM not configured: no API key for provider {config.provider!r}"
        )

    merged = _merge_options(config, options)
    if merged.model != config.model:
        config = config.with_overrides(model=merged.model)

    adapter = factory(config)
    logger.debug(
        "Completing with %s (~%d prompt tokens, max_tokens=%s)",
        config.key, estimate_tokens(prompt), merged.max_tokens,
    )
    return await adapter.complete(
        [Message(role="user", content=prompt)],
        system=SYSTEM_PROMPT,
        max_tokens=merged.max_tokens,
        temperature=merged.temperature,
    )


class LLMClient:
    """Holds the active provider config; all calls go through `complete()`."""

    def __init__(
        self,
        settings: Settings,
        config: ProviderConfig | None = None,
        factory: ClientFactory = create_llm_client,
    ) -> None:
        self._settings = settings
        self._config = config or resolve_primary_config(settings)
        self._factory = factory
        if not self._config.is_enabled:
            logger.warning(
                "No API key found for %s. LLM features disabled.", self._config.provider
            )

    @classmethod
    def from_settings(
        cls, settings: Settings, factory: ClientFactory = create_llm_client
    ) -> LLMClient:
        return cls(settings, factory=factory)

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def provider(self) -> str:
        return self._config.provider

    @property
    def settings(self) -> Settings:
        return self._settings

    def configure(self, provider: str, tier: str | None = None) -> ProviderConfig:
        """Select the active provider and model tier.

        Raises:
            ConfigurationError: Unknown provider or tier.
        """
        self._config = self.config_for(provider, tier)
        logger.info("LLM client configured: %s", self._config.key)
        return self._config

    def config_for(self, provider: str, tier: str | None = None) -> ProviderConfig:
        """Build a per-call config for `provider` without touching the active one."""
        model = None
        # LLM_MODEL only pins the model of the primary provider
        if provider == self._settings.llm_provider and tier is None and self._settings.llm_model:
            model = self._settings.llm_model
        return resolve_provider_config(
            provider, self._settings, tier=tier or self._config.tier, model=model
        )

    def is_enabled(self) -> bool:
        return self._config.is_enabled

    async def complete(
        self, prompt: str, options: CompletionOptions | dict | None = None
    ) -> LLMResponse:
        """Complete against the active provider."""
        return await complete(self._config, prompt, options, factory=self._factory)

    async def complete_with(
        self,
        config: ProviderConfig,
        prompt: str,
        options: CompletionOptions | dict | None = None,
    ) -> LLMResponse:
        """Complete against an explicit config (used by failover)."""
        return await complete(config, prompt, options, factory=self._factory)

    def estimate_tokens(self, text: str) -> int:
        return estimate_tokens(text)

    async def health_check(self, provider: str | None = None) -> HealthStatus:
        """Send a tiny request to `provider` (default: active) and report status."""
        config = self._config if provider is None else self.config_for(provider)
        if not config.is_enabled:
            return HealthStatus(
                provider=config.provider,
                status="unconfigured",
                model=config.model,
                error="No API key configured",
            )

        t0 = time.monotonic()
        try:
            await complete(
                config,
                _HEALTH_PROMPT,
                CompletionOptions(max_tokens=_HEALTH_MAX_TOKENS),
                factory=self._factory,
            )
        except Exception as e:
            logger.warning("Health check failed for %s: %s", config.provider, e)
            return HealthStatus(
                provider=config.provider,
                status="unhealthy",
                model=config.model,
                error=str(e),
            )
        latency = int((time.monotonic() - t0) * 1000)
        return HealthStatus(
            provider=config.provider,
            status="healthy",
            model=config.model,
            latency_ms=latency,
        )

    async def health_check_all(self) -> list[HealthStatus]:
        """Health-check every provider in the table, sequentially."""
        return [await self.health_check(name) for name in PROVIDERS]
