# src/llm/config.py - v1
"""Per-call provider configuration.

A ProviderConfig is immutable: failover and health checks build one per
attempt instead of switching a shared client back and forth.

Model resolution order:
  1. Explicit model (LLM_MODEL), only for the primary provider
  2. Tier alias (LLM_MODEL_TIER) looked up in the provider table
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from kaiville_research.config.settings import Settings
from kaiville_research.llm.providers import (
    OpenAICompatible,
    ProviderSpec,
    get_provider,
    resolve_model,
)


@dataclass(frozen=True)
class ProviderConfig:
    """Everything needed to issue one completion against one provider."""

    provider: str
    tier: str
    model: str
    api_key: str
    base_url: str
    max_tokens: int
    temperature: float
    timeout_s: float = 120.0

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"

    @property
    def is_enabled(self) -> bool:
        """Whether a credential is present."""
        return bool(self.api_key)

    @property
    def spec(self) -> ProviderSpec:
        return get_provider(self.provider)

    def with_overrides(self, **changes: object) -> ProviderConfig:
        """Return a copy with some fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        # Never print the credential
        return (
            f"ProviderConfig(provider={self.provider!r}, model={self.model!r}, "
            f"enabled={self.is_enabled})"
        )


def resolve_provider_config(
    provider: str,
    settings: Settings,
    tier: str | None = None,
    model: str | None = None,
) -> ProviderConfig:
    """Build the config for a provider from settings.

    Args:
        provider: Provider name (openai, perplexity, xai, anthropic, azure).
        settings: Application settings (credentials, defaults).
        tier: Model tier alias. Defaults to LLM_MODEL_TIER.
        model: Explicit model name, bypassing the tier table.

    Raises:
        ConfigurationError: Unknown provider or tier.
    """
    spec = get_provider(provider)
    tier = tier or settings.llm_model_tier
    resolved_model = model or resolve_model(provider, tier)

    base_url = settings.base_url_for(provider)
    if not base_url and isinstance(spec, OpenAICompatible):
        base_url = spec.base_url

    return ProviderConfig(
        provider=provider,
        tier=tier,
        model=resolved_model,
        api_key=settings.api_key_for(provider),
        base_url=base_url,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        timeout_s=settings.llm_request_timeout_s,
    )


def resolve_primary_config(settings: Settings) -> ProviderConfig:
    """Config for LLM_PROVIDER, honoring the LLM_MODEL override."""
    return resolve_provider_config(
        settings.llm_provider,
        settings,
        tier=settings.llm_model_tier,
        model=settings.llm_model or None,
    )
