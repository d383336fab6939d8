# src/llm/providers.py - v1
"""Provider table: which vendors exist and how each one is reached.

A provider is either OpenAI-compatible (same chat-completions request and
response shape, different base URL) or explicitly unimplemented. The second
variant is kept in the table so selecting it fails loudly instead of being
an unknown name.
"""

from __future__ import annotations

from dataclasses import dataclass

from kaiville_research.config.settings import ConfigurationError


@dataclass(frozen=True)
class OpenAICompatible:
    """Vendor reachable through the OpenAI chat-completions API."""

    name: str
    base_url: str


@dataclass(frozen=True)
class Unimplemented:
    """Vendor known to the configuration but with no working adapter."""

    name: str
    reason: str


ProviderSpec = OpenAICompatible | Unimplemented

PROVIDERS: dict[str, ProviderSpec] = {
    "openai": OpenAICompatible("openai", "https://api.openai.com/v1"),
    "perplexity": OpenAICompatible("perplexity", "https://api.perplexity.ai"),
    "xai": OpenAICompatible("xai", "https://api.x.ai/v1"),
    "anthropic": Unimplemented("anthropic", "Anthropic provider not yet implemented"),
    "azure": Unimplemented("azure", "Azure OpenAI provider not yet implemented"),
}

# provider -> tier -> model
MODEL_TIERS: dict[str, dict[str, str]] = {
    "openai": {
        "default": "gpt-4-turbo-preview",
        "fast": "gpt-3.5-turbo",
        "smart": "gpt-4",
    },
    "perplexity": {
        "default": "sonar-pro",
        "fast": "sonar",
        "smart": "sonar-reasoning-pro",
    },
    "xai": {
        "default": "grok-4-0709",
        "fast": "grok-2-1212",
        "smart": "grok-4-0709",
    },
    "anthropic": {
        "default": "claude-3-opus-20240229",
        "fast": "claude-3-haiku-20240307",
        "smart": "claude-3-opus-20240229",
    },
    "azure": {
        "default": "gpt-4",
        "fast": "gpt-35-turbo",
        "smart": "gpt-4",
    },
}

MODEL_TIER_NAMES: tuple[str, ...] = ("default", "fast", "smart")


def get_provider(name: str) -> ProviderSpec:
    """Look up a provider by name.

    Raises:
        ConfigurationError: If the provider is not in the table.
    """
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown LLM provider: {name!r}. Available: {', '.join(sorted(PROVIDERS))}"
        ) from None


def resolve_model(provider: str, tier: str) -> str:
    """Resolve a tier alias to the provider's concrete model name."""
    get_provider(provider)
    if tier not in MODEL_TIER_NAMES:
        raise ConfigurationError(
            f"Unknown model tier: {tier!r}. Available: {', '.join(MODEL_TIER_NAMES)}"
        )
    return MODEL_TIERS[provider][tier]
