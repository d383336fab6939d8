# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider credentials, worker tuning and
database location. Every value can be overridden by an environment variable
of the same name (upper-cased).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is inconsistent or a credential is missing."""


# Providers the pipeline knows how to address. Kept here so the settings
# validator does not need to import the LLM package.
KNOWN_PROVIDERS: tuple[str, ...] = ("openai", "perplexity", "xai", "anthropic", "azure")


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === LLM ===
    llm_provider: str = "openai"
    llm_model_tier: Literal["default", "fast", "smart"] = "default"
    llm_model: str = ""
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.3
    llm_request_timeout_s: float = 120.0
    llm_fallback_providers: str = "openai,perplexity,xai"

    # Provider credentials
    openai_api_key: str = Field(
        default="", validation_alias=AliasChoices("OPENAI_API_KEY", "OPENAI_KEY"),
    )
    perplexity_api_key: str = ""
    xai_api_key: str = ""
    anthropic_api_key: str = ""
    azure_openai_key: str = ""

    # Base URL overrides (empty = provider default)
    openai_base_url: str = ""
    perplexity_base_url: str = ""
    xai_base_url: str = ""
    azure_openai_endpoint: str = ""

    # === Synchronous generate path ===
    generate_timeout_s: float = 90.0

    # === Worker ===
    worker_poll_interval: int = 5000  # milliseconds
    worker_max_retries: int = 3
    worker_metrics_log_interval: int = 300  # seconds

    # === Storage ===
    database_path: Path = Path("~/.kaiville/research.db")
    cache_backend: Literal["sqlite", "memory"] = "sqlite"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: str = ""
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("llm_provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:  # noqa: N805
        return v.strip().lower()

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Reject settings the worker could never run with."""
        errors: list[str] = []

        if self.llm_provider not in KNOWN_PROVIDERS:
            errors.append(
                f"LLM_PROVIDER {self.llm_provider!r} is not one of "
                f"{', '.join(KNOWN_PROVIDERS)}"
            )

        unknown = [p for p in self.fallback_providers_list if p not in KNOWN_PROVIDERS]
        if unknown:
            errors.append(f"LLM_FALLBACK_PROVIDERS has unknown providers: {', '.join(unknown)}")

        if self.worker_poll_interval <= 0:
            errors.append("WORKER_POLL_INTERVAL must be > 0")

        if self.worker_max_retries < 0:
            errors.append("WORKER_MAX_RETRIES must be >= 0")

        if self.llm_max_tokens <= 0:
            errors.append("LLM_MAX_TOKENS must be > 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def fallback_providers_list(self) -> list[str]:
        """Parse comma-separated fallback chain."""
        return [
            p.strip().lower() for p in self.llm_fallback_providers.split(",") if p.strip()
        ]

    @property
    def poll_interval_s(self) -> float:
        """Worker poll interval in seconds."""
        return self.worker_poll_interval / 1000.0

    def api_key_for(self, provider: str) -> str:
        """Return the credential configured for a provider ("" if none)."""
        keys = {
            "openai": self.openai_api_key,
            "perplexity": self.perplexity_api_key,
            "xai": self.xai_api_key,
            "anthropic": self.anthropic_api_key,
            "azure": self.azure_openai_key,
        }
        return keys.get(provider, "")

    def base_url_for(self, provider: str) -> str:
        """Return the base URL override for a provider ("" if none)."""
        urls = {
            "openai": self.openai_base_url,
            "perplexity": self.perplexity_base_url,
            "xai": self.xai_base_url,
            "azure": self.azure_openai_endpoint,
        }
        return urls.get(provider, "")


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
