# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides isolated settings, an in-memory database with its stores, and a
scripted LLM adapter factory. No network access: every provider call goes
through ScriptedFactory.
"""

from __future__ import annotations

from typing import Any

import pytest

from kaiville_research.cache.memory_store import MemoryFormatCache
from kaiville_research.config.settings import Settings
from kaiville_research.core.errors import ProviderError
from kaiville_research.llm.base_client import BaseLLMClient
from kaiville_research.llm.client import LLMClient
from kaiville_research.llm.config import ProviderConfig
from kaiville_research.llm.models import LLMResponse, Message
from kaiville_research.storage.article_store import ArticleStore
from kaiville_research.storage.database import Database
from kaiville_research.storage.job_store import JobStore
from kaiville_research.tracking.metrics import MetricsTracker

_ENV_VARS = (
    "LLM_PROVIDER", "LLM_MODEL_TIER", "LLM_MODEL", "LLM_MAX_TOKENS",
    "LLM_TEMPERATURE", "LLM_FALLBACK_PROVIDERS",
    "OPENAI_API_KEY", "OPENAI_KEY", "PERPLEXITY_API_KEY", "XAI_API_KEY",
    "ANTHROPIC_API_KEY", "AZURE_OPENAI_KEY",
    "OPENAI_BASE_URL", "PERPLEXITY_BASE_URL", "XAI_BASE_URL", "AZURE_OPENAI_ENDPOINT",
    "WORKER_POLL_INTERVAL", "WORKER_MAX_RETRIES", "DATABASE_PATH", "CACHE_BACKEND",
    "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials and overrides out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# === FIXTURES: Settings ===


def make_settings(**overrides: Any) -> Settings:
    """Settings without .env, with every OpenAI-compatible provider keyed."""
    values: dict[str, Any] = {
        "openai_api_key": "sk-openai-test",
        "perplexity_api_key": "pplx-test",
        "xai_api_key": "xai-test",
        "worker_poll_interval": 10,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# === FIXTURES: Scripted LLM ===


class ScriptedLLMClient(BaseLLMClient):
    """Adapter that replays scripted answers for one provider.

    Each scripted item is either a response string or an Exception to raise.
    """

    def __init__(self, factory: ScriptedFactory, config: ProviderConfig):
        self._factory = factory
        self._config = config

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> LLMResponse:
        provider = self._config.provider
        self._factory.calls.append({
            "provider": provider,
            "model": self._config.model,
            "messages": messages,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        queue = self._factory.scripts.get(provider)
        item: str | Exception = queue.pop(0) if queue else self._factory.default
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item,
            input_tokens=100,
            output_tokens=50,
            model=self._config.model,
            provider=provider,
            latency_ms=5,
        )

    @property
    def provider_name(self) -> str:
        return self._config.provider


class ScriptedFactory:
    """ClientFactory stand-in recording every call across providers."""

    def __init__(
        self,
        scripts: dict[str, list[str | Exception]] | None = None,
        default: str | Exception = '{"formattedContent": "formatted"}',
    ):
        self.scripts = {k: list(v) for k, v in (scripts or {}).items()}
        self.default = default
        self.calls: list[dict[str, Any]] = []

    def __call__(self, config: ProviderConfig) -> BaseLLMClient:
        return ScriptedLLMClient(self, config)

    def fail(self, provider: str, times: int = 1) -> None:
        self.scripts.setdefault(provider, []).extend(
            ProviderError(provider, "HTTP 503: upstream unavailable") for _ in range(times)
        )

    @property
    def providers_called(self) -> list[str]:
        return [c["provider"] for c in self.calls]


@pytest.fixture
def scripted_factory() -> ScriptedFactory:
    return ScriptedFactory()


@pytest.fixture
def llm_client(settings: Settings, scripted_factory: ScriptedFactory) -> LLMClient:
    return LLMClient.from_settings(settings, factory=scripted_factory)


# === FIXTURES: Storage ===


@pytest.fixture
def db():
    database = Database()
    yield database
    database.close()


@pytest.fixture
def article_store(db: Database) -> ArticleStore:
    return ArticleStore(db)


@pytest.fixture
def job_store(db: Database) -> JobStore:
    return JobStore(db)


@pytest.fixture
def tracker(db: Database) -> MetricsTracker:
    return MetricsTracker(db)


@pytest.fixture
def memory_cache() -> MemoryFormatCache:
    return MemoryFormatCache()


@pytest.fixture
def settings_factory():
    """Build Settings with overrides: settings_factory(worker_max_retries=1)."""
    return make_settings


@pytest.fixture
def factory_cls():
    """The ScriptedFactory class, for tests that script several providers."""
    return ScriptedFactory
