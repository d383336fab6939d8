# tests/unit/config/test_settings.py - v1
"""Tests for config/settings.py - typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from kaiville_research.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_provider(self):
        s = Settings(_env_file=None)
        assert s.llm_provider == "openai"
        assert s.llm_model_tier == "default"
        assert s.llm_model == ""

    def test_default_completion_options(self):
        s = Settings(_env_file=None)
        assert s.llm_max_tokens == 2000
        assert s.llm_temperature == 0.3

    def test_default_worker(self):
        s = Settings(_env_file=None)
        assert s.worker_poll_interval == 5000
        assert s.worker_max_retries == 3
        assert s.poll_interval_s == 5.0

    def test_default_fallback_chain(self):
        s = Settings(_env_file=None)
        assert s.fallback_providers_list == ["openai", "perplexity", "xai"]

    def test_default_storage(self):
        s = Settings(_env_file=None)
        assert s.cache_backend == "sqlite"
        assert s.database_path == Path("~/.kaiville/research.db")

    def test_no_keys_by_default(self):
        s = Settings(_env_file=None)
        for provider in ("openai", "perplexity", "xai", "anthropic", "azure"):
            assert s.api_key_for(provider) == ""


class TestSettingsEnvironment:
    def test_reads_env_vars(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "xai")
        monkeypatch.setenv("XAI_API_KEY", "xai-123")
        monkeypatch.setenv("WORKER_MAX_RETRIES", "5")
        s = Settings(_env_file=None)
        assert s.llm_provider == "xai"
        assert s.api_key_for("xai") == "xai-123"
        assert s.worker_max_retries == 5

    def test_openai_key_alias(self, monkeypatch):
        monkeypatch.setenv("OPENAI_KEY", "sk-legacy")
        s = Settings(_env_file=None)
        assert s.openai_api_key == "sk-legacy"

    def test_provider_is_lowercased(self):
        s = Settings(_env_file=None, llm_provider=" Perplexity ")
        assert s.llm_provider == "perplexity"

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("PERPLEXITY_API_KEY=pplx-file\nLLM_MODEL_TIER=fast\n")
        s = Settings(_env_file=env)
        assert s.perplexity_api_key == "pplx-file"
        assert s.llm_model_tier == "fast"


class TestSettingsValidation:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="LLM_PROVIDER"):
            Settings(_env_file=None, llm_provider="mistral")

    def test_unknown_fallback_provider(self):
        with pytest.raises(ConfigurationError, match="LLM_FALLBACK_PROVIDERS"):
            Settings(_env_file=None, llm_fallback_providers="openai,cohere")

    def test_zero_poll_interval(self):
        with pytest.raises(ConfigurationError, match="WORKER_POLL_INTERVAL"):
            Settings(_env_file=None, worker_poll_interval=0)

    def test_negative_retries(self):
        with pytest.raises(ConfigurationError, match="WORKER_MAX_RETRIES"):
            Settings(_env_file=None, worker_max_retries=-1)

    def test_zero_retries_allowed(self):
        s = Settings(_env_file=None, worker_max_retries=0)
        assert s.worker_max_retries == 0

    def test_zero_max_tokens(self):
        with pytest.raises(ConfigurationError, match="LLM_MAX_TOKENS"):
            Settings(_env_file=None, llm_max_tokens=0)

    def test_unknown_tier_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, llm_model_tier="huge")

    def test_errors_are_combined(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, llm_provider="bogus", worker_poll_interval=0)
        assert "LLM_PROVIDER" in str(exc_info.value)
        assert "WORKER_POLL_INTERVAL" in str(exc_info.value)


class TestSettingsHelpers:
    def test_fallback_list_strips_and_lowercases(self):
        s = Settings(_env_file=None, llm_fallback_providers=" XAI , openai,,")
        assert s.fallback_providers_list == ["xai", "openai"]

    def test_base_url_for(self):
        s = Settings(_env_file=None, perplexity_base_url="http://proxy.local/v1")
        assert s.base_url_for("perplexity") == "http://proxy.local/v1"
        assert s.base_url_for("openai") == ""
        assert s.base_url_for("anthropic") == ""

    def test_api_key_for_unknown(self):
        assert Settings(_env_file=None).api_key_for("nobody") == ""


class TestLoadSettings:
    def test_overrides(self):
        s = load_settings(_env_file=None, worker_max_retries=7)
        assert s.worker_max_retries == 7
