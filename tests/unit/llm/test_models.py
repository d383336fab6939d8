# tests/unit/llm/test_models.py - v1
"""Tests for llm/models.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kaiville_research.llm.models import (
    CompletionOptions,
    HealthStatus,
    LLMResponse,
    Message,
    TokenUsage,
)


class TestMessage:
    def test_roles(self):
        assert Message(role="user", content="hi").role == "user"

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="hi")


class TestLLMResponse:
    def test_usage(self):
        r = LLMResponse(
            content="ok", input_tokens=120, output_tokens=30,
            model="gpt-4", provider="openai", latency_ms=200,
        )
        assert r.total_tokens == 150
        assert r.usage == TokenUsage(input_tokens=120, output_tokens=30)
        assert r.usage.total_tokens == 150

    def test_usage_dump_includes_total(self):
        usage = TokenUsage(input_tokens=3, output_tokens=4)
        assert usage.model_dump() == {"input_tokens": 3, "output_tokens": 4, "total_tokens": 7}


class TestCompletionOptions:
    def test_all_optional(self):
        opts = CompletionOptions()
        assert opts.max_tokens is None
        assert opts.temperature is None
        assert opts.model is None


class TestHealthStatus:
    def test_unconfigured(self):
        h = HealthStatus(provider="xai", status="unconfigured", error="No API key configured")
        assert h.latency_ms is None

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            HealthStatus(provider="xai", status="degraded")
