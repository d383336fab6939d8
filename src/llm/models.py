# src/llm/models.py - v1
"""LLM-specific types: Message, CompletionOptions, TokenUsage, LLMResponse, HealthStatus."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, computed_field


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class CompletionOptions(BaseModel):
    """Per-call overrides merged over the configured defaults."""

    max_tokens: int | None = None
    temperature: float | None = None
    model: str | None = None


class TokenUsage(BaseModel):
    """Token breakdown as reported by the provider."""

    input_tokens: int = 0
    output_tokens: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    latency_ms: int
    raw_response: Any = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def usage(self) -> TokenUsage:
        return TokenUsage(input_tokens=self.input_tokens, output_tokens=self.output_tokens)


class HealthStatus(BaseModel):
    """Outcome of a provider health check."""

    provider: str
    status: Literal["healthy", "unhealthy", "unconfigured"]
    model: str | None = None
    latency_ms: int | None = None
    error: str | None = None
