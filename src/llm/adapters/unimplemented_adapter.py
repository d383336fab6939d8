# src/llm/adapters/unimplemented_adapter.py - v1
"""Adapter for providers that are configured but not wired up yet.

Every call fails immediately, before any network I/O.
"""

from __future__ import annotations

from typing import Any

from kaiville_research.core.errors import ProviderError
from kaiville_research.llm.base_client import BaseLLMClient
from kaiville_research.llm.models import LLMResponse, Message


class UnimplementedAdapter(BaseLLMClient):
    """Stub that raises ProviderError on every completion."""

    def __init__(self, provider: str, reason: str = "", **kwargs: Any):
        self._provider = provider
        self._reason = reason or f"Provider {provider} not implemented"

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> LLMResponse:
        raise ProviderError(self._provider, self._reason)

    @property
    def provider_name(self) -> str:
        return self._provider
