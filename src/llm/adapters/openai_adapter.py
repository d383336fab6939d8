# src/llm/adapters/openai_adapter.py - v1
"""Adapter for OpenAI-compatible chat-completion endpoints.

Uses the official openai SDK with a base_url override, which covers OpenAI
itself, Perplexity and xAI. SDK errors are normalized to ProviderError so the
failover orchestrator sees one error type per attempt.
"""

from __future__ import annotations

import time
from typing import Any

from kaiville_research.core.errors import ProviderError
from kaiville_research.llm.base_client import BaseLLMClient
from kaiville_research.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """Chat-completions adapter for any OpenAI-compatible vendor."""

    def __init__(
        self,
        model: str = "gpt-4-turbo-preview",
        api_key: str = "",
        base_url: str | None = None,
        provider: str = "openai",
        timeout_s: float = 120.0,
        max_retries: int = 1,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url or None
        self._provider = provider
        self._timeout_s = timeout_s
        self._max_retries = max_retries

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout_s,
            max_retries=self._max_retries,
        )
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        try:
            resp = await client.chat.completions.create(
                model=self._model,
                messages=oai_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APIStatusError as e:
            raise ProviderError(
                self._provider, f"HTTP {e.status_code}: {e.message}"
            ) from e
        except openai.OpenAIError as e:
            raise ProviderError(self._provider, str(e) or type(e).__name__) from e
        finally:
            await client.close()
        latency = int((time.monotonic() - t0) * 1000)

        if not resp.choices:
            raise ProviderError(self._provider, "response contained no choices")

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=resp.model or self._model,
            provider=self._provider,
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return self._provider
