# src/llm/client_factory.py - v2
"""Factory: instantiate an adapter from a ProviderConfig.

Dispatch is on the provider variant, not on the provider name, so a new
OpenAI-compatible vendor only needs a row in llm/providers.py.
"""

from __future__ import annotations

import importlib
import logging
from typing import Callable

from kaiville_research.llm.base_client import BaseLLMClient
from kaiville_research.llm.config import ProviderConfig
from kaiville_research.llm.providers import OpenAICompatible, Unimplemented

logger = logging.getLogger(__name__)

# Provider variant -> adapter class path (lazy import).
_ADAPTER_REGISTRY: dict[type, str] = {
    OpenAICompatible: "kaiville_research.llm.adapters.openai_adapter.OpenAIAdapter",
    Unimplemented: "kaiville_research.llm.adapters.unimplemented_adapter.UnimplementedAdapter",
}

ClientFactory = Callable[[ProviderConfig], BaseLLMClient]


def create_llm_client(config: ProviderConfig) -> BaseLLMClient:
    """Instantiate the adapter for a provider config.

    Args:
        config: Resolved provider config (credentials, model, base URL).

    Returns:
        Configured BaseLLMClient instance.
    """
    spec = config.spec
    adapter_cls = _import_class(_ADAPTER_REGISTRY[type(spec)])

    logger.debug("Creating LLM client: provider=%s, model=%s", config.provider, config.model)
    if isinstance(spec, Unimplemented):
        return adapter_cls(provider=spec.name, reason=spec.reason)

    return adapter_cls(
        model=config.model,
        api_key=config.api_key,
        base_url=config.base_url,
        provider=config.provider,
        timeout_s=config.timeout_s,
    )


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
