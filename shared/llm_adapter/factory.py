"""
Provider factory.

Builds the completion client named by the service configuration:

  openai  Any OpenAI-compatible endpoint (default). Uses the configured
          API key, base URL and model.
  mock    Built-in deterministic mock, no network access.

The provider is created once at startup and shared by all requests; it holds
no per-request state.
"""

from __future__ import annotations

import logging

from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.mock_provider import MockProvider
from shared.llm_adapter.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

_AVAILABLE = ("openai", "mock")


def get_llm_provider(
    provider_name: str,
    api_key: str,
    base_url: str,
    model: str,
) -> LLMProvider:
    """Return a new provider for ``provider_name``."""
    name = (provider_name or "openai").lower()

    if name == "openai":
        provider: LLMProvider = OpenAIProvider(
            api_key=api_key, base_url=base_url, model=model,
        )
    elif name == "mock":
        provider = MockProvider(model=model)
    else:
        raise ValueError(
            f"Unknown LLM provider '{name}'. Available: {', '.join(_AVAILABLE)}"
        )

    logger.info(
        "LLM provider initialized: %s (model=%s, base_url=%s)",
        name, model, base_url,
    )
    return provider
