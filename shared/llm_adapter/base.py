"""Abstract base class and error types shared by all LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shared.llm_adapter.models import LLMRequest, LLMResponse


class UpstreamError(Exception):
    """The completion endpoint call failed (network, auth or API error)."""


class EmptyCompletionError(UpstreamError):
    """The completion endpoint answered but returned zero choices."""


class LLMProvider(ABC):
    """
    Contract for LLM providers.

    Every implementation MUST:
    - Perform exactly one round trip per call, without retries
    - Raise UpstreamError on failure and EmptyCompletionError on zero choices
    - Return a fully populated LLMResponse including token counts
    """

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a prompt and return the model's response."""

    async def generate_text(self, prompt: str, **kwargs) -> LLMResponse:
        """Convenience wrapper: accepts a plain string prompt."""
        request = LLMRequest(prompt=prompt, **kwargs)
        return await self.generate(request)
