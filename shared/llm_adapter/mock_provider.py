"""
Deterministic mock LLM provider for local development and tests.

Always returns the same output for the same prompt hash, so the service can
run end to end without an upstream endpoint. The output is plain text, which
exercises the structured-response fallback path on V2 requests.
"""

from __future__ import annotations

import hashlib

from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.models import LLMRequest, LLMResponse

_MOCK_PREFIX = "[MOCK] "


class MockProvider(LLMProvider):

    def __init__(self, model: str = "mock-deterministic") -> None:
        self._model = model
        self._call_count = 0

    @property
    def call_count(self) -> int:
        return self._call_count

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self._call_count += 1
        prompt_hash = hashlib.sha256(request.prompt.encode()).hexdigest()

        content = (
            f"{_MOCK_PREFIX}Deterministic response for prompt hash "
            f"{prompt_hash[:12]}."
        )

        fake_prompt_tokens = len(request.prompt.split())
        fake_completion_tokens = len(content.split())

        return LLMResponse(
            content=content,
            model=request.model or self._model,
            prompt_tokens=fake_prompt_tokens,
            completion_tokens=fake_completion_tokens,
            total_tokens=fake_prompt_tokens + fake_completion_tokens,
            prompt_hash=prompt_hash,
        )
