"""
OpenAI-compatible LLM provider.

Works with any API that speaks the OpenAI Chat Completions protocol; the
endpoint is selected with ``base_url`` (e.g. https://api.openai.com/v1 or a
self-hosted gateway).

One request is one round trip: the SDK's built-in retries are disabled and
the transport timeout is left at the SDK default.
"""

from __future__ import annotations

import hashlib
import logging

import openai
from openai import AsyncOpenAI

from shared.llm_adapter.base import EmptyCompletionError, LLMProvider, UpstreamError
from shared.llm_adapter.models import LLMRequest, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions adapter."""

    def __init__(self, api_key: str, base_url: str, model: str) -> None:
        if not api_key:
            raise ValueError("An API key is required for the OpenAI provider.")

        self._base_url = base_url
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        prompt_hash = hashlib.sha256(request.prompt.encode()).hexdigest()
        model = request.model or self._model

        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                messages=[{"role": "user", "content": request.prompt}],
            )
        except openai.APIError as exc:
            logger.warning(
                "Chat completion failed against %s (model=%s): %s",
                self._base_url, model, exc,
            )
            raise UpstreamError(str(exc)) from exc

        if not response.choices:
            raise EmptyCompletionError("no response received")

        choice = response.choices[0]
        usage = response.usage

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
            prompt_hash=prompt_hash,
        )
