from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from shared.llm_adapter import LLMProvider, LLMRequest, LLMResponse
from services.optimizer_service import main as service
from services.optimizer_service.config import OptimizerConfig
from services.optimizer_service.prompt_builder import MetaPrompts

TEST_CONFIG = OptimizerConfig(
    api_key="test-key",
    base_url="https://api.test.com/v1",
    model="test-model",
    port="8092",
    log_level="INFO",
    llm_provider="openai",
)

TEST_PROMPTS = MetaPrompts(
    v1="Optimize this: {{input}}",
    v2="Optimize as JSON: {{input}}",
)


class RecordingProvider(LLMProvider):
    """Returns canned content (or raises) and keeps every request it saw."""

    def __init__(self, content: str = "", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[LLMRequest] = []

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content,
            model=request.model or "fake",
            prompt_tokens=3,
            completion_tokens=5,
            total_tokens=8,
            prompt_hash="0" * 64,
        )

    @property
    def last_prompt(self) -> str:
        return self.requests[-1].prompt


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider(content="optimized text")


@pytest.fixture
def client(provider: RecordingProvider):
    service.app.dependency_overrides[service._get_config] = lambda: TEST_CONFIG
    service.app.dependency_overrides[service._get_meta_prompts] = lambda: TEST_PROMPTS
    service.app.dependency_overrides[service._get_llm] = lambda: provider
    yield TestClient(service.app)
    service.app.dependency_overrides.clear()
