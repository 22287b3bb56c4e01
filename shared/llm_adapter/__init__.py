from shared.llm_adapter.base import EmptyCompletionError, LLMProvider, UpstreamError
from shared.llm_adapter.factory import get_llm_provider
from shared.llm_adapter.models import LLMRequest, LLMResponse
from shared.llm_adapter.mock_provider import MockProvider

__all__ = [
    "EmptyCompletionError",
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    "MockProvider",
    "UpstreamError",
    "get_llm_provider",
]
