"""Static catalog of the model families the optimizer can target."""

from __future__ import annotations

from shared.contracts.optimizer import ModelInfo

_CATALOG: tuple[ModelInfo, ...] = (
    ModelInfo(
        id="claude",
        name="Claude 4 (Sonnet/Opus)",
        description="Anthropic's Claude 4 models, strong at complex reasoning and dialogue",
        supported=True,
    ),
    ModelInfo(
        id="gpt",
        name="GPT-4.1/GPT-4o",
        description="OpenAI's GPT-4 family, general-purpose assistants",
        supported=True,
    ),
    ModelInfo(
        id="gemini",
        name="Gemini 2.5 Pro",
        description="Google's Gemini models, with very large context windows",
        supported=True,
    ),
    ModelInfo(
        id="deepseek",
        name="DeepSeek R1",
        description="DeepSeek's reasoning model, strong at math and logic",
        supported=True,
    ),
)


def list_models() -> list[ModelInfo]:
    return [m.model_copy() for m in _CATALOG]


def model_ids() -> list[str]:
    """Catalog ids in catalog order."""
    return [m.id for m in _CATALOG]
