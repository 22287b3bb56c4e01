"""
Request and response contracts for the prompt optimizer HTTP API.

V1 is plain text in and out. V2 carries generation options and returns a
StructuredResponse, the JSON shape the upstream model is instructed (but not
guaranteed) to produce.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

DEFAULT_LANGUAGE = "chinese"
DEFAULT_COMPLEXITY_LEVEL = "medium"
DEFAULT_TASK_TYPE = "general"


# ---------------------------------------------------------------------------
# V1
# ---------------------------------------------------------------------------


class OptimizeRequest(BaseModel):
    input: str = Field(..., min_length=1)


class OptimizeResponse(BaseModel):
    result: str


# ---------------------------------------------------------------------------
# V2
# ---------------------------------------------------------------------------


class OptimizeRequestV2(BaseModel):
    input: str = Field(..., min_length=1)
    target_models: list[str] = Field(default_factory=list)
    complexity_level: str = ""
    task_type: str = ""
    generate_multi: bool = False
    language: str = ""

    def with_defaults(self) -> OptimizeRequestV2:
        """Return a copy with empty language/complexity/task type defaulted."""
        return self.model_copy(
            update={
                "language": self.language or DEFAULT_LANGUAGE,
                "complexity_level": self.complexity_level or DEFAULT_COMPLEXITY_LEVEL,
                "task_type": self.task_type or DEFAULT_TASK_TYPE,
            }
        )


class _NullAsAbsent(BaseModel):
    """Treats JSON null (as a value or as the whole object) as absent, so defaults apply."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class TestCase(_NullAsAbsent):
    input: str = ""
    expected_behavior: str = ""


class ModelVersions(_NullAsAbsent):
    claude: str = ""
    gpt: str = ""
    gemini: str = ""
    deepseek: str = ""


class Metadata(_NullAsAbsent):
    complexity_level: str = ""
    task_type: str = ""
    estimated_tokens: int = 0
    target_models: list[str] = Field(default_factory=list)
    techniques_used: list[str] = Field(default_factory=list)


class StructuredResponse(_NullAsAbsent):
    """
    Structured optimization result.

    Every field has a zero default so a partial object from the model still
    decodes; unknown keys are ignored.
    """

    optimized_prompt: str = ""
    usage_guide: str = ""
    test_cases: list[TestCase] = Field(default_factory=list)
    model_versions: ModelVersions = Field(default_factory=ModelVersions)
    optimization_notes: str = ""
    metadata: Metadata = Field(default_factory=Metadata)


class OptimizeResponseV2(BaseModel):
    result: StructuredResponse


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str
    supported: bool


class ModelsResponse(BaseModel):
    models: list[ModelInfo]


class ErrorResponse(BaseModel):
    error: str
