"""
Response interpretation for the V2 path.

The upstream model is prompted to answer with a StructuredResponse JSON
object but often wraps it in prose or markdown fences, or ignores the format
altogether. The raw text is run through an ordered chain of parsers; the
first one that yields a value wins:

  strict     decode the whole text
  extracted  decode the span from the first '{' to the last '}'
  fallback   synthesize a response around the raw text (never fails)

Callers always receive a well-formed StructuredResponse. Degradation is
visible to the client through ``optimization_notes`` and ``metadata``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from pydantic import ValidationError

from shared.contracts.optimizer import (
    Metadata,
    ModelVersions,
    OptimizeRequestV2,
    StructuredResponse,
)

logger = logging.getLogger(__name__)

STAGE_STRICT = "strict"
STAGE_EXTRACTED = "extracted"
STAGE_FALLBACK = "fallback"

FALLBACK_USAGE_GUIDE = "Raw AI response, it may not be in the expected format"
FALLBACK_NOTES = "Failed to parse the response, showing the raw content"
FALLBACK_TECHNIQUES = ("basic optimization",)

# Rough UTF-8 bytes-per-token ratio used when the model gave no metadata.
BYTES_PER_TOKEN = 4

Parser = Callable[[str], StructuredResponse | None]


@dataclass(frozen=True)
class FallbackOptions:
    complexity_level: str = ""
    task_type: str = ""
    target_models: list[str] = field(default_factory=list)

    @classmethod
    def from_request(cls, request: OptimizeRequestV2) -> FallbackOptions:
        return cls(
            complexity_level=request.complexity_level,
            task_type=request.task_type,
            target_models=list(request.target_models),
        )


def parse_strict(raw_text: str) -> StructuredResponse | None:
    try:
        return StructuredResponse.model_validate_json(raw_text)
    except ValidationError:
        return None


def parse_braced(raw_text: str) -> StructuredResponse | None:
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start < 0 or end <= start:
        return None
    return parse_strict(raw_text[start:end + 1])


def synthesize(raw_text: str, fallback: FallbackOptions) -> StructuredResponse:
    return StructuredResponse(
        optimized_prompt=raw_text,
        usage_guide=FALLBACK_USAGE_GUIDE,
        test_cases=[],
        model_versions=ModelVersions(),
        optimization_notes=FALLBACK_NOTES,
        metadata=Metadata(
            complexity_level=fallback.complexity_level,
            task_type=fallback.task_type,
            estimated_tokens=len(raw_text.encode("utf-8")) // BYTES_PER_TOKEN,
            target_models=list(fallback.target_models),
            techniques_used=list(FALLBACK_TECHNIQUES),
        ),
    )


PARSERS: tuple[tuple[str, Parser], ...] = (
    (STAGE_STRICT, parse_strict),
    (STAGE_EXTRACTED, parse_braced),
)


def interpret_with_stage(
    raw_text: str, fallback: FallbackOptions,
) -> tuple[StructuredResponse, str]:
    """Interpret ``raw_text`` and report which stage produced the result."""
    for stage, parser in PARSERS:
        result = parser(raw_text)
        if result is not None:
            return result, stage

    logger.warning(
        "Upstream response is not a structured object, returning raw text (%d chars)",
        len(raw_text),
    )
    return synthesize(raw_text, fallback), STAGE_FALLBACK


def interpret(raw_text: str, fallback: FallbackOptions) -> StructuredResponse:
    result, _ = interpret_with_stage(raw_text, fallback)
    return result
