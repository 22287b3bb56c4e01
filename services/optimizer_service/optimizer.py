"""
Optimization flows.

Each request runs the same linear pipeline:
1. Build the final prompt from the meta-prompt and the user's input.
2. Make one chat completion call.
3. V1 returns the text as-is; V2 interprets it into a StructuredResponse.
"""

from __future__ import annotations

import logging

from shared.contracts.optimizer import OptimizeRequestV2, StructuredResponse
from shared.llm_adapter import EmptyCompletionError, LLMProvider, LLMResponse
from shared.observability.metrics import (
    llm_request_latency,
    llm_tokens,
    prompt_parse_results,
)
from services.optimizer_service.interpreter import FallbackOptions, interpret_with_stage
from services.optimizer_service.prompt_builder import MetaPrompts, build

logger = logging.getLogger(__name__)

SERVICE_NAME = "optimizer_service"

V1_MAX_TOKENS = 10240
V2_MAX_TOKENS = 12000
TEMPERATURE = 0.7


async def _complete(llm: LLMProvider, model: str, prompt: str, max_tokens: int) -> LLMResponse:
    with llm_request_latency.time():
        response: LLMResponse = await llm.generate_text(
            prompt,
            model=model,
            max_tokens=max_tokens,
            temperature=TEMPERATURE,
        )

    if response.prompt_tokens or response.completion_tokens:
        llm_tokens.labels(service=SERVICE_NAME, direction="prompt").inc(
            response.prompt_tokens
        )
        llm_tokens.labels(service=SERVICE_NAME, direction="completion").inc(
            response.completion_tokens
        )
    return response


async def optimize_v1(
    llm: LLMProvider,
    prompts: MetaPrompts,
    model: str,
    user_input: str,
) -> str:
    """Return the optimized prompt text, or "" when the model returned no choices."""
    prompt = build(prompts.v1, user_input)
    try:
        response = await _complete(llm, model, prompt, V1_MAX_TOKENS)
    except EmptyCompletionError:
        logger.warning("Upstream returned no choices for V1 request")
        return ""

    logger.info(
        "V1 optimization done: %d chars in, %d chars out (prompt %s)",
        len(user_input), len(response.content), response.prompt_hash[:12],
    )
    return response.content


async def optimize_v2(
    llm: LLMProvider,
    prompts: MetaPrompts,
    model: str,
    request: OptimizeRequestV2,
) -> StructuredResponse:
    """Run the V2 flow. ``request`` is expected to already carry its defaults."""
    prompt = build(prompts.v2, request.input, request)
    response = await _complete(llm, model, prompt, V2_MAX_TOKENS)

    result, stage = interpret_with_stage(
        response.content, FallbackOptions.from_request(request)
    )
    prompt_parse_results.labels(stage=stage).inc()

    logger.info(
        "V2 optimization done: stage=%s, targets=%s, %d test cases",
        stage, ",".join(request.target_models) or "-", len(result.test_cases),
    )
    return result
