from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from fastapi import Response


optimize_requests = Counter(
    "optimize_requests_total",
    "Optimize requests handled, by endpoint and outcome",
    ["endpoint", "outcome"],
)

llm_tokens = Counter(
    "llm_tokens_total",
    "Total LLM tokens consumed",
    ["service", "direction"],
)

llm_request_latency = Histogram(
    "llm_request_latency_seconds",
    "Latency of the upstream chat completion call",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

prompt_parse_results = Counter(
    "prompt_parse_results_total",
    "Structured response parses, by the stage that produced the result",
    ["stage"],
)


def metrics_response() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
