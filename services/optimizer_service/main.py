"""
Optimizer Service -- HTTP front-end for the prompt optimizer.

Wraps user text in a meta-prompt, forwards it to an OpenAI-compatible chat
completion endpoint and returns the result.

Entry points:
- GET  /, /v2                 web shells (V1 and V2)
- POST /api/optimize          V1: plain text in, plain text out
- POST /api/v2/optimize       V2: options in, StructuredResponse out
- POST /api/v2/generate-multi V2 with multi-model generation forced on
- GET  /api/v2/models         supported model catalog

Every request is independent: one outbound call, no shared mutable state
besides the configuration, meta-prompts and provider loaded at startup.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from shared.logging.logger import setup_logging
from shared.observability.metrics import metrics_response, optimize_requests
from shared.contracts.optimizer import (
    ErrorResponse,
    ModelsResponse,
    OptimizeRequest,
    OptimizeRequestV2,
    OptimizeResponse,
    OptimizeResponseV2,
)
from shared.llm_adapter import LLMProvider, UpstreamError, get_llm_provider
from services.optimizer_service.catalog import list_models, model_ids
from services.optimizer_service.config import OptimizerConfig
from services.optimizer_service.optimizer import optimize_v1, optimize_v2
from services.optimizer_service.prompt_builder import MetaPrompts, load_meta_prompts

SERVICE_NAME = "optimizer_service"
WEB_DIR = Path(__file__).parent / "web"
V1_OPTIMIZE_PATH = "/api/optimize"

cfg: OptimizerConfig | None = None
meta_prompts: MetaPrompts | None = None
llm: LLMProvider | None = None

logger = logging.getLogger(SERVICE_NAME)


def _initialize() -> logging.Logger:
    """Load config, logging, meta-prompts and the provider into module state."""
    global cfg, meta_prompts, llm

    cfg = OptimizerConfig.from_env()
    service_logger = setup_logging(SERVICE_NAME, cfg.log_level)
    meta_prompts = load_meta_prompts()
    llm = get_llm_provider(
        cfg.llm_provider,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        model=cfg.model,
    )
    return service_logger


@asynccontextmanager
async def lifespan(application: FastAPI):
    # main() initializes before binding; this covers `uvicorn ...main:app`.
    if cfg is None:
        _initialize()
    logger.info("Optimizer Service ready (model=%s)", cfg.model)
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Prompt Optimizer",
    version="0.2.0",
    description="Meta-prompt based prompt optimization over an OpenAI-compatible endpoint",
    lifespan=lifespan,
)

app.mount("/static", StaticFiles(directory=WEB_DIR / "static"), name="static")


def _get_config() -> OptimizerConfig:
    if cfg is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return cfg


def _get_meta_prompts() -> MetaPrompts:
    if meta_prompts is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return meta_prompts


def _get_llm() -> LLMProvider:
    if llm is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return llm


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "Invalid request parameters"
    if request.url.path != V1_OPTIMIZE_PATH:
        message = f"{message}: {_describe_validation(exc)}"
    logger.info("Rejected request to %s: %s", request.url.path, message)
    return _error(400, message)


# ---------------------------------------------------------------------------
# Health, metrics & web shells
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok", "service": SERVICE_NAME}


@app.get("/metrics")
async def metrics():
    return metrics_response()


@app.get("/", include_in_schema=False)
async def index_v1():
    return FileResponse(WEB_DIR / "index.html")


@app.get("/v2", include_in_schema=False)
async def index_v2():
    return FileResponse(WEB_DIR / "index-v2.html")


# ---------------------------------------------------------------------------
# V1 API
# ---------------------------------------------------------------------------

@app.post(
    V1_OPTIMIZE_PATH,
    response_model=OptimizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def optimize(
    req: OptimizeRequest,
    config: OptimizerConfig = Depends(_get_config),
    prompts: MetaPrompts = Depends(_get_meta_prompts),
    provider: LLMProvider = Depends(_get_llm),
):
    try:
        result = await optimize_v1(provider, prompts, config.model, req.input)
    except UpstreamError as e:
        logger.exception("V1 optimization failed")
        optimize_requests.labels(endpoint="v1", outcome="error").inc()
        return _error(500, f"Optimization failed: {e}")

    optimize_requests.labels(endpoint="v1", outcome="ok").inc()
    return OptimizeResponse(result=result)


# ---------------------------------------------------------------------------
# V2 API
# ---------------------------------------------------------------------------

async def _run_v2(
    req: OptimizeRequestV2,
    config: OptimizerConfig,
    prompts: MetaPrompts,
    provider: LLMProvider,
    endpoint: str,
    failure_prefix: str,
):
    try:
        result = await optimize_v2(provider, prompts, config.model, req.with_defaults())
    except UpstreamError as e:
        logger.exception("V2 optimization failed (%s)", endpoint)
        optimize_requests.labels(endpoint=endpoint, outcome="error").inc()
        return _error(500, f"{failure_prefix}: {e}")

    optimize_requests.labels(endpoint=endpoint, outcome="ok").inc()
    return OptimizeResponseV2(result=result)


@app.post(
    "/api/v2/optimize",
    response_model=OptimizeResponseV2,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def optimize_structured(
    req: OptimizeRequestV2,
    config: OptimizerConfig = Depends(_get_config),
    prompts: MetaPrompts = Depends(_get_meta_prompts),
    provider: LLMProvider = Depends(_get_llm),
):
    return await _run_v2(req, config, prompts, provider, "v2", "Optimization failed")


@app.post(
    "/api/v2/generate-multi",
    response_model=OptimizeResponseV2,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_multi(
    req: OptimizeRequestV2,
    config: OptimizerConfig = Depends(_get_config),
    prompts: MetaPrompts = Depends(_get_meta_prompts),
    provider: LLMProvider = Depends(_get_llm),
):
    req = req.model_copy(
        update={
            "generate_multi": True,
            "target_models": req.target_models or model_ids(),
        }
    )
    return await _run_v2(req, config, prompts, provider, "multi", "Batch generation failed")


@app.get("/api/v2/models", response_model=ModelsResponse)
async def get_models():
    return ModelsResponse(models=list_models())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Load configuration and serve; exits with status 1 before binding on bad config."""
    try:
        service_logger = _initialize()
    except (OSError, ValueError) as e:
        # ConfigError, an unknown LLM_PROVIDER or a missing meta-prompt file
        setup_logging(SERVICE_NAME).critical("Startup aborted: %s", e)
        raise SystemExit(1) from e

    service_logger.info("Server starting on port %s", cfg.port)
    service_logger.info("V1: http://localhost:%s/", cfg.port)
    service_logger.info("V2: http://localhost:%s/v2", cfg.port)
    uvicorn.run(app, host="0.0.0.0", port=int(cfg.port), log_config=None)


if __name__ == "__main__":
    main()
