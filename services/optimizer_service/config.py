from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_PORT = "8092"


class ConfigError(ValueError):
    """Required configuration is missing; the service must not start."""


def _env(name: str, default: str) -> str:
    # Empty values count as unset.
    return os.environ.get(name, "") or default


@dataclass(frozen=True)
class OptimizerConfig:
    api_key: str
    base_url: str
    model: str
    port: str
    log_level: str
    llm_provider: str

    @classmethod
    def from_env(cls) -> OptimizerConfig:
        api_key = os.environ.get("API_KEY", "")
        if not api_key:
            raise ConfigError("API_KEY environment variable is required")

        port = _env("PORT", DEFAULT_PORT)
        if not port.isdigit():
            raise ConfigError(f"PORT must be a number, got {port!r}")

        return cls(
            api_key=api_key,
            base_url=_env("BASE_URL", DEFAULT_BASE_URL),
            model=_env("MODEL", DEFAULT_MODEL),
            port=port,
            log_level=_env("LOG_LEVEL", "INFO"),
            llm_provider=_env("LLM_PROVIDER", "openai"),
        )
