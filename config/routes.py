from __future__ import annotations  # Configuration schema for LLM routing

from typing import Dict

from pydantic import BaseModel, Field

from .settings import Settings, settings as default_settings


class LlmRoute(BaseModel):  # LLM endpoint configuration
    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    max_retries: int = Field(default=1, ge=0)
    api_key_env: str | None = None
    max_tokens: int = Field(default=200, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    extra_headers: Dict[str, str] = Field(default_factory=dict)


def interviewer_route(cfg: Settings | None = None) -> LlmRoute:  # Build the interviewer route from settings
    cfg = cfg or default_settings
    return LlmRoute(
        name="interviewer",
        base_url=cfg.LLM_BASE_URL,
        endpoint=cfg.LLM_ENDPOINT,
        model=cfg.LLM_MODEL,
        timeout_s=cfg.LLM_TIMEOUT_S,
        max_retries=cfg.LLM_MAX_RETRIES,
        api_key_env=cfg.LLM_API_KEY_ENV or None,
        max_tokens=cfg.LLM_MAX_TOKENS,
        temperature=cfg.LLM_TEMPERATURE,
    )
