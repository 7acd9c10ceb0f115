"""Application settings and configuration management."""
from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

RoleLevel = Literal["junior", "mid", "senior"]


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")

    ADAPTIVE_WINDOW_SIZE: int = Field(default=3, ge=1)
    ADAPTIVE_START_LEVEL: int = Field(default=1, ge=1, le=3)
    DEFAULT_ROLE_LEVEL: RoleLevel = "mid"
    PASS_THRESHOLD: float = 6.0

    LLM_BASE_URL: str = "https://models.inference.ai.azure.com"
    LLM_ENDPOINT: str = "/chat/completions"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_API_KEY_ENV: str = "OPENAI_API_KEY"
    LLM_TIMEOUT_S: float = 30.0
    LLM_MAX_RETRIES: int = 1
    LLM_MAX_TOKENS: int = 200
    LLM_TEMPERATURE: float = 0.7

    MAX_RESUME_CHARS: int = 50_000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)


settings = Settings()
