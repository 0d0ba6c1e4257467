"""Application settings definitions."""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Settings loaded from environment variables."""

    database_url: str = "sqlite:///./jobrank.db"
    redis_url: AnyUrl | str = "redis://localhost:6379/0"
    timezone: str = "UTC"
    celery_eager: bool = True
    log_level: str = "INFO"

    cache_ttl_seconds: float = Field(default=60.0, gt=0)
    cache_max_entries: int = Field(default=1024, gt=0)
    cache_max_results: int = Field(default=50, gt=0)
    default_page_size: int = Field(default=20, gt=0)

    ingest_chunk_size: int = Field(default=100, gt=0)
    job_expiry_days: int = Field(default=60, gt=0)

    recency_half_life_days: float = Field(default=14.0, gt=0)
    stale_liveness_factor: float = Field(default=0.5, ge=0, le=1)
    skill_match_mode: Literal["lexical", "semantic"] = "lexical"

    liveness_batch_size: int = Field(default=50, gt=0)
    http_timeout: float = 10.0
    http_user_agent: str = "jobrank/0.1"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    @field_validator("skill_match_mode", mode="before")
    @classmethod
    def _lower_mode(cls, value: str) -> str:
        """Accept mixed-case match mode values."""

        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Load settings using cached environment lookup."""

        return _get_settings()


@lru_cache(maxsize=1)
def _get_settings() -> AppSettings:
    """Internal cache for settings to avoid repeated parsing."""

    return AppSettings()
