"""Scheduler Configuration — preview bounds, generation window and log output from env.

Invariants:
    - One Settings instance per process via get_settings(); tests call cache_clear()
    - preview_default_count and preview_max_count are >= 1; the preview service clamps
      every requested count to preview_max_count
    - generation_look_ahead_days >= 0: 0 means "only what is due today or overdue"

Design Decisions:
    - pydantic-settings: env vars (case-insensitive) and an optional .env file, typed and
      validated on load
    - Every field has a default: the library works inside a host app with no configuration
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for preview and the generation worker."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Preview
    preview_default_count: int = 10
    preview_max_count: int = 20

    # Generation tick
    generation_look_ahead_days: int = Field(7, ge=0)
    generation_poll_seconds: float = Field(86_400, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("preview_default_count", "preview_max_count")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("preview counts must be >= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
