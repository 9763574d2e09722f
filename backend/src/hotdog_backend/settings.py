"""Application-wide configuration loaded from the environment."""

from __future__ import annotations

from functools import cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseSettings):
    """Centralized settings for the hot dog stand backend service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite:///./hotdog.db"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"
    save_backend: Literal["memory", "database"] = "memory"
    save_timeout_seconds: float = Field(default=5.0, gt=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    autosave_interval_seconds: float | None = Field(default=30.0, gt=0)


@cache
def get_settings() -> BackendSettings:
    """Return the cached settings instance."""

    return BackendSettings()


settings = get_settings()

__all__ = ["BackendSettings", "get_settings", "settings"]
