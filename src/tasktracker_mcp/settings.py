"""
Task Tracker Settings.

Configuration is read from ``TASKTRACKER_*`` environment variables and an
optional ``.env`` file.

Environment Variables:
    TASKTRACKER_BASE_URL: Backend base URL (default http://localhost:8080)
    TASKTRACKER_REQUEST_TIMEOUT: Per-request timeout in seconds (default 15)
    TASKTRACKER_TOKEN_FILE: Where the session token is persisted
    TASKTRACKER_LOG_LEVEL: Logging level for the server entry point
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tasktracker_mcp.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    """Client settings."""

    model_config = SettingsConfigDict(
        env_prefix="TASKTRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Backend base URL; its origin scopes the stored token",
    )
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Seconds before a request is abandoned",
    )
    token_file: Path = Field(
        default=Path("~/.config/tasktracker/session.json"),
        description="JSON file holding the persisted session token",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached)."""
    return Settings()
