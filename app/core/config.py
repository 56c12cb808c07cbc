"""
Client configuration.

Pydantic-based settings read from HEALTHSPARK_* environment variables
(and a local .env file), cached per process.

Usage:
    from core.config import get_settings

    settings = get_settings()
    print(settings.api_url)
"""

from __future__ import annotations
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_STORAGE_PATH = Path.home() / ".healthspark" / "state.json"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ChatClientSettings(BaseSettings):
    """Connection and persistence settings for the chat client."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTHSPARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(default=DEFAULT_API_URL, description="Backend base URL")
    request_timeout: float = Field(
        default=30.0, gt=0, description="Per-request timeout in seconds"
    )
    storage_path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="JSON file holding the persisted session id",
    )
    user_id: Optional[str] = Field(
        default=None, description="Optional user id forwarded to the backend"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("api_url must not be empty")
        return value.rstrip("/")

    @field_validator("user_id")
    @classmethod
    def blank_user_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = (value or "INFO").upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> ChatClientSettings:
    load_dotenv()
    return ChatClientSettings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()


def configure_logging(level: str = "INFO") -> None:
    """Basic process-wide logging; third-party HTTP chatter stays at WARNING."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
