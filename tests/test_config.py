"""Unit Tests for client settings."""

import logging

import pytest
from pydantic import ValidationError

from core.config import (
    DEFAULT_API_URL,
    ChatClientSettings,
    clear_settings_cache,
    configure_logging,
    get_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "HEALTHSPARK_API_URL",
        "HEALTHSPARK_REQUEST_TIMEOUT",
        "HEALTHSPARK_STORAGE_PATH",
        "HEALTHSPARK_USER_ID",
        "HEALTHSPARK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults():
    settings = ChatClientSettings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.request_timeout == 30.0
    assert settings.user_id is None
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HEALTHSPARK_API_URL", "https://chat.example.com/api/")
    monkeypatch.setenv("HEALTHSPARK_USER_ID", "  u-1 ")
    monkeypatch.setenv("HEALTHSPARK_STORAGE_PATH", str(tmp_path / "s.json"))
    monkeypatch.setenv("HEALTHSPARK_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.api_url == "https://chat.example.com/api"
    assert settings.user_id == "u-1"
    assert settings.storage_path == tmp_path / "s.json"
    assert settings.log_level == "DEBUG"


def test_blank_user_id_is_none(monkeypatch):
    monkeypatch.setenv("HEALTHSPARK_USER_ID", "   ")
    assert ChatClientSettings().user_id is None


@pytest.mark.parametrize(
    "name, value",
    [
        ("HEALTHSPARK_REQUEST_TIMEOUT", "0"),
        ("HEALTHSPARK_LOG_LEVEL", "chatty"),
        ("HEALTHSPARK_API_URL", "  "),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        ChatClientSettings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_configure_logging_quiets_http_loggers():
    configure_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger().level == logging.DEBUG
