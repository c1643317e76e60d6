from __future__ import annotations

import pytest
from pydantic import ValidationError

from ghcr_proxy.core.config import DEFAULT_MAX_IN_MEMORY_SIZE, Settings, get_settings

_ENV_VARS = [
    "LOG_LEVEL",
    "APP_VERSION",
    "GITHUB_CONTAINER_REGISTRY_URL",
    "GHCR_URL",
    "GITHUB_CONTAINER_REGISTRY_TIMEOUT",
    "GHCR_TIMEOUT",
    "GITHUB_API_URL",
    "MAX_IN_MEMORY_SIZE",
    "ALLOW_ORIGINS",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    s = Settings()
    assert s.registry_url == "https://ghcr.io"
    assert s.github_api_url == "https://api.github.com"
    assert s.timeout_ms == 30000
    assert s.timeout_seconds == 30.0
    assert s.max_in_memory_size == DEFAULT_MAX_IN_MEMORY_SIZE == 16 * 1024 * 1024
    assert s.registry_token_url == "https://ghcr.io/token"
    assert s.registry_v2_url == "https://ghcr.io/v2"
    assert s.registry_service == "ghcr.io"
    assert s.cors_origins() == ["*"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GITHUB_CONTAINER_REGISTRY_URL", "https://registry.example.com/")
    monkeypatch.setenv("GITHUB_CONTAINER_REGISTRY_TIMEOUT", "2500")
    monkeypatch.setenv("ALLOW_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = Settings()
    assert s.timeout_seconds == 2.5
    assert s.registry_token_url == "https://registry.example.com/token"
    assert s.registry_v2_url == "https://registry.example.com/v2"
    assert s.registry_service == "registry.example.com"
    assert s.cors_origins() == ["https://a.example", "https://b.example"]
    assert s.log_level == "debug"


def test_short_alias_for_registry_url(monkeypatch):
    monkeypatch.setenv("GHCR_URL", "http://localhost:5000")
    assert Settings().registry_service == "localhost:5000"


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("GITHUB_CONTAINER_REGISTRY_TIMEOUT", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
