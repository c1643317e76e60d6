"""
Application configuration using pydantic-settings.

Loads settings from environment variables (and optional .env file) with sensible defaults.

Fields loaded (env var names in parentheses):
- log_level (LOG_LEVEL)
- registry_url (GITHUB_CONTAINER_REGISTRY_URL)
- timeout_ms (GITHUB_CONTAINER_REGISTRY_TIMEOUT)
- github_api_url (GITHUB_API_URL)
- max_in_memory_size (MAX_IN_MEMORY_SIZE)
- allow_origins (ALLOW_ORIGINS)
- app_version (APP_VERSION)

Usage:
    from ghcr_proxy.core.config import get_settings
    settings = get_settings()
    print(settings.registry_url)
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "get_settings", "DEFAULT_MAX_IN_MEMORY_SIZE"]

DEFAULT_MAX_IN_MEMORY_SIZE = 16 * 1024 * 1024


class Settings(BaseSettings):
    # Environment / logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Container registry (accept the long name or GHCR_URL)
    registry_url: str = Field(
        default="https://ghcr.io",
        validation_alias=AliasChoices("GITHUB_CONTAINER_REGISTRY_URL", "GHCR_URL"),
    )

    # Upstream timeout in milliseconds
    timeout_ms: int = Field(
        default=30000,
        gt=0,
        validation_alias=AliasChoices("GITHUB_CONTAINER_REGISTRY_TIMEOUT", "GHCR_TIMEOUT"),
    )

    github_api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")

    # Upper bound for a buffered upstream response body, in bytes
    max_in_memory_size: int = Field(default=DEFAULT_MAX_IN_MEMORY_SIZE, gt=0, alias="MAX_IN_MEMORY_SIZE")

    # CORS origins, comma-separated; "*" allows everything
    allow_origins: str = Field(default="*", alias="ALLOW_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def registry_token_url(self) -> str:
        return f"{self.registry_url.rstrip('/')}/token"

    @property
    def registry_v2_url(self) -> str:
        return f"{self.registry_url.rstrip('/')}/v2"

    @property
    def registry_service(self) -> str:
        """Service name the registry token endpoint expects (the registry host)."""
        url = self.registry_url.rstrip("/")
        return url.split("://", 1)[-1].split("/", 1)[0]

    def cors_origins(self) -> List[str]:
        raw = (self.allow_origins or "*").strip()
        if not raw or raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached Settings instance.
    """
    return Settings()  # type: ignore[call-arg]
