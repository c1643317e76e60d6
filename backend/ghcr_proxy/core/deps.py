"""
Dependency wiring for route handlers.

Routes declare `Depends(get_packages_service)`; tests replace it through
`app.dependency_overrides`. No business logic lives here.
"""
from __future__ import annotations

from fastapi import Depends

from ghcr_proxy.core.config import Settings, get_settings
from ghcr_proxy.services.github_packages import GitHubPackagesService

__all__ = ["get_app_settings", "get_packages_service"]


def get_app_settings() -> Settings:
    return get_settings()


def get_packages_service(settings: Settings = Depends(get_app_settings)) -> GitHubPackagesService:
    """Provide a GitHubPackagesService bound to the current settings."""
    return GitHubPackagesService(settings)
