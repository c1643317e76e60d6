"""
Pytest configuration for backend tests.

No test talks to the network: upstream GitHub and registry calls are served by
httpx.MockTransport handlers.

Fixtures:
- settings: Settings pointing at fake upstream hosts with small limits.
- make_service: builds a GitHubPackagesService around a request handler.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest


# Ensure the 'backend' directory is on sys.path so we can import ghcr_proxy when running tests from repo root
CURRENT_DIR = Path(__file__).parent
BACKEND_ROOT = (CURRENT_DIR / "..").resolve()
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

GITHUB_API = "https://api.github.test"
REGISTRY = "https://ghcr.test"


@pytest.fixture
def settings():
    from ghcr_proxy.core.config import Settings

    return Settings(
        github_api_url=GITHUB_API,
        registry_url=REGISTRY,
        timeout_ms=1000,
        max_in_memory_size=64 * 1024,
    )


@pytest.fixture
def make_service(settings) -> Callable:
    """
    Return a factory: make_service(handler) -> GitHubPackagesService whose
    upstream requests are answered by `handler(request) -> httpx.Response`.
    """
    from ghcr_proxy.services.github_packages import GitHubPackagesService

    def _factory(handler, **overrides):
        s = settings.model_copy(update=overrides) if overrides else settings
        return GitHubPackagesService(s, transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture
def auth():
    from ghcr_proxy.schemas.auth import AuthRequest

    return AuthRequest(username="octocat", token="ghp_secret")
