"""
Errors raised while talking to GitHub and the container registry.

Routes translate these into ApiError responses; nothing here knows about HTTP
responses of our own API.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "GitHubPackagesError",
    "UpstreamHTTPError",
    "UnexpectedStatusError",
    "UpstreamUnavailableError",
    "ResponseTooLargeError",
    "RegistryTokenError",
    "InvalidRepositoryError",
]


class GitHubPackagesError(Exception):
    """Base class for upstream lookup failures."""


class UpstreamHTTPError(GitHubPackagesError):
    """The upstream answered with a 4xx or 5xx status."""

    def __init__(self, status_code: int, url: str, body: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"{status_code} from GET {url}")


class UnexpectedStatusError(GitHubPackagesError):
    """The upstream answered with a status that is neither 2xx nor an error (e.g. a redirect)."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"unexpected status {status_code} from GET {url}")


class UpstreamUnavailableError(GitHubPackagesError):
    """Connection failure or timeout before a response arrived."""


class ResponseTooLargeError(GitHubPackagesError):
    def __init__(self, limit: int, size: Optional[int] = None) -> None:
        self.limit = limit
        self.size = size
        detail = f" ({size} bytes)" if size is not None else ""
        super().__init__(f"Upstream response exceeds {limit} bytes{detail}")


class InvalidRepositoryError(GitHubPackagesError, ValueError):
    """Repository identifier with empty, "." or ".." path segments."""


class RegistryTokenError(GitHubPackagesError):
    """The registry token endpoint did not hand out a usable bearer token."""
