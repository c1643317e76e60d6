"""
GitHub Packages / GHCR lookups.

Contract
--------
- get_catalog(auth) / get_catalog_async(auth) -> CatalogResponse
    GET {github_api_url}/users/{username}/packages?package_type=container
- get_tags(repository, auth) -> TagsResponse
    GET {github_api_url}/users/{owner}/packages/container/{package}/versions
    Tags are collected from each version's metadata.container.tags.
- get_tags_async(repository, auth) -> TagsResponse
    Exchanges the credentials for a registry bearer token at {registry_url}/token,
    then GET {registry_url}/v2/{owner}/{package}/tags/list.
    Never raises for upstream failures: answers with an empty tag list instead.
- Repository identifiers with empty, "." or ".." segments raise
    InvalidRepositoryError before any upstream call.

Authentication
--------------
- GitHub REST: "Authorization: token <PAT>"
- Registry token endpoint: HTTP Basic with username:PAT
- Registry v2: "Authorization: Bearer <registry token>"

Errors
------
Blocking lookups and get_catalog_async raise GitHubPackagesError subclasses
(see ghcr_proxy.services.exceptions). Tokens are never logged.
"""

from __future__ import annotations

import base64
import json
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

from ghcr_proxy.core.config import Settings, get_settings
from ghcr_proxy.core.http import (
    UpstreamResponse,
    build_async_client,
    build_client,
    fetch,
    fetch_async,
)
from ghcr_proxy.core.logging import get_logger
from ghcr_proxy.schemas.auth import AuthRequest
from ghcr_proxy.schemas.ghcr import CatalogResponse, TagsResponse
from ghcr_proxy.services.exceptions import (
    GitHubPackagesError,
    InvalidRepositoryError,
    RegistryTokenError,
)

__all__ = [
    "GitHubPackagesService",
    "GITHUB_V3_MEDIA_TYPE",
    "parse_packages_response",
    "extract_version_tags",
    "split_repository",
    "check_repository",
    "qualify_repository",
    "basic_auth_value",
]

log = get_logger(__name__)

GITHUB_V3_MEDIA_TYPE = "application/vnd.github.v3+json"


# -------------------------------
# Pure helpers
# -------------------------------

def check_repository(repository: str) -> str:
    """
    Reject identifiers whose segments would be rewritten by URL normalisation.
    Empty, "." and ".." segments never name a package.
    """
    if any(segment in ("", ".", "..") for segment in repository.split("/")):
        raise InvalidRepositoryError(f"Invalid repository name: {repository!r}")
    return repository


def split_repository(repository: str, default_owner: str) -> Tuple[str, str]:
    """
    Split "owner/package" into its parts; a bare "package" belongs to default_owner.
    Anything after a second slash is ignored.
    """
    parts = repository.split("/")
    if len(parts) > 1:
        return parts[0], parts[1]
    return default_owner, parts[0]


def qualify_repository(repository: str, username: str) -> str:
    """Prefix a bare repository name with the username; "owner/name" is kept as is."""
    return repository if "/" in repository else f"{username}/{repository}"


def basic_auth_value(username: str, token: str) -> str:
    encoded = base64.b64encode(f"{username}:{token}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def parse_packages_response(text: Optional[str]) -> CatalogResponse:
    """
    Turn the GitHub packages listing into "owner/name" entries.

    A document that is not a JSON array yields no repositories. Any malformed
    entry (missing name or owner.login) discards the whole listing.
    """
    try:
        root = json.loads(text) if text else None
        repositories: List[str] = []
        if isinstance(root, list):
            for package in root:
                name = package["name"]
                owner = package["owner"]["login"]
                if not isinstance(name, str) or not isinstance(owner, str):
                    raise TypeError("package name and owner.login must be strings")
                repositories.append(f"{owner}/{name}")
        return CatalogResponse(repositories=repositories)
    except (ValueError, KeyError, TypeError) as e:
        log.error("Error parsing packages response: %s", e, exc_info=True)
        return CatalogResponse(repositories=[])


def extract_version_tags(versions: Any, owner: str, package: str) -> List[str]:
    """Collect metadata.container.tags across package versions, in order."""
    tags: List[str] = []
    if not isinstance(versions, list):
        return tags
    for version in versions:
        if not isinstance(version, dict):
            continue
        version_id = version.get("id", "unknown")
        metadata = version.get("metadata")
        if not isinstance(metadata, dict) or "container" not in metadata:
            continue
        container = metadata.get("container")
        if not isinstance(container, dict):
            log.debug("No container metadata for %s/%s (version=%s)", owner, package, version_id)
            continue
        version_tags = container.get("tags")
        if not isinstance(version_tags, list):
            log.debug("No tags array in container metadata for %s/%s (version=%s)", owner, package, version_id)
            continue
        for tag in version_tags:
            tags.append(str(tag))
            log.debug("Found tag='%s' for %s/%s (version=%s)", tag, owner, package, version_id)
    return tags


# -------------------------------
# Service
# -------------------------------

class GitHubPackagesService:
    """
    Looks up container packages and tags on behalf of the caller's credentials.

    A fresh httpx client is opened per lookup because credentials differ per request.
    """

    def __init__(self, settings: Optional[Settings] = None, *, transport: Any = None) -> None:
        self.settings = settings or get_settings()
        # httpx.MockTransport serves both sync and async clients
        self._transport = transport

    # GitHub REST helpers

    def _github_headers(self, auth: AuthRequest) -> dict:
        return {"Authorization": f"token {auth.token}", "Accept": GITHUB_V3_MEDIA_TYPE}

    def _catalog_path(self, auth: AuthRequest) -> str:
        return f"/users/{quote(auth.username, safe='')}/packages"

    def _fetch_github(self, auth: AuthRequest, path: str, params: Optional[dict] = None) -> UpstreamResponse:
        with build_client(
            self.settings,
            base_url=self.settings.github_api_url,
            headers=self._github_headers(auth),
            transport=self._transport,
        ) as client:
            response = fetch(client, path, params=params, max_bytes=self.settings.max_in_memory_size)
        return response.raise_for_status()

    async def _fetch_github_async(
        self, auth: AuthRequest, path: str, params: Optional[dict] = None
    ) -> UpstreamResponse:
        async with build_async_client(
            self.settings,
            base_url=self.settings.github_api_url,
            headers=self._github_headers(auth),
            transport=self._transport,
        ) as client:
            response = await fetch_async(client, path, params=params, max_bytes=self.settings.max_in_memory_size)
        return response.raise_for_status()

    # Catalog

    def get_catalog(self, auth: AuthRequest) -> CatalogResponse:
        log.info("Fetching GitHub packages catalog for user: %s", auth.username)
        try:
            response = self._fetch_github(auth, self._catalog_path(auth), {"package_type": "container"})
        except GitHubPackagesError as e:
            log.error("Error fetching GitHub packages catalog: %s", e)
            raise
        return parse_packages_response(response.text)

    async def get_catalog_async(self, auth: AuthRequest) -> CatalogResponse:
        try:
            response = await self._fetch_github_async(
                auth, self._catalog_path(auth), {"package_type": "container"}
            )
        except GitHubPackagesError as e:
            log.error("Error fetching GitHub packages catalog: %s", e)
            raise
        return parse_packages_response(response.text)

    # Tags

    def get_tags(self, repository: str, auth: AuthRequest) -> TagsResponse:
        log.info("Fetching tags for repository: %s for user: %s", repository, auth.username)
        check_repository(repository)
        owner, package = split_repository(repository, auth.username)
        path = f"/users/{quote(owner, safe='')}/packages/container/{quote(package, safe='')}/versions"

        response = self._fetch_github(auth, path)
        try:
            versions = response.json()
        except ValueError as e:
            raise GitHubPackagesError(f"Invalid JSON in package versions for {owner}/{package}") from e

        return TagsResponse(name=repository, tags=extract_version_tags(versions, owner, package))

    async def get_tags_async(self, repository: str, auth: AuthRequest) -> TagsResponse:
        check_repository(repository)
        repo = qualify_repository(repository, auth.username)
        try:
            bearer = await self._registry_token(auth, repo)
            async with build_async_client(
                self.settings,
                base_url=self.settings.registry_v2_url,
                headers={"Authorization": f"Bearer {bearer}"},
                transport=self._transport,
            ) as client:
                response = await fetch_async(
                    client,
                    f"/{quote(repo, safe='/')}/tags/list",
                    max_bytes=self.settings.max_in_memory_size,
                )
            body = response.raise_for_status().json()
            tags = TagsResponse(name=repo, tags=body.get("tags") if isinstance(body, dict) else None)
        except Exception as e:  # any failure degrades to an empty tag list
            log.error("Failed to fetch tags for %s: %s", repo, e)
            return TagsResponse(name=repo, tags=[])

        log.info("Tags fetched successfully for %s: %d tags", repo, len(tags.tags))
        return tags

    async def _registry_token(self, auth: AuthRequest, repo: str) -> str:
        """Exchange the PAT for a pull-scoped registry bearer token."""
        params = {
            "service": self.settings.registry_service,
            "scope": f"repository:{repo}:pull",
        }
        try:
            async with build_async_client(
                self.settings,
                base_url="",
                headers={"Authorization": basic_auth_value(auth.username, auth.token)},
                transport=self._transport,
            ) as client:
                response = await fetch_async(
                    client,
                    self.settings.registry_token_url,
                    params=params,
                    max_bytes=self.settings.max_in_memory_size,
                )
            body = response.raise_for_status().json()
            token = body.get("token") if isinstance(body, dict) else None
            if not isinstance(token, str) or not token:
                raise RegistryTokenError(f"Registry token response for {repo} has no token")
        except Exception as e:
            log.error("Bearer token failed for %s: %s", repo, e)
            raise

        log.debug("GHCR Bearer token obtained for %s (len=%d)", repo, len(token))
        return token
