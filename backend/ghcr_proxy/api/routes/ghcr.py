"""
GHCR lookup routes.

Endpoints (all under /api/ghcr):
- POST /repositories                          -> catalog (blocking)
- POST /repositories/{repository}/tags        -> tags via GitHub Packages API (blocking)
- POST /async/repositories                    -> catalog (async)
- POST /async/repositories/{repository}/tags  -> tags via registry v2 API (async)
- GET  /health                                -> plain-text liveness message

`repository` is "name", "owner/name" or "owner%2Fname". Empty, "." or ".."
segments are rejected with 400.

Blocking routes relay upstream 4xx/5xx errors with the upstream status and an
ErrorResponse body; any other non-2xx upstream status becomes 502. Async routes
answer 500 with an empty body on any failure.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from ghcr_proxy.core.deps import get_packages_service
from ghcr_proxy.core.errors import ApiError, BadRequestError, InternalServerError, UpstreamError
from ghcr_proxy.core.logging import get_logger
from ghcr_proxy.schemas.auth import AuthRequest
from ghcr_proxy.schemas.errors import ErrorResponse
from ghcr_proxy.schemas.ghcr import CatalogResponse, TagsResponse
from ghcr_proxy.services.exceptions import (
    InvalidRepositoryError,
    UnexpectedStatusError,
    UpstreamHTTPError,
)
from ghcr_proxy.services.github_packages import GitHubPackagesService, check_repository

router = APIRouter(prefix="/api/ghcr", tags=["ghcr"])

log = get_logger(__name__)

HEALTH_MESSAGE = "GHCR API is running"

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _checked_repository(repository: str) -> str:
    try:
        return check_repository(repository)
    except InvalidRepositoryError as e:
        raise BadRequestError(str(e)) from e


@router.post("/repositories", response_model=CatalogResponse, responses=_ERROR_RESPONSES)
def get_catalog(
    payload: AuthRequest,
    service: GitHubPackagesService = Depends(get_packages_service),
) -> CatalogResponse:
    """
    List the container packages visible to the caller.
    """
    try:
        return service.get_catalog(payload)
    except UpstreamHTTPError as e:
        log.error("GitHub API error: %s - %s", e.status_code, e.body)
        raise ApiError(f"GitHub API error: {e}", status_code=e.status_code) from e
    except UnexpectedStatusError as e:
        log.error("GitHub API error: %s", e)
        raise UpstreamError(f"GitHub API error: {e}") from e
    except Exception as e:
        log.error("Unexpected error: %s", e, exc_info=True)
        raise InternalServerError(f"Internal server error: {e}") from e


@router.post(
    "/repositories/{repository:path}/tags",
    response_model=TagsResponse,
    responses=_ERROR_RESPONSES,
)
def get_tags(
    repository: str,
    payload: AuthRequest,
    service: GitHubPackagesService = Depends(get_packages_service),
) -> TagsResponse:
    """
    List the tags of one repository through the GitHub Packages versions API.
    """
    repository = _checked_repository(repository)
    try:
        return service.get_tags(repository, payload)
    except UpstreamHTTPError as e:
        log.error("GHCR API error for repository %s: %s - %s", repository, e.status_code, e.body)
        raise ApiError(f"GHCR API error: {e}", status_code=e.status_code) from e
    except UnexpectedStatusError as e:
        log.error("GHCR API error for repository %s: %s", repository, e)
        raise UpstreamError(f"GHCR API error: {e}") from e
    except Exception as e:
        log.error("Unexpected error for repository %s: %s", repository, e, exc_info=True)
        raise InternalServerError(f"Internal server error: {e}") from e


@router.post("/async/repositories", response_model=CatalogResponse)
async def get_catalog_async(
    payload: AuthRequest,
    service: GitHubPackagesService = Depends(get_packages_service),
):
    try:
        return await service.get_catalog_async(payload)
    except Exception as e:
        log.error("Async catalog lookup failed: %s", e)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("/async/repositories/{repository:path}/tags", response_model=TagsResponse)
async def get_tags_async(
    repository: str,
    payload: AuthRequest,
    service: GitHubPackagesService = Depends(get_packages_service),
):
    repository = _checked_repository(repository)
    try:
        return await service.get_tags_async(repository, payload)
    except Exception as e:
        log.error("Async tag lookup failed for %s: %s", repository, e)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return HEALTH_MESSAGE
