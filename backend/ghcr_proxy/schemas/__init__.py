"""Pydantic models for request bodies and API responses."""

from ghcr_proxy.schemas.auth import AuthRequest
from ghcr_proxy.schemas.errors import ErrorResponse
from ghcr_proxy.schemas.ghcr import CatalogResponse, TagsResponse

__all__ = ["AuthRequest", "CatalogResponse", "ErrorResponse", "TagsResponse"]
