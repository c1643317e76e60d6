"""
Pydantic models for catalog and tag lookups.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

__all__ = ["CatalogResponse", "TagsResponse"]


class CatalogResponse(BaseModel):
    repositories: List[str] = Field(default_factory=list, description='Repository names, "owner/name"')


class TagsResponse(BaseModel):
    name: str = Field(..., description='Repository identifier, "owner/name" or "name"')
    tags: List[str] = Field(default_factory=list, description="Tags of the repository")

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags_to_empty(cls, v: Optional[List[str]]) -> List[str]:
        # the registry answers {"tags": null} for repositories without tags
        return [] if v is None else v
