"""
Credentials sent in the body of every registry lookup.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

__all__ = ["AuthRequest"]


def _is_blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


class AuthRequest(BaseModel):
    username: str = Field(..., description="GitHub username; default owner for bare repository names")
    # repr=False keeps the token out of logs and tracebacks
    token: str = Field(..., repr=False, description="GitHub personal access token (read:packages)")

    # "before" so that null is reported as missing rather than as a type error;
    # values are forwarded upstream exactly as given
    @field_validator("username", mode="before")
    @classmethod
    def _username_not_blank(cls, v: Any) -> Any:
        if _is_blank(v):
            raise ValueError("Username is required")
        return v

    @field_validator("token", mode="before")
    @classmethod
    def _token_not_blank(cls, v: Any) -> Any:
        if _is_blank(v):
            raise ValueError("Token is required")
        return v
