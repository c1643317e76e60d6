"""
Error body returned by every failing endpoint.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

__all__ = ["ErrorResponse"]


class ErrorResponse(BaseModel):
    message: str = Field(..., description="Human-readable error message")
    status: int = Field(..., description="HTTP status code, e.g. 400 or 500")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the error was produced")
    request_id: Optional[str] = Field(default=None, description="Client-supplied correlation/request id")
