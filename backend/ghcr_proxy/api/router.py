"""
Shared API router.

Aggregates sub-routers from ghcr_proxy.api.routes.*. Each sub-router carries
its own /api/... prefix, so this router has none.

Sub-routers included:
- ghcr_proxy.api.routes.ghcr -> /api/ghcr
"""

from __future__ import annotations

from fastapi import APIRouter

from ghcr_proxy.api.routes import ghcr

__all__ = ["router"]

router = APIRouter()
router.include_router(ghcr.router)
