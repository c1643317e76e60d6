"""
FastAPI application entrypoint.

- Configures CORS.
- Registers standardized error handlers.
- Initializes structured logging.
- Includes infra routes (health/version) and the GHCR lookup routes.

Run locally:
  uvicorn ghcr_proxy.main:app --reload --port 8080
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ghcr_proxy.api.router import router as api_router
from ghcr_proxy.core.config import Settings, get_settings
from ghcr_proxy.core.errors import register_exception_handlers
from ghcr_proxy.core.logging import init_logging


def _create_infra_router(settings: Settings) -> APIRouter:
    """
    Create a minimal API router with non-business endpoints (health, version).
    """
    router = APIRouter(prefix="/api", tags=["infra"])

    @router.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @router.get("/version")
    def version() -> dict:
        return {"version": settings.app_version}

    return router


def get_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Construct the FastAPI app with CORS, logging, routers, and error handlers.
    """
    settings = settings or get_settings()
    init_logging(settings.log_level)

    app = FastAPI(title="GHCR Proxy API", version=settings.app_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(_create_infra_router(settings))
    app.include_router(api_router)

    register_exception_handlers(app)

    @app.get("/")
    def root() -> dict:
        return {"message": "GHCR Proxy API", "health": "/api/health"}

    return app


# ASGI application
app = get_application()
