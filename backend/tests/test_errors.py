from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from ghcr_proxy.core.errors import (
    ApiError,
    BadRequestError,
    InternalServerError,
    UpstreamError,
    register_exception_handlers,
)


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/bad-request")
    def bad_request():
        raise BadRequestError("Invalid repository name")

    @app.get("/relay")
    def relay():
        raise ApiError("GitHub API error: 403", status_code=403)

    @app.get("/crash")
    def crash():
        raise RuntimeError("kaboom")

    return app


def test_status_codes_of_error_types():
    assert BadRequestError("x").status_code == 400
    assert UpstreamError("x").status_code == 502
    assert InternalServerError("x").status_code == 500
    assert ApiError("x", status_code=418).status_code == 418
    # instance override does not leak into the class
    assert ApiError("y").status_code == 400


def test_api_error_rendered_as_error_response():
    client = TestClient(_app())
    resp = client.get("/bad-request", headers={"X-Correlation-ID": "corr-1"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid repository name"
    assert body["status"] == 400
    assert body["request_id"] == "corr-1"
    assert body["timestamp"]


def test_api_error_status_override():
    resp = TestClient(_app()).get("/relay")
    assert resp.status_code == 403
    assert resp.json()["status"] == 403


def test_unhandled_exception_is_500_error_response():
    client = TestClient(_app(), raise_server_exceptions=False)
    resp = client.get("/crash")

    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Internal server error: kaboom"
    assert body["status"] == 500
