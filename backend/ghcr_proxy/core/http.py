"""
httpx client construction for upstream calls.

Every client shares the same policy:
- connect/read/write/pool timeouts from settings.timeout_ms
- JSON Accept/Content-Type headers unless the caller overrides them
- bodies are streamed and rejected once they exceed settings.max_in_memory_size

Tests inject an httpx.MockTransport through the `transport` argument.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from ghcr_proxy.core.config import Settings
from ghcr_proxy.services.exceptions import (
    ResponseTooLargeError,
    UnexpectedStatusError,
    UpstreamHTTPError,
    UpstreamUnavailableError,
)

__all__ = [
    "UpstreamResponse",
    "default_headers",
    "build_client",
    "build_async_client",
    "fetch",
    "fetch_async",
]

JSON_MEDIA_TYPE = "application/json"


def default_headers(extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    headers = {"Accept": JSON_MEDIA_TYPE, "Content-Type": JSON_MEDIA_TYPE}
    if extra:
        headers.update(extra)
    return headers


def _client_kwargs(
    settings: Settings,
    base_url: str,
    headers: Optional[Mapping[str, str]],
    transport: Any,
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "base_url": base_url,
        "headers": default_headers(headers),
        "timeout": httpx.Timeout(settings.timeout_seconds),
    }
    if transport is not None:
        kwargs["transport"] = transport
    return kwargs


def build_client(
    settings: Settings,
    *,
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    return httpx.Client(**_client_kwargs(settings, base_url, headers, transport))


def build_async_client(
    settings: Settings,
    *,
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(**_client_kwargs(settings, base_url, headers, transport))


@dataclass
class UpstreamResponse:
    """A fully buffered upstream response."""

    status_code: int
    url: str
    content: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.content)

    def raise_for_status(self) -> "UpstreamResponse":
        if self.status_code >= 400:
            raise UpstreamHTTPError(self.status_code, self.url, self.text[:500])
        if not self.is_success:
            raise UnexpectedStatusError(self.status_code, self.url)
        return self


def _check_declared_length(response: httpx.Response, limit: int) -> None:
    declared = response.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise ResponseTooLargeError(limit, int(declared))


def _append_chunk(buf: bytearray, chunk: bytes, limit: int) -> None:
    buf.extend(chunk)
    if len(buf) > limit:
        raise ResponseTooLargeError(limit)


def _to_upstream(response: httpx.Response, buf: bytearray) -> UpstreamResponse:
    return UpstreamResponse(
        status_code=response.status_code,
        url=str(response.request.url),
        content=bytes(buf),
        headers=dict(response.headers),
    )


def fetch(
    client: httpx.Client,
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    max_bytes: int,
) -> UpstreamResponse:
    """GET `url` and buffer at most `max_bytes` of body."""
    request = client.build_request("GET", url, params=params)
    try:
        response = client.send(request, stream=True)
    except httpx.TimeoutException as e:
        raise UpstreamUnavailableError(f"Timed out calling {request.url.host}") from e
    except httpx.RequestError as e:
        raise UpstreamUnavailableError(f"Failed to reach {request.url.host}: {e.__class__.__name__}") from e

    buf = bytearray()
    try:
        _check_declared_length(response, max_bytes)
        for chunk in response.iter_bytes():
            _append_chunk(buf, chunk, max_bytes)
    except httpx.RequestError as e:
        raise UpstreamUnavailableError(f"Failed reading from {request.url.host}: {e.__class__.__name__}") from e
    finally:
        response.close()
    return _to_upstream(response, buf)


async def fetch_async(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    max_bytes: int,
) -> UpstreamResponse:
    """Coroutine flavour of fetch()."""
    request = client.build_request("GET", url, params=params)
    try:
        response = await client.send(request, stream=True)
    except httpx.TimeoutException as e:
        raise UpstreamUnavailableError(f"Timed out calling {request.url.host}") from e
    except httpx.RequestError as e:
        raise UpstreamUnavailableError(f"Failed to reach {request.url.host}: {e.__class__.__name__}") from e

    buf = bytearray()
    try:
        _check_declared_length(response, max_bytes)
        async for chunk in response.aiter_bytes():
            _append_chunk(buf, chunk, max_bytes)
    except httpx.RequestError as e:
        raise UpstreamUnavailableError(f"Failed reading from {request.url.host}: {e.__class__.__name__}") from e
    finally:
        await response.aclose()
    return _to_upstream(response, buf)
