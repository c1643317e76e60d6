from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from ghcr_proxy.schemas.auth import AuthRequest
from ghcr_proxy.schemas.errors import ErrorResponse
from ghcr_proxy.schemas.ghcr import CatalogResponse, TagsResponse


def test_auth_request_keeps_credentials_as_given():
    req = AuthRequest(username="  octocat ", token=" ghp_abc ")
    assert req.username == "  octocat "
    assert req.token == " ghp_abc "


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"username": "", "token": "t"}, "Username is required"),
        ({"username": "   ", "token": "t"}, "Username is required"),
        ({"username": "u", "token": ""}, "Token is required"),
        ({"username": "u", "token": "\t"}, "Token is required"),
        ({"username": None, "token": "t"}, "Username is required"),
        ({"username": "u", "token": None}, "Token is required"),
    ],
)
def test_auth_request_rejects_blank_fields(payload, message):
    with pytest.raises(ValidationError) as info:
        AuthRequest(**payload)
    assert message in str(info.value)


def test_auth_request_repr_hides_token():
    req = AuthRequest(username="octocat", token="ghp_very_secret")
    assert "ghp_very_secret" not in repr(req)
    assert "octocat" in repr(req)


def test_tags_response_null_tags_become_empty_list():
    resp = TagsResponse.model_validate({"name": "octocat/hello", "tags": None})
    assert resp.tags == []


def test_catalog_response_defaults_to_empty():
    assert CatalogResponse().repositories == []


def test_error_response_sets_timestamp():
    before = datetime.now()
    err = ErrorResponse(message="boom", status=500)
    assert err.timestamp >= before
    assert err.request_id is None
    dumped = err.model_dump(mode="json")
    assert set(dumped) == {"message", "status", "timestamp", "request_id"}
    assert isinstance(dumped["timestamp"], str)
