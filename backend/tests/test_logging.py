from __future__ import annotations

import json
import logging
import sys

from ghcr_proxy.core.logging import REDACTED, JsonFormatter, get_logger


def _record(msg="hello %s", args=("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="ghcr_proxy.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_json_formatter_stable_keys():
    payload = json.loads(JsonFormatter().format(_record()))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "ghcr_proxy.test"
    for key in ("time", "module", "function", "line"):
        assert key in payload


def test_json_formatter_includes_extras_and_redacts_secrets():
    record = _record(username="octocat", count=3, token="ghp_secret", authorization="Bearer x")
    payload = json.loads(JsonFormatter().format(record))

    assert payload["username"] == "octocat"
    assert payload["count"] == 3
    assert payload["token"] == REDACTED
    assert payload["authorization"] == REDACTED


def test_json_formatter_stringifies_unserializable_extras():
    payload = json.loads(JsonFormatter().format(_record(obj=object())))
    assert payload["obj"].startswith("<object object")


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    payload = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad" in payload["exc_info"]


def test_get_logger_default_name():
    assert get_logger().name == "ghcr_proxy"
    assert get_logger("x.y").name == "x.y"
