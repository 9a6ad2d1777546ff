from __future__ import annotations

import json
import logging

import pytest

from user_service.app.core.env import Env, _normalize, get_env, get_env_flags
from user_service.app.core.logging import JsonFormatter, setup_logging


class _Buffer:
    def __init__(self):
        self.data = ""

    def write(self, s):
        self.data += s

    def flush(self):
        pass


def _json_logger(name: str):
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    buf = _Buffer()
    handler.stream = buf
    return logger, buf


def test_json_formatter_includes_optional_fields():
    logger, buf = _json_logger("test.json")

    logger.info(
        "hello",
        extra={"request_id": "req-1", "http_method": "POST", "path": "/api/user-create", "status_code": 201, "resource": "user"},
    )

    payload = json.loads(buf.data)
    assert payload["message"] == "hello"
    assert payload["request_id"] == "req-1"
    assert payload["resource"] == "user"
    assert payload["http"] == {"method": "POST", "path": "/api/user-create", "status": 201}


def test_json_formatter_truncates_stack(monkeypatch):
    monkeypatch.setenv("LOG_STACK_LIMIT", "10")
    logger, buf = _json_logger("test.json.exc")

    try:
        raise ValueError("bad")
    except ValueError:
        logger.exception("failed")

    payload = json.loads(buf.data)
    assert payload["error"]["type"] == "ValueError"
    assert payload["error"]["message"] == "bad"
    assert payload["error"]["stack"].endswith("...(truncated)")


def test_setup_logging_respects_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("LOG_FORMAT", "json")

    setup_logging()

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)


@pytest.mark.parametrize(
    "raw,expected",
    [("production", Env.PROD), ("DEV", Env.DEV), ("staging", Env.TEST), ("", None), ("mars", None)],
)
def test_normalize_env(raw, expected):
    assert _normalize(raw) == expected


@pytest.fixture
def fresh_env():
    get_env.cache_clear()
    yield
    get_env.cache_clear()


def test_get_env_reads_app_env(monkeypatch, fresh_env):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_env() is Env.PROD
    assert get_env_flags().is_prod


def test_unknown_app_env_runs_as_local(monkeypatch, fresh_env, caplog):
    monkeypatch.setenv("APP_ENV", "mars")
    with caplog.at_level(logging.WARNING, logger="user_service.app.core.env"):
        assert get_env() is Env.LOCAL
    assert "mars" in caplog.text


def test_logging_defaults_follow_env(monkeypatch, fresh_env):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    monkeypatch.setenv("APP_ENV", "prod")

    setup_logging()

    root = logging.getLogger()
    assert root.level == logging.INFO
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
