"""Shared fixtures for the textgen_client test suite.

- ``isolated_env`` (autouse): strips provider/config variables and resets
  the config and ``.env`` caches so no test sees the developer's shell.
- ``log_records``: captures records from the ``textgen`` logger tree (the
  base logger does not propagate to root).
- ``sse``: builders for ``data:`` frames and whole event streams.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

import pytest

from textgen_client.base.logging import BASE_LOGGER_NAME, LOG_LEVEL_ENV, get_logger
from textgen_client.config import reset_config_cache

_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_AUTH_TOKEN",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_ORGANIZATION",
    "OPENAI_SYSTEM_MESSAGE",
    "TEXTGEN_CONFIG_FILE",
    "TEXTGEN_LOG_LEVEL",
    "TEXTGEN_TIMEOUT_CONNECT_SECONDS",
    "TEXTGEN_TIMEOUT_HTTP_SECONDS",
    "TEXTGEN_TIMEOUT_STREAM_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self, records: List[logging.LogRecord]) -> None:
        super().__init__(level=logging.DEBUG)
        self.records = records

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class LogRecords(list):
    """Captured records with helpers to read ``log_event`` payloads."""

    def events(self) -> List[Dict[str, Any]]:
        out = []
        for record in self:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(payload, dict):
                out.append(payload)
        return out

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [p for p in self.events() if p.get("event") == event]


@pytest.fixture()
def log_records(monkeypatch: pytest.MonkeyPatch) -> Iterator[LogRecords]:
    # get_logger re-applies TEXTGEN_LOG_LEVEL on every call, so pin it to DEBUG.
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    base = get_logger(BASE_LOGGER_NAME)
    records = LogRecords()
    handler = _ListHandler(records)
    base.addHandler(handler)
    try:
        yield records
    finally:
        base.removeHandler(handler)


class SSE:
    """Builders for server-sent event streams in the chat chunk format."""

    @staticmethod
    def payload(content: Optional[str] = None, role: Optional[str] = None, **envelope: Any) -> Dict[str, Any]:
        delta: Dict[str, Any] = {}
        if role is not None:
            delta["role"] = role
        if content is not None:
            delta["content"] = content
        body = {
            "object": "chat.completion.chunk",
            "model": "gpt-3.5-turbo",
            "created": 1677652288,
            "id": "chatcmpl-1",
            "choices": [{"delta": delta, "index": 0, "finish_reason": None}],
        }
        body.update(envelope)
        return body

    @classmethod
    def frame(cls, content: Optional[str] = None, role: Optional[str] = None) -> str:
        return "data: " + json.dumps(cls.payload(content, role), ensure_ascii=False) + "\n\n"

    @staticmethod
    def raw(text: str) -> str:
        return text + "\n\n"

    @classmethod
    def stream(cls, *contents: str, role: str = "assistant", done: bool = True) -> str:
        parts = [cls.frame(role=role)] + [cls.frame(c) for c in contents]
        if done:
            parts.append("data: [DONE]\n\n")
        return "".join(parts)


@pytest.fixture()
def sse() -> type:
    return SSE
