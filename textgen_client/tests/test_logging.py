"""Focused tests for textgen_client.base.logging.

Covers:
- _parse_level string parsing
- normalized_log_event emits the canonical keys
- JsonFormatter hoists structured payloads
- configure_logger attaches and removes a rotating file handler
"""
from __future__ import annotations

import json
import logging

from textgen_client.base.log_support import JsonFormatter, LogContext
from textgen_client.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_log_level_env_applies_to_base_logger(monkeypatch):
    monkeypatch.setenv("TEXTGEN_LOG_LEVEL", "ERROR")
    assert get_logger().level == logging.ERROR
    monkeypatch.setenv("TEXTGEN_LOG_LEVEL", "INFO")
    assert get_logger().level == logging.INFO


def test_child_loggers_propagate_to_base():
    child = get_logger("textgen.test.child")
    assert child.propagate
    assert child.level == logging.NOTSET
    assert not get_logger().propagate


def test_normalized_log_event_emits_required_keys(log_records):
    logger = get_logger("textgen.test.normalized")
    ctx = LogContext(provider="openai", model="gpt-4", extra={"request": "r1"})
    normalized_log_event(
        logger,
        "stream.end",
        ctx,
        phase="finalize",
        emitted=True,
        tokens=[("prompt", 3)],
        latency_ms=1.5,
        note=None,
    )
    (payload,) = log_records.named("stream.end")
    for key in REQUIRED_NORMALIZED_KEYS:
        if key == "error_code":
            continue
        assert key in payload, key
    assert "error_code" not in payload
    assert payload["tokens"] == {"prompt": 3}
    assert payload["provider"] == "openai"
    assert payload["request"] == "r1"
    assert payload["latency_ms"] == 1.5
    assert "note" not in payload


def test_normalized_extra_fields_do_not_override_canonical(log_records):
    logger = get_logger("textgen.test.normalized")
    normalized_log_event(logger, "x", phase="start", emitted=False, error_code=None)
    normalized_log_event(logger, "y", phase="finalize", error_code="timeout", emitted=False)
    assert "error_code" not in log_records.named("x")[0]
    assert log_records.named("y")[0]["error_code"] == "timeout"


def test_log_event_skips_disabled_levels(monkeypatch, log_records):
    monkeypatch.setenv("TEXTGEN_LOG_LEVEL", "WARNING")
    logger = get_logger("textgen.test.levels")
    log_event(logger, "quiet", level=logging.DEBUG)
    log_event(logger, "loud", level=logging.ERROR, detail=None)
    assert log_records.named("quiet") == []
    assert log_records.named("loud") == [{"event": "loud"}]


def test_json_formatter_hoists_payload():
    formatter = JsonFormatter()
    record = logging.LogRecord("textgen", logging.INFO, __file__, 1, json.dumps({"event": "request.start", "a": 1}), None, None)
    out = json.loads(formatter.format(record))
    assert out["event"] == "request.start"
    assert out["a"] == 1
    assert out["level"] == "INFO"
    assert out["logger"] == "textgen"

    record = logging.LogRecord("textgen", logging.INFO, __file__, 1, json.dumps({"event": "cli.start"}), None, None)
    assert "msg" not in json.loads(formatter.format(record))

    record = logging.LogRecord("textgen", logging.INFO, __file__, 1, "plain text", None, None)
    assert json.loads(formatter.format(record))["msg"] == "plain text"


def test_configure_logger_file_handler(tmp_path):
    path = tmp_path / "logs" / "textgen.log"
    logger = configure_logger(level="DEBUG", file_path=str(path))
    try:
        log_event(logger, "file.test", value=1)
        for handler in logger.handlers:
            handler.flush()
        lines = path.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["event"] == "file.test"
    finally:
        configure_logger(level="INFO", file_path=None)
    assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)
