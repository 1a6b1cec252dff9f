from __future__ import annotations

import asyncio
import types

import httpx

from textgen_client.base.errors import (
    ErrorCode,
    ProviderError,
    classify_exception,
    is_retryable,
    status_to_code,
    to_provider_error,
)


def test_classify_provider_error_passthrough():
    e = ProviderError(code=ErrorCode.AUTH, message="nope", provider="openai")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101


def test_classify_http_status_mapping():
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101


def test_classify_httpx_status_error():
    request = httpx.Request("POST", "https://api.test/v1/completions")
    response = httpx.Response(429, request=request)
    exc = httpx.HTTPStatusError("too many", request=request, response=response)
    assert classify_exception(exc) is ErrorCode.RATE_LIMIT  # nosec B101


def test_classify_timeouts_and_transport():
    assert classify_exception(TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("idle")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSIENT  # nosec B101


def test_classify_heuristics():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(Exception("maximum context length is 4097")) is ErrorCode.CONTEXT_LENGTH  # nosec B101
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101


def test_status_to_code_defaults():
    assert status_to_code(500) is ErrorCode.SERVER_ERROR
    assert status_to_code(599) is ErrorCode.SERVER_ERROR
    assert status_to_code(418) is ErrorCode.UNKNOWN


def test_retryable_codes():
    assert is_retryable(ErrorCode.TRANSIENT)
    assert is_retryable(ErrorCode.RATE_LIMIT)
    assert not is_retryable(ErrorCode.VALIDATION)
    assert not is_retryable(ErrorCode.CONTEXT_LENGTH)


def test_to_provider_error_wraps_and_passes_through():
    original = ProviderError(code=ErrorCode.DECODING, message="bad", provider="openai")
    assert to_provider_error(original, provider="other") is original

    exc = httpx.ConnectError("refused")
    wrapped = to_provider_error(exc, provider="openai", model="gpt-4")
    assert wrapped.code is ErrorCode.TRANSIENT
    assert wrapped.retryable
    assert wrapped.raw is exc
    assert wrapped.model == "gpt-4"
    assert str(wrapped) == "openai:gpt-4 transient: refused"


def test_to_provider_error_uses_class_name_for_empty_message():
    wrapped = to_provider_error(RuntimeError(), provider="openai")
    assert wrapped.message == "RuntimeError"
    assert str(wrapped).startswith("openai:- ")
