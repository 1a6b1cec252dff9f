"""Request shape, decoding and error mapping for the non-streaming endpoints.

HTTP is faked with ``httpx.MockTransport``; every handler records the
request it received so tests can assert on path, headers and JSON body.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from textgen_client.base.errors import ErrorCode, ProviderError
from textgen_client.base.models import Message
from textgen_client.openai import (
    GPT3,
    ChatCompletionResponse,
    Codex,
    EditsModel,
    EmbeddingModel,
    ImageResponseFormat,
    ImageSize,
    OpenAIClient,
)

TEXT_BODY = {
    "object": "text_completion",
    "model": "text-davinci-003",
    "choices": [{"text": "Hello there", "index": 0, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
}

CHAT_BODY = {
    "object": "chat.completion",
    "model": "gpt-3.5-turbo",
    "choices": [{"message": {"role": "assistant", "content": "Hi!"}, "index": 0, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 9, "completion_tokens": 2, "total_tokens": 11},
}


class Recorded:
    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self) -> Dict[str, Any]:
        return json.loads(self.last.content)


def make_client(
    responder: Callable[[httpx.Request], httpx.Response],
    **kwargs: Any,
) -> "tuple[OpenAIClient, Recorded]":
    rec = Recorded()

    def handler(request: httpx.Request) -> httpx.Response:
        rec.requests.append(request)
        return responder(request)

    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="https://api.test")
    kwargs.setdefault("api_key", "sk-live-123")
    return OpenAIClient(http_client=http, **kwargs), rec


def json_response(body: Any, status: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _req: httpx.Response(status, json=body)


def test_send_completion_request_and_response():
    client, rec = make_client(json_response(TEXT_BODY))
    resp = client.send_completion("Say hello", max_tokens=5, stop=["\n"], user="u1")

    assert rec.last.method == "POST"
    assert rec.last.url.path == "/v1/completions"
    assert rec.body() == {
        "prompt": "Say hello",
        "model": "text-davinci-003",
        "max_tokens": 5,
        "temperature": 1.0,
        "stop": ["\n"],
        "user": "u1",
    }
    assert resp.text == "Hello there"
    assert resp.usage.total_tokens == 5


def test_completion_defaults_and_codex_model():
    client, rec = make_client(json_response(TEXT_BODY))
    client.send_completion("def f():", model=Codex.CUSHMAN)
    body = rec.body()
    assert body["model"] == "code-cushman-001"
    assert body["max_tokens"] == 16
    assert "suffix" not in body and "stop" not in body


def test_headers_carry_token_content_type_and_organization():
    client, rec = make_client(json_response(TEXT_BODY), organization="org-42")
    client.send_completion("x")
    headers = rec.last.headers
    assert headers["authorization"] == "Bearer sk-live-123"
    assert headers["content-type"] == "application/json"
    assert headers["openai-organization"] == "org-42"


def test_no_authorization_header_without_token():
    client, rec = make_client(json_response(TEXT_BODY), api_key=None)
    client.send_completion("x")
    assert "authorization" not in rec.last.headers
    assert "openai-organization" not in rec.last.headers


def test_send_edits():
    client, rec = make_client(json_response(TEXT_BODY))
    client.send_edits("Fix the spelling", input="My nam is Adam", model=EditsModel.DAVINCI_CODE)
    assert rec.last.url.path == "/v1/edits"
    assert rec.body() == {
        "instruction": "Fix the spelling",
        "model": "code-davinci-edit-001",
        "input": "My nam is Adam",
        "temperature": 1.0,
    }


def test_send_chat_uses_default_model_and_message_objects():
    client, rec = make_client(json_response(CHAT_BODY))
    resp = client.send_chat([Message.system("Be brief."), {"role": "user", "content": "Hi"}], max_tokens=20)

    assert rec.last.url.path == "/v1/chat/completions"
    body = rec.body()
    assert body["model"] == "gpt-3.5-turbo"
    assert body["messages"] == [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "Hi"},
    ]
    assert body["max_tokens"] == 20
    assert "stream" not in body
    assert isinstance(resp, ChatCompletionResponse)
    assert resp.text == "Hi!"


def test_send_chat_prepends_configured_system_message(monkeypatch):
    monkeypatch.setenv("OPENAI_SYSTEM_MESSAGE", "You are terse.")
    client, rec = make_client(json_response(CHAT_BODY))
    client.send_chat([Message.user("Hi")])
    assert rec.body()["messages"][0] == {"role": "system", "content": "You are terse."}


def test_send_embeddings():
    body = {
        "object": "list",
        "data": [{"object": "embedding", "embedding": [0.1, -0.2, 0.3], "index": 0}],
        "model": "text-embedding-ada-002",
        "usage": {"prompt_tokens": 2, "total_tokens": 2},
    }
    client, rec = make_client(json_response(body))
    resp = client.send_embeddings("hello")
    assert rec.last.url.path == "/v1/embeddings"
    assert rec.body() == {"input": "hello", "model": EmbeddingModel.ADA_V2.value}
    assert resp.data[0].embedding == [0.1, -0.2, 0.3]
    assert resp.usage.completion_tokens is None


def test_send_image_generation():
    body = {"created": 1, "data": [{"url": "https://img/1"}, {"b64_json": "aGk="}]}
    client, rec = make_client(json_response(body))
    resp = client.send_image_generation(
        "a cat", n=2, size=ImageSize.X1024, response_format=ImageResponseFormat.B64_JSON, user="u"
    )
    assert rec.last.url.path == "/v1/images/generations"
    assert rec.body() == {"prompt": "a cat", "n": 2, "size": "1024x1024", "response_format": "b64_json", "user": "u"}
    assert resp.data[0].url == "https://img/1"
    assert resp.data[1].b64_json == "aGk="


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.send_image_generation("x" * 1000),
        lambda c: c.send_image_generation("cat", n=0),
        lambda c: c.send_image_generation("cat", n=11),
        lambda c: c.send_chat([]),
        lambda c: c.send_chat([{"role": "wizard", "content": "hi"}]),
    ],
)
def test_validation_errors_raise_before_io(call):
    client, rec = make_client(json_response({}))
    with pytest.raises(ProviderError) as info:
        call(client)
    assert info.value.code is ErrorCode.VALIDATION
    assert rec.requests == []


def test_image_prompt_just_under_limit_is_sent():
    client, rec = make_client(json_response({"data": []}))
    client.send_image_generation("x" * 999)
    assert len(rec.requests) == 1


def test_context_length_error_envelope():
    body = {
        "error": {
            "message": "This model's maximum context length is 4097 tokens, however you requested 5000 tokens.",
            "type": "invalid_request_error",
            "param": None,
            "code": None,
        }
    }
    client, _ = make_client(json_response(body, status=400))
    with pytest.raises(ProviderError) as info:
        client.send_completion("long prompt")
    err = info.value
    assert err.code is ErrorCode.CONTEXT_LENGTH
    assert err.error_type == "invalid_request_error"
    assert err.status_code == 400
    assert "maximum context length" in err.message


def test_other_error_envelope_is_server_error_with_type():
    body = {"error": {"message": "Incorrect API key provided", "type": "invalid_api_key"}}
    client, _ = make_client(json_response(body, status=401))
    with pytest.raises(ProviderError) as info:
        client.send_chat([Message.user("hi")])
    assert info.value.code is ErrorCode.SERVER_ERROR
    assert info.value.error_type == "invalid_api_key"
    assert info.value.message == "Incorrect API key provided"


def test_undecodable_success_body_is_decoding_error():
    client, _ = make_client(lambda _r: httpx.Response(200, content=b"<html>oops</html>"))
    with pytest.raises(ProviderError) as info:
        client.send_completion("x")
    assert info.value.code is ErrorCode.DECODING


def test_error_status_without_envelope_uses_status_mapping():
    client, _ = make_client(lambda _r: httpx.Response(503, content=b"upstream down"))
    with pytest.raises(ProviderError) as info:
        client.send_completion("x")
    assert info.value.code is ErrorCode.UNAVAILABLE
    assert info.value.retryable


def test_transport_errors_are_classified():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client, _ = make_client(boom)
    with pytest.raises(ProviderError) as info:
        client.send_completion("x")
    assert info.value.code is ErrorCode.TRANSIENT
    assert isinstance(info.value.raw, httpx.ConnectError)


def test_timeouts_are_classified():
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client, _ = make_client(slow)
    with pytest.raises(ProviderError) as info:
        client.send_embeddings("x")
    assert info.value.code is ErrorCode.TIMEOUT


def test_request_lifecycle_logging(log_records):
    client, _ = make_client(json_response(TEXT_BODY))
    client.send_completion("x", model=GPT3.ADA)
    (start,) = log_records.named("request.start")
    (end,) = log_records.named("request.end")
    assert start["endpoint"] == "/v1/completions"
    assert start["model"] == "text-ada-001"
    assert end["tokens"] == {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}
    assert end["status_code"] == 200


def test_request_error_logging(log_records):
    client, _ = make_client(json_response({"error": {"message": "bad", "type": "server_error"}}, status=500))
    with pytest.raises(ProviderError):
        client.send_completion("x")
    (err,) = log_records.named("request.error")
    assert err["error_code"] == "server_error"
    assert err["error_type"] == "server_error"
    assert log_records.named("request.end") == []


def test_injected_client_is_not_closed_and_context_manager():
    client, rec = make_client(json_response(TEXT_BODY))
    with client as c:
        c.send_completion("x")
    client.send_completion("y")
    assert len(rec.requests) == 2
