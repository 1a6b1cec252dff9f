from __future__ import annotations

import json
from typing import Any, Callable, List

import httpx
import pytest

from textgen_client.cli import main
from textgen_client.cli import cli_actions
from textgen_client.cli.cli_parser import build_parser
from textgen_client.config.defaults import CLI_DEFAULT_PROVIDER
from textgen_client.openai import OpenAIClient


def _install(monkeypatch, responder: Callable[[httpx.Request], httpx.Response]) -> List[httpx.Request]:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responder(request)

    def factory(**kwargs: Any) -> OpenAIClient:
        http = httpx.Client(transport=httpx.MockTransport(handler), base_url="https://api.test")
        return OpenAIClient(api_key="sk-cli", http_client=http, **kwargs)

    monkeypatch.setattr(cli_actions, "OpenAIClient", factory)
    return seen


def test_parser_requires_subcommand():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_stream_flags():
    p = build_parser()
    assert p.parse_args(["chat", "hi", "--stream"]).stream is True
    assert p.parse_args(["chat", "hi", "--stream", "false"]).stream is False
    assert p.parse_args(["chat", "hi", "--no-stream"]).stream is False


def test_complete_prints_text(monkeypatch, capsys):
    body = {"object": "text_completion", "choices": [{"text": "world"}]}
    seen = _install(monkeypatch, lambda _r: httpx.Response(200, json=body))
    code = main(["complete", "hello", "--model", "text-ada-001", "--max-tokens", "3"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "world"
    sent = json.loads(seen[0].content)
    assert sent["model"] == "text-ada-001"
    assert sent["max_tokens"] == 3


def test_chat_json_output(monkeypatch, capsys):
    body = {"object": "chat.completion", "choices": [{"message": {"role": "assistant", "content": "Hi"}}]}
    seen = _install(monkeypatch, lambda _r: httpx.Response(200, json=body))
    code = main(["chat", "hello", "--system", "terse", "--json"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["choices"][0]["message"]["content"] == "Hi"
    assert json.loads(seen[0].content)["messages"][0] == {"role": "system", "content": "terse"}


def test_chat_stream_prints_progressively(monkeypatch, capsys, sse):
    data = sse.stream("Hel", "lo").encode()
    _install(monkeypatch, lambda _r: httpx.Response(200, content=data))
    code = main(["chat", "hello", "--stream"])
    assert code == 0
    assert capsys.readouterr().out == "Hello\n"


def test_chat_stream_json(monkeypatch, capsys, sse):
    data = sse.stream("ok").encode()
    _install(monkeypatch, lambda _r: httpx.Response(200, content=data))
    assert main(["chat", "hello", "--stream", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"role": "assistant", "content": "ok"}


def test_embed_and_image(monkeypatch, capsys):
    def responder(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/embeddings":
            return httpx.Response(
                200,
                json={"object": "list", "model": "m", "data": [{"object": "embedding", "embedding": [1.0, 2.0], "index": 0}]},
            )
        return httpx.Response(200, json={"data": [{"url": "https://img/a"}, {"url": "https://img/b"}]})

    _install(monkeypatch, responder)
    assert main(["embed", "text"]) == 0
    assert json.loads(capsys.readouterr().out) == [1.0, 2.0]
    assert main(["image", "a cat", "-n", "2", "--size", "512x512"]) == 0
    assert capsys.readouterr().out.split() == ["https://img/a", "https://img/b"]


def test_edit_error_is_json_on_stderr(monkeypatch, capsys):
    body = {"error": {"message": "This model's maximum context length is 3000 tokens", "type": "invalid_request_error"}}
    _install(monkeypatch, lambda _r: httpx.Response(400, json=body))
    code = main(["edit", "Fix spelling", "--input", "x"])
    assert code == 1
    captured = capsys.readouterr()
    err = json.loads(captured.err.strip().splitlines()[-1])
    assert err["code"] == "context_length"
    assert err["type"] == "invalid_request_error"
    assert err["status_code"] == 400
    assert captured.out == ""


def test_validation_error_exit_code(monkeypatch, capsys):
    seen = _install(monkeypatch, lambda _r: httpx.Response(200, json={}))
    assert main(["image", "a cat", "-n", "20"]) == 1
    assert json.loads(capsys.readouterr().err.strip().splitlines()[-1])["code"] == "validation"
    assert seen == []


def test_cli_log_events_carry_default_provider(monkeypatch, capsys, log_records):
    body = {"object": "text_completion", "choices": [{"text": "ok"}]}
    _install(monkeypatch, lambda _r: httpx.Response(200, json=body))
    assert main(["complete", "hi"]) == 0
    (start,) = log_records.named("cli.start")
    (end,) = log_records.named("cli.finalize")
    assert start["provider"] == CLI_DEFAULT_PROVIDER == "openai"
    assert end["endpoint"] == "complete"
