"""CLI action handlers.

Purpose
-------
One handler per subcommand. Each builds a client, performs a single call,
and prints the result: plain text by default, the full response as JSON with
``--json``.

Fallback & Error Semantics
--------------------------
- ``ProviderError`` and other runtime failures are printed as a JSON object
  to stderr and yield exit code ``1``.
- Every call emits normalized ``cli.*`` log events.

Handlers accept a ``client_factory`` so tests can inject a client backed by
``httpx.MockTransport``.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, Optional

from ..base.errors import ProviderError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import Message
from ..base.streaming import AccumulatedResult
from ..config.defaults import CLI_DEFAULT_PROVIDER
from ..openai import OpenAIClient

ClientFactory = Callable[..., OpenAIClient]


def _make_client(args: argparse.Namespace, client_factory: Optional[ClientFactory]) -> OpenAIClient:
    factory = client_factory or OpenAIClient
    return factory(base_url=args.base_url, organization=args.organization)


def _print_error(err: Exception) -> None:
    payload: Dict[str, Any] = {"error": str(err)}
    if isinstance(err, ProviderError):
        payload = {"error": err.message, "code": err.code.value}
        if err.error_type:
            payload["type"] = err.error_type
        if err.status_code is not None:
            payload["status_code"] = err.status_code
    print(json.dumps(payload), file=sys.stderr)


def _run(args: argparse.Namespace, model: Optional[str], call: Callable[[], Any], render: Callable[[Any], str]) -> int:
    """Execute ``call`` with cli.* logging and uniform error output."""
    logger = get_logger("textgen.cli")
    ctx = LogContext(provider=CLI_DEFAULT_PROVIDER, model=model, endpoint=args.cmd)
    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=None, emitted=None, tokens=None)
    try:
        result = call()
    except Exception as e:
        code = e.code.value if isinstance(e, ProviderError) else None
        normalized_log_event(
            logger, "cli.error", ctx, phase="finalize", attempt=None, emitted=False, tokens=None,
            error_code=code, error=str(e),
        )
        _print_error(e)
        return 1
    if args.json:
        dump = result.model_dump(mode="json") if hasattr(result, "model_dump") else result
        print(json.dumps(dump, ensure_ascii=False))
    else:
        print(render(result))
    normalized_log_event(logger, "cli.finalize", ctx, phase="finalize", attempt=None, emitted=True, tokens=None)
    return 0


def handle_chat(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    messages = [Message.user(args.prompt)]
    if args.system:
        messages.insert(0, Message.system(args.system))
    opts = {"model": args.model, "max_tokens": args.max_tokens, "temperature": args.temperature}

    with _make_client(args, client_factory) as client:
        if not args.stream:
            return _run(args, args.model, lambda: client.send_chat(messages, **opts), lambda r: r.text or "")

        printed = 0

        def _on_progress(text: str) -> None:
            nonlocal printed
            if not args.json:
                sys.stdout.write(text[printed:])
                sys.stdout.flush()
            printed = len(text)

        def _stream() -> Dict[str, Any]:
            controller = client.stream_chat(messages, _on_progress, **opts)
            if controller.error is not None:
                raise controller.error
            result: AccumulatedResult = controller.result or AccumulatedResult()
            return {"role": result.role, "content": result.content}

        # Progress already went to stdout; finish the line.
        return _run(args, args.model, _stream, lambda _r: "")


def handle_complete(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    with _make_client(args, client_factory) as client:
        return _run(
            args,
            args.model,
            lambda: client.send_completion(
                args.prompt,
                suffix=args.suffix,
                model=args.model,
                max_tokens=args.max_tokens,
                temperature=args.temperature,
            ),
            lambda r: r.text or "",
        )


def handle_edit(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    with _make_client(args, client_factory) as client:
        return _run(
            args,
            args.model,
            lambda: client.send_edits(args.instruction, model=args.model, input=args.input),
            lambda r: r.text or "",
        )


def handle_embed(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    with _make_client(args, client_factory) as client:
        return _run(
            args,
            args.model,
            lambda: client.send_embeddings(args.input, model=args.model),
            lambda r: json.dumps(r.data[0].embedding if r.data else []),
        )


def handle_image(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    with _make_client(args, client_factory) as client:
        return _run(
            args,
            None,
            lambda: client.send_image_generation(
                args.prompt, n=args.n, size=args.size, response_format=args.response_format
            ),
            lambda r: "\n".join(img.url or img.b64_json or "" for img in r.data),
        )


HANDLERS: Dict[str, Callable[..., int]] = {
    "chat": handle_chat,
    "complete": handle_complete,
    "edit": handle_edit,
    "embed": handle_embed,
    "image": handle_image,
}


__all__ = [
    "HANDLERS",
    "handle_chat",
    "handle_complete",
    "handle_edit",
    "handle_embed",
    "handle_image",
]
