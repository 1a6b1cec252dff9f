"""Streaming transport driver for the chat endpoint.

Opens ``POST /v1/chat/completions`` with ``stream: true`` through ``httpx``
and exposes the raw response bytes as an (async) iterator. The iterator is
what the stream controller is pumped from: each chunk becomes a ``feed``,
an exception raised while iterating becomes the single ``fail``, and normal
exhaustion becomes ``close``.

An error status is turned into a ``ProviderError`` built from the response
body before any byte reaches the controller. A server that stalls is bounded
by the client's streaming read timeout and surfaces as ``httpx.ReadTimeout``.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, Iterator, Optional

import httpx

from ..base.logging import LogContext, normalized_log_event
from .endpoints import Endpoint
from .helpers import error_from_body


def iter_response_bytes(response: httpx.Response, *, provider: str, model: Optional[str]) -> Iterator[bytes]:
    """Yield body chunks of a streaming response; raise on an error status."""
    if response.is_error:
        body = response.read()
        raise error_from_body(body, provider=provider, model=model, status_code=response.status_code)
    yield from response.iter_bytes()


async def aiter_response_bytes(response: httpx.Response, *, provider: str, model: Optional[str]) -> AsyncIterator[bytes]:
    """Async counterpart of :func:`iter_response_bytes`."""
    if response.is_error:
        body = await response.aread()
        raise error_from_body(body, provider=provider, model=model, status_code=response.status_code)
    async for chunk in response.aiter_bytes():
        yield chunk


class OpenAIStreamingMixin:
    """Mixin opening chat streams on the sync and async transports.

    Consumers must define ``provider_name``, ``_logger``, ``_build_headers()``,
    ``_client(purpose)`` and ``_async_client(purpose)``.
    """

    def _stream_chunks(self, payload: Dict[str, Any], model: str) -> Iterator[bytes]:
        endpoint = Endpoint.CHAT
        client = self._client("stream")
        with client.stream(endpoint.method, endpoint.path, json=payload, headers=self._build_headers()) as resp:
            yield from iter_response_bytes(resp, provider=self.provider_name, model=model)

    async def _astream_chunks(self, payload: Dict[str, Any], model: str) -> AsyncIterator[bytes]:
        endpoint = Endpoint.CHAT
        async with self._async_client("stream").stream(
            endpoint.method, endpoint.path, json=payload, headers=self._build_headers()
        ) as resp:
            async for chunk in aiter_response_bytes(resp, provider=self.provider_name, model=model):
                yield chunk

    def _log_stream_start(self, ctx: LogContext, payload: Dict[str, Any]) -> None:
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=None,
            tokens=None,
            messages=len(payload.get("messages", ())),
            max_tokens=payload.get("max_tokens"),
            temperature=payload.get("temperature"),
        )


__all__ = ["iter_response_bytes", "aiter_response_bytes", "OpenAIStreamingMixin"]
