"""OpenAI API client (completions, edits, chat, embeddings, images).

Summary:
- Non-streaming endpoints via ``httpx`` with centralized timeouts; bodies are
  decoded into pydantic response models, failures raise ``ProviderError``
- Async completions, edits and chat (``asend_completion``, ``asend_edits``,
  ``asend_chat``) over ``httpx.AsyncClient`` with the same decode path
- Chat streaming via the shared stream controller: callback style
  (``stream_chat``) or pull style (``iter_chat_stream`` /
  ``aiter_chat_stream``)

Configuration:
- Constructor arguments win over ``get_client_config("openai")`` (env vars,
  ``.env``, optional config file, defaults)

Lifecycle:
- HTTP clients are built lazily per timeout profile and closed by ``close()``
  / ``aclose()`` or the context managers. Injected clients are used as-is and
  never closed.

This module orchestrates I/O only; framing, decoding and accumulation live in
``base.streaming``.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, AsyncIterator, Dict, Iterable, Iterator, Optional, Sequence, Tuple, Union

import httpx

from ..base.http import build_async_httpx_client, build_httpx_client
from ..base.logging import LogContext, get_logger
from ..base.streaming import (
    ChatStreamEvent,
    CompletionCallback,
    ProgressCallback,
    StreamController,
    aiter_stream_events,
    iter_stream_events,
    pump_stream,
)
from ..config import get_client_config
from ..config.defaults import (
    COMPLETION_DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    IMAGE_DEFAULT_COUNT,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_CHAT_MODEL,
)
from .endpoints import Endpoint
from .helpers import MessageLike, OpenAICommonMixin, build_messages
from .models import GPT3, CompletionsModel, EditsModel, EmbeddingModel, ImageResponseFormat, ImageSize, model_name
from .params import ChatCompletionParams, CompletionParams, EditParams, EmbeddingParams, ImageParams, RequestParams
from .request_helpers import OpenAIRequestMixin, build_params
from .responses import ChatCompletionResponse, EmbeddingResponse, ImageResponse, TextResponse
from .stream_helpers import OpenAIStreamingMixin


class OpenAIClient(OpenAICommonMixin, OpenAIRequestMixin, OpenAIStreamingMixin):
    """Client for the OpenAI REST API.

    Parameters:
        api_key: Bearer token; resolved from config (``OPENAI_API_KEY``) when
            omitted. Requests carry no ``Authorization`` header if none is found.
        base_url: API base URL (defaults to ``https://api.openai.com``).
        organization: Optional ``OpenAI-Organization`` header value.
        model: Default chat model (defaults to ``gpt-3.5-turbo``).
        http_client: Pre-built ``httpx.Client`` used for every sync request.
        async_http_client: Pre-built ``httpx.AsyncClient`` used for every async request.
        logger: Logger for lifecycle events; defaults to ``textgen.openai``.

    Side effects:
        Reads configuration via ``get_client_config("openai")``.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        organization: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        async_http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        cfg = get_client_config(
            self.provider_name,
            {"api_key": api_key, "base_url": base_url, "organization": organization, "model": model},
        )
        self._api_key: Optional[str] = cfg.get("api_key")
        self._base_url: str = cfg.get("base_url") or OPENAI_DEFAULT_BASE_URL
        self._organization: Optional[str] = cfg.get("organization")
        self._model: str = cfg.get("model") or OPENAI_DEFAULT_CHAT_MODEL
        self._system_message: Optional[str] = cfg.get("system_message")
        self._logger = logger or get_logger("textgen.openai")
        self._injected_client = http_client
        self._injected_async_client = async_http_client
        self._clients: Dict[str, httpx.Client] = {}
        self._async_clients: Dict[str, httpx.AsyncClient] = {}

    @property
    def base_url(self) -> str:
        return self._base_url

    def default_model(self) -> str:
        return self._model

    # ---- Transport ----
    def _client(self, purpose: str) -> httpx.Client:
        if self._injected_client is not None:
            return self._injected_client
        client = self._clients.get(purpose)
        if client is None:
            client = build_httpx_client(self._base_url, purpose=purpose)
            self._clients[purpose] = client
        return client

    def _async_client(self, purpose: str = "stream") -> httpx.AsyncClient:
        if self._injected_async_client is not None:
            return self._injected_async_client
        client = self._async_clients.get(purpose)
        if client is None:
            client = build_async_httpx_client(self._base_url, purpose=purpose)
            self._async_clients[purpose] = client
        return client

    def close(self) -> None:
        """Close the sync HTTP clients this instance built (see ``aclose``)."""
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    async def aclose(self) -> None:
        """Close every HTTP client this instance built."""
        for client in self._async_clients.values():
            await client.aclose()
        self._async_clients.clear()
        self.close()

    def __enter__(self) -> "OpenAIClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "OpenAIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---- Completions / edits ----
    def _completion_params(
        self,
        prompt: str,
        *,
        suffix: Optional[str],
        model: Union[CompletionsModel, str],
        max_tokens: int,
        temperature: float,
        stop: Optional[Sequence[str]],
        user: Optional[str],
    ) -> Tuple[str, RequestParams]:
        name = model_name(model)
        fields = {
            "prompt": prompt,
            "suffix": suffix,
            "model": name,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stop": list(stop) if stop is not None else None,
            "user": user,
        }
        return name, build_params(CompletionParams, fields, provider=self.provider_name, model=name)

    def _edit_params(
        self, instruction: str, *, model: Union[EditsModel, str], input: str, temperature: float
    ) -> Tuple[str, RequestParams]:
        name = model_name(model)
        fields = {"instruction": instruction, "model": name, "input": input, "temperature": temperature}
        return name, build_params(EditParams, fields, provider=self.provider_name, model=name)

    def send_completion(
        self,
        prompt: str,
        *,
        suffix: Optional[str] = None,
        model: Union[CompletionsModel, str] = GPT3.DAVINCI,
        max_tokens: int = COMPLETION_DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> TextResponse:
        """Send a prompt to ``POST /v1/completions``.

        Raises:
            ProviderError: ``VALIDATION`` for bad arguments, ``CONTEXT_LENGTH``
                when the prompt exceeds the model's context, ``SERVER_ERROR``
                for other API error bodies, ``DECODING`` for unreadable bodies,
                or the classified transport failure.
        """
        name, params = self._completion_params(
            prompt, suffix=suffix, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user
        )
        return self._execute(Endpoint.COMPLETIONS, params, TextResponse, model=name)

    async def asend_completion(
        self,
        prompt: str,
        *,
        suffix: Optional[str] = None,
        model: Union[CompletionsModel, str] = GPT3.DAVINCI,
        max_tokens: int = COMPLETION_DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> TextResponse:
        """Async :meth:`send_completion`; same validation and error mapping."""
        name, params = self._completion_params(
            prompt, suffix=suffix, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user
        )
        return await self._aexecute(Endpoint.COMPLETIONS, params, TextResponse, model=name)

    def send_edits(
        self,
        instruction: str,
        *,
        model: Union[EditsModel, str] = EditsModel.DAVINCI_TEXT,
        input: str = "",
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> TextResponse:
        """Ask ``POST /v1/edits`` to apply ``instruction`` to ``input``."""
        name, params = self._edit_params(instruction, model=model, input=input, temperature=temperature)
        return self._execute(Endpoint.EDITS, params, TextResponse, model=name)

    async def asend_edits(
        self,
        instruction: str,
        *,
        model: Union[EditsModel, str] = EditsModel.DAVINCI_TEXT,
        input: str = "",
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> TextResponse:
        name, params = self._edit_params(instruction, model=model, input=input, temperature=temperature)
        return await self._aexecute(Endpoint.EDITS, params, TextResponse, model=name)

    # ---- Chat ----
    def _chat_params(
        self,
        messages: Iterable[MessageLike],
        *,
        model: Optional[str],
        max_tokens: Optional[int],
        temperature: float,
        stop: Optional[Sequence[str]],
        user: Optional[str],
        stream: bool,
    ) -> Tuple[str, RequestParams]:
        name = model_name(model) if model is not None else self._model
        fields = {
            "messages": build_messages(messages, self._system_message),
            "model": name,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stop": list(stop) if stop is not None else None,
            "user": user,
            "stream": True if stream else None,
        }
        return name, build_params(ChatCompletionParams, fields, provider=self.provider_name, model=name)

    def send_chat(
        self,
        messages: Iterable[MessageLike],
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> ChatCompletionResponse:
        """Send a non-streaming chat completion."""
        name, params = self._chat_params(
            messages, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user, stream=False
        )
        return self._execute(Endpoint.CHAT, params, ChatCompletionResponse, model=name)

    async def asend_chat(
        self,
        messages: Iterable[MessageLike],
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> ChatCompletionResponse:
        """Async :meth:`send_chat`."""
        name, params = self._chat_params(
            messages, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user, stream=False
        )
        return await self._aexecute(Endpoint.CHAT, params, ChatCompletionResponse, model=name)

    def stream_chat(
        self,
        messages: Iterable[MessageLike],
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompletionCallback] = None,
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> StreamController:
        """Stream a chat completion, reporting through callbacks.

        ``on_progress`` receives the cumulative content after each delta that
        carries content; ``on_complete`` fires exactly once with
        ``(result, None)`` or ``(None, error)``. Blocks until the stream ends
        and returns the finished controller for inspection.

        Raises:
            ProviderError: ``VALIDATION`` before any I/O for bad arguments.
                Every other failure is delivered through ``on_complete``.
        """
        name, params = self._chat_params(
            messages, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user, stream=True
        )
        payload = params.to_payload()
        ctx = LogContext(provider=self.provider_name, model=name, endpoint=Endpoint.CHAT.path)
        self._log_stream_start(ctx, payload)
        controller = StreamController(on_progress, on_complete, ctx=ctx, logger=self._logger)
        with contextlib.closing(self._stream_chunks(payload, name)) as chunks:
            pump_stream(chunks, controller, provider=self.provider_name, model=name)
        return controller

    def iter_chat_stream(
        self,
        messages: Iterable[MessageLike],
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> Iterator[ChatStreamEvent]:
        """Return an iterator of progress events followed by one terminal event.

        Arguments are validated eagerly; the request starts on first ``next()``.
        """
        name, params = self._chat_params(
            messages, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user, stream=True
        )
        return self._iter_events(params.to_payload(), name)

    def _iter_events(self, payload: Dict[str, Any], name: str) -> Iterator[ChatStreamEvent]:
        ctx = LogContext(provider=self.provider_name, model=name, endpoint=Endpoint.CHAT.path)
        self._log_stream_start(ctx, payload)
        with contextlib.closing(self._stream_chunks(payload, name)) as chunks:
            yield from iter_stream_events(chunks, provider=self.provider_name, model=name, ctx=ctx, logger=self._logger)

    def aiter_chat_stream(
        self,
        messages: Iterable[MessageLike],
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        stop: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
    ) -> AsyncIterator[ChatStreamEvent]:
        """Async counterpart of :meth:`iter_chat_stream` (``async for``)."""
        name, params = self._chat_params(
            messages, model=model, max_tokens=max_tokens, temperature=temperature, stop=stop, user=user, stream=True
        )
        return self._aiter_events(params.to_payload(), name)

    async def _aiter_events(self, payload: Dict[str, Any], name: str) -> AsyncIterator[ChatStreamEvent]:
        ctx = LogContext(provider=self.provider_name, model=name, endpoint=Endpoint.CHAT.path)
        self._log_stream_start(ctx, payload)
        async with contextlib.aclosing(self._astream_chunks(payload, name)) as chunks:
            async for event in aiter_stream_events(
                chunks, provider=self.provider_name, model=name, ctx=ctx, logger=self._logger
            ):
                yield event

    # ---- Embeddings / images ----
    def send_embeddings(self, input: str, *, model: Union[EmbeddingModel, str] = EmbeddingModel.ADA_V2) -> EmbeddingResponse:
        """Embed ``input`` via ``POST /v1/embeddings``."""
        name = model_name(model)
        params = build_params(EmbeddingParams, {"input": input, "model": name}, provider=self.provider_name, model=name)
        return self._execute(Endpoint.EMBEDDINGS, params, EmbeddingResponse, model=name)

    def send_image_generation(
        self,
        prompt: str,
        *,
        n: int = IMAGE_DEFAULT_COUNT,
        size: Union[ImageSize, str] = ImageSize.X256,
        response_format: Union[ImageResponseFormat, str] = ImageResponseFormat.URL,
        user: Optional[str] = None,
    ) -> ImageResponse:
        """Generate ``n`` images for ``prompt`` via ``POST /v1/images/generations``.

        The prompt must be shorter than 1000 characters and ``n`` between 1
        and 10; both are checked before the request is sent.
        """
        fields = {
            "prompt": prompt,
            "n": n,
            "size": model_name(size),
            "response_format": model_name(response_format),
            "user": user,
        }
        params = build_params(ImageParams, fields, provider=self.provider_name, model=None)
        return self._execute(Endpoint.IMAGE_GENERATIONS, params, ImageResponse, model=None)


__all__ = ["OpenAIClient"]
