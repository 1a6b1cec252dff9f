"""Channel bridge between a byte-chunk transport and the stream controller.

The controller is callback driven. ``StreamChannel`` receives those callbacks
and queues them as :class:`ChatStreamEvent` values, which lets the transport
loop (sync or async) hand events to a pull-based consumer in order: progress
events first, then exactly one terminal event, then nothing.

``pump_stream`` / ``apump_stream`` are the callback-style drivers: they feed
a transport's chunks into a caller-built controller and deliver exactly one
terminal signal. ``iter_stream_events`` / ``aiter_stream_events`` combine a
driver with a channel and yield events as soon as each chunk is processed.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import AsyncIterable, AsyncIterator, Deque, Iterable, Iterator, Optional

from ..errors import to_provider_error
from ..logging import LogContext
from .accumulator import AccumulatedResult
from .stream_controller import StreamController, StreamStateError
from .streaming import ChatStreamEvent


class StreamChannel:
    """FIFO of stream events fed by :class:`StreamController` callbacks."""

    def __init__(self, *, provider: str, model: str) -> None:
        self.provider = provider
        self.model = model
        self._queue: Deque[ChatStreamEvent] = deque()
        self._terminated = False

    @property
    def terminated(self) -> bool:
        return self._terminated

    def publish_progress(self, text: str) -> None:
        if self._terminated:
            raise StreamStateError("progress published after terminal event")
        self._queue.append(ChatStreamEvent(provider=self.provider, model=self.model, text=text))

    def publish_terminal(self, result: Optional[AccumulatedResult], error: Optional[Exception]) -> None:
        if self._terminated:
            raise StreamStateError("terminal event published twice")
        self._terminated = True
        self._queue.append(
            ChatStreamEvent(
                provider=self.provider,
                model=self.model,
                text=result.content if result is not None else None,
                finish=True,
                result=result,
                error=error,
            )
        )

    def drain(self) -> Iterator[ChatStreamEvent]:
        """Yield and remove every queued event in publication order."""
        while self._queue:
            yield self._queue.popleft()

    def controller(
        self,
        *,
        ctx: Optional[LogContext] = None,
        logger: Optional[logging.Logger] = None,
    ) -> StreamController:
        """Return a controller whose callbacks publish into this channel."""
        return StreamController(self.publish_progress, self.publish_terminal, ctx=ctx, logger=logger)


def pump_stream(
    chunks: Iterable[bytes],
    controller: StreamController,
    *,
    provider: str,
    model: Optional[str] = None,
) -> None:
    """Feed every chunk into ``controller`` and deliver one terminal signal.

    Any exception raised while iterating ``chunks`` (or by the controller's
    progress callback) becomes the terminal error, normalized to a
    ``ProviderError``.
    """
    try:
        for chunk in chunks:
            controller.feed(chunk)
    except Exception as exc:
        controller.fail(to_provider_error(exc, provider=provider, model=model))
        return
    controller.close()


async def apump_stream(
    chunks: AsyncIterable[bytes],
    controller: StreamController,
    *,
    provider: str,
    model: Optional[str] = None,
) -> None:
    """Async counterpart of :func:`pump_stream`."""
    try:
        async for chunk in chunks:
            controller.feed(chunk)
    except Exception as exc:
        controller.fail(to_provider_error(exc, provider=provider, model=model))
        return
    controller.close()


def iter_stream_events(
    chunks: Iterable[bytes],
    *,
    provider: str,
    model: str,
    ctx: Optional[LogContext] = None,
    logger: Optional[logging.Logger] = None,
) -> Iterator[ChatStreamEvent]:
    """Yield progress events per processed chunk, then the terminal event."""
    channel = StreamChannel(provider=provider, model=model)
    controller = channel.controller(ctx=ctx, logger=logger)
    try:
        for chunk in chunks:
            controller.feed(chunk)
            yield from channel.drain()
    except Exception as exc:
        controller.fail(to_provider_error(exc, provider=provider, model=model))
    else:
        controller.close()
    yield from channel.drain()


async def aiter_stream_events(
    chunks: AsyncIterable[bytes],
    *,
    provider: str,
    model: str,
    ctx: Optional[LogContext] = None,
    logger: Optional[logging.Logger] = None,
) -> AsyncIterator[ChatStreamEvent]:
    """Async counterpart of :func:`iter_stream_events`."""
    channel = StreamChannel(provider=provider, model=model)
    controller = channel.controller(ctx=ctx, logger=logger)
    try:
        async for chunk in chunks:
            controller.feed(chunk)
            for event in channel.drain():
                yield event
    except Exception as exc:
        controller.fail(to_provider_error(exc, provider=provider, model=model))
    else:
        controller.close()
    for event in channel.drain():
        yield event


__all__ = [
    "StreamChannel",
    "pump_stream",
    "apump_stream",
    "iter_stream_events",
    "aiter_stream_events",
]
