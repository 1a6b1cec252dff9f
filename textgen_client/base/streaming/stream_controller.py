"""Stream controller: the per-call state machine of the streaming assembler.

The controller is driven by three transport signals, delivered sequentially
for one connection:

* ``feed(chunk)`` for every chunk of response bytes,
* ``fail(error)`` when the transport reports an error,
* ``close()`` when the transport finished without error.

It splits the buffered text into frames, decodes each accepted frame, folds
the resulting deltas into an :class:`AccumulatedResult`, and reports the
cumulative content to ``on_progress`` after every delta that carried
content. Exactly one of ``fail``/``close`` moves it out of ``OPEN`` and
fires ``on_complete`` once; any later signal raises :class:`StreamStateError`
and fires nothing.

The controller has no timeout of its own. A transport that stalls without
ever signalling leaves it ``OPEN``; bounding that wait belongs to the
transport (see ``base.http.client``).
"""
from __future__ import annotations

import codecs
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from ..errors import classify_exception
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from .accumulator import AccumulatedResult, DeltaAccumulator
from .decoder import FrameDecodeResult, decode_frame
from .frames import accept_frame, split_frames
from .streaming_metrics import StreamMetrics

ProgressCallback = Callable[[str], None]
CompletionCallback = Callable[[Optional[AccumulatedResult], Optional[Exception]], None]


class StreamStatus(str, Enum):
    OPEN = "open"
    CLOSED_SUCCESS = "closed_success"
    CLOSED_FAILURE = "closed_failure"


class StreamStateError(RuntimeError):
    """A transport signal arrived after the stream had already terminated."""


def _utf8_decoder() -> codecs.IncrementalDecoder:
    return codecs.getincrementaldecoder("utf-8")(errors="replace")


@dataclass
class StreamState:
    """Everything one streaming call owns.

    Attributes
    ----------
    buffer: str
        Text received but not yet resolved into complete frames.
    accumulator: DeltaAccumulator
        Running role/content fold.
    status: StreamStatus
        Current lifecycle state.
    metrics: StreamMetrics
        Counters and timings for the terminal log event.
    text_decoder: codecs.IncrementalDecoder
        Incremental UTF-8 decoder so a code point split across two transport
        chunks is decoded once both halves have arrived.
    """

    buffer: str = ""
    accumulator: DeltaAccumulator = field(default_factory=DeltaAccumulator)
    status: StreamStatus = StreamStatus.OPEN
    metrics: StreamMetrics = field(default_factory=StreamMetrics)
    text_decoder: codecs.IncrementalDecoder = field(default_factory=_utf8_decoder)


class StreamController:
    """Assemble one streamed chat completion from raw transport bytes.

    Parameters
    ----------
    on_progress: ProgressCallback | None
        Called with the cumulative content after each delta carrying content.
    on_complete: CompletionCallback | None
        Called exactly once with ``(result, None)`` on success or
        ``(None, error)`` on transport failure.
    ctx: LogContext | None
        Log context attached to every log event of this call.
    logger: logging.Logger | None
        Logger for lifecycle events; defaults to ``textgen.streaming``.
    """

    def __init__(
        self,
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompletionCallback] = None,
        *,
        ctx: Optional[LogContext] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_complete = on_complete
        self._ctx = ctx or LogContext()
        self._logger = logger or get_logger("textgen.streaming")
        self._state = StreamState()
        self._t0 = time.perf_counter()
        self._result: Optional[AccumulatedResult] = None
        self._error: Optional[Exception] = None

    # Transport signals ----------------------------------------------------
    def feed(self, chunk: Union[bytes, str]) -> None:
        """Consume one chunk of transport data (``onBytesReceived``)."""
        self._require_open("feed")
        state = self._state
        if isinstance(chunk, str):
            text = chunk
            state.metrics.bytes_received += len(chunk.encode("utf-8"))
        else:
            text = state.text_decoder.decode(chunk)
            state.metrics.bytes_received += len(chunk)
        if not text:
            return
        frames, state.buffer = split_frames(state.buffer + text)
        for frame in frames:
            state.metrics.frames += 1
            if not accept_frame(frame):
                state.metrics.skipped += 1
                continue
            self._handle_outcome(decode_frame(frame))

    def fail(self, error: Exception) -> None:
        """Terminate with a transport error (``onTransportError``)."""
        self._require_open("fail")
        self._state.status = StreamStatus.CLOSED_FAILURE
        self._error = error
        self._finalize(error=error)
        if self._on_complete is not None:
            self._on_complete(None, error)

    def close(self) -> None:
        """Terminate successfully (``onTransportClosed``)."""
        self._require_open("close")
        state = self._state
        state.buffer += state.text_decoder.decode(b"", final=True)
        if state.buffer.strip():
            log_event(
                self._logger,
                "stream.trailing_data_dropped",
                self._ctx,
                level=logging.DEBUG,
                trailing_chars=len(state.buffer),
            )
        state.buffer = ""
        state.status = StreamStatus.CLOSED_SUCCESS
        self._result = state.accumulator.snapshot()
        self._finalize()
        if self._on_complete is not None:
            self._on_complete(self._result, None)

    # Inspection -----------------------------------------------------------
    @property
    def status(self) -> StreamStatus:
        return self._state.status

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether a terminal signal has been processed."""
        return self._state.status is not StreamStatus.OPEN

    @property
    def result(self) -> Optional[AccumulatedResult]:
        """Final snapshot after a successful close, else ``None``."""
        return self._result

    @property
    def error(self) -> Optional[Exception]:
        """Transport error after a failed close, else ``None``."""
        return self._error

    @property
    def metrics(self) -> StreamMetrics:
        return self._state.metrics

    @property
    def buffered(self) -> str:
        """Incomplete frame text currently held for the next chunk."""
        return self._state.buffer

    def snapshot(self) -> AccumulatedResult:
        """Return the result so far without changing any state."""
        return self._state.accumulator.snapshot()

    # Internals ------------------------------------------------------------
    def _require_open(self, signal: str) -> None:
        if self._state.status is not StreamStatus.OPEN:
            raise StreamStateError(f"{signal}() received after stream reached {self._state.status.value}")

    def _handle_outcome(self, outcome: FrameDecodeResult) -> None:
        state = self._state
        if outcome.delta is None:
            state.metrics.skipped += 1
            reason = outcome.skip_reason.value if outcome.skip_reason else None
            log_event(self._logger, "stream.frame_skipped", self._ctx, level=logging.DEBUG, reason=reason)
            return
        delta = outcome.delta
        if delta.ignored_role is not None:
            log_event(
                self._logger,
                "stream.role_ignored",
                self._ctx,
                level=logging.DEBUG,
                role=delta.ignored_role,
            )
        if not state.accumulator.apply(delta):
            return
        if state.metrics.emitted == 0:
            state.metrics.time_to_first_token_ms = (time.perf_counter() - self._t0) * 1000.0
        state.metrics.emitted += 1
        if self._on_progress is not None:
            self._on_progress(state.accumulator.snapshot().content)

    def _finalize(self, error: Optional[Exception] = None) -> None:
        metrics = self._state.metrics
        metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0
        normalized_log_event(
            self._logger,
            "stream.end" if error is None else "stream.error",
            self._ctx,
            phase="finalize",
            attempt=None,
            emitted=metrics.emitted > 0,
            tokens=None,
            error_code=classify_exception(error).value if error is not None else None,
            error=str(error) if error is not None else None,
            content_chars=len(self._result.content) if self._result is not None else None,
            **metrics.to_dict(),
        )


__all__ = [
    "StreamController",
    "StreamState",
    "StreamStatus",
    "StreamStateError",
    "ProgressCallback",
    "CompletionCallback",
]
