"""Streaming package: the incremental streamed-response assembler.

Exposes the frame splitter, payload decoder, delta accumulator, stream
controller, and the channel bridge under a single namespace.
"""

from .frames import accept_frame, split_frames
from .decoder import DeltaRecord, FrameDecodeResult, SkipReason, decode_frame
from .accumulator import AccumulatedResult, DeltaAccumulator
from .streaming_metrics import StreamMetrics
from .stream_controller import (
    CompletionCallback,
    ProgressCallback,
    StreamController,
    StreamState,
    StreamStateError,
    StreamStatus,
)
from .streaming import ChatStreamEvent, accumulate_events
from .channel import (
    StreamChannel,
    aiter_stream_events,
    apump_stream,
    iter_stream_events,
    pump_stream,
)

__all__ = [
    "split_frames",
    "accept_frame",
    "DeltaRecord",
    "FrameDecodeResult",
    "SkipReason",
    "decode_frame",
    "AccumulatedResult",
    "DeltaAccumulator",
    "StreamMetrics",
    "StreamController",
    "StreamState",
    "StreamStatus",
    "StreamStateError",
    "ProgressCallback",
    "CompletionCallback",
    "ChatStreamEvent",
    "accumulate_events",
    "StreamChannel",
    "pump_stream",
    "apump_stream",
    "iter_stream_events",
    "aiter_stream_events",
]
