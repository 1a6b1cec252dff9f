"""Event payload decoding.

Turns one accepted frame into a :class:`DeltaRecord`. Failure is a normal
outcome here, not an exception: keep-alives, the ``[DONE]`` terminator and
out-of-schema payloads all produce a *skipped* :class:`FrameDecodeResult` and
the stream carries on.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from ..constants import DONE_SENTINEL, EVENT_PREFIX
from ..dto.stream_chunk import ChatStreamChunk
from ..models import Role, coerce_role


class SkipReason(str, Enum):
    """Why a frame produced no delta."""

    INVALID_JSON = "invalid_json"
    SCHEMA_MISMATCH = "schema_mismatch"
    NO_CHOICES = "no_choices"
    DONE_SENTINEL = "done_sentinel"


@dataclass(frozen=True)
class DeltaRecord:
    """Decoded content of one frame.

    Attributes
    ----------
    role: Role | None
        Recognized role label, when the frame set one.
    content: str | None
        Content fragment (possibly empty), when the frame carried one.
    ignored_role: str | None
        Raw role value that was not a known label; kept only so the caller
        can log it.
    """

    role: Optional[Role] = None
    content: Optional[str] = None
    ignored_role: Optional[str] = None


@dataclass(frozen=True)
class FrameDecodeResult:
    """Two-case outcome of decoding a frame: a delta, or a skip reason."""

    delta: Optional[DeltaRecord] = None
    skip_reason: Optional[SkipReason] = None

    @classmethod
    def decoded(cls, delta: DeltaRecord) -> "FrameDecodeResult":
        return cls(delta=delta)

    @classmethod
    def skipped(cls, reason: SkipReason) -> "FrameDecodeResult":
        return cls(skip_reason=reason)

    @property
    def ok(self) -> bool:
        return self.delta is not None


def _payload(frame: str) -> str:
    return frame[len(EVENT_PREFIX):].strip() if frame.startswith(EVENT_PREFIX) else frame.strip()


def decode_frame(frame: str) -> FrameDecodeResult:
    """Decode one ``data:`` frame into its first choice's delta.

    Parameters
    ----------
    frame: str
        Frame text starting with the ``data:`` marker.

    Returns
    -------
    FrameDecodeResult
        ``FrameDecodeResult.decoded`` with the delta, or
        ``FrameDecodeResult.skipped`` when the payload is the ``[DONE]``
        sentinel, is not JSON, does not match the chunk schema, or has an
        empty ``choices`` array. Never raises for payload problems.
    """
    payload = _payload(frame)
    if payload == DONE_SENTINEL:
        return FrameDecodeResult.skipped(SkipReason.DONE_SENTINEL)
    try:
        chunk = ChatStreamChunk.model_validate_json(payload)
    except ValidationError as exc:
        if any(err.get("type") == "json_invalid" for err in exc.errors()):
            return FrameDecodeResult.skipped(SkipReason.INVALID_JSON)
        return FrameDecodeResult.skipped(SkipReason.SCHEMA_MISMATCH)
    if not chunk.choices:
        return FrameDecodeResult.skipped(SkipReason.NO_CHOICES)

    delta = chunk.choices[0].delta
    role = coerce_role(delta.role)
    ignored = delta.role if delta.role is not None and role is None else None
    return FrameDecodeResult.decoded(DeltaRecord(role=role, content=delta.content, ignored_role=ignored))


__all__ = ["SkipReason", "DeltaRecord", "FrameDecodeResult", "decode_frame"]
