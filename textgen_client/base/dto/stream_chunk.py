"""
Pydantic schema for one streamed chat completion event payload.

Shape (after the ``data:`` prefix is stripped)::

    {
      "object": "chat.completion.chunk",
      "model": "gpt-3.5-turbo" | null,
      "choices": [{"delta": {"role": "assistant", "content": "Hel"}}],
      "created": 1677652288,
      "id": "chatcmpl-123"
    }

Only ``choices[0].delta.role`` and ``choices[0].delta.content`` feed the
assembler; the envelope fields are accepted (and may be absent) but unused.
Unknown keys are ignored so additive server changes do not invalidate frames.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ChoiceDelta(BaseModel):
    """Incremental role/content fragment carried by one choice."""

    model_config = ConfigDict(extra="ignore")

    role: Optional[str] = None
    content: Optional[str] = None


class StreamChoice(BaseModel):
    """One entry of the ``choices`` array of a stream chunk."""

    model_config = ConfigDict(extra="ignore")

    delta: ChoiceDelta
    index: Optional[int] = None
    finish_reason: Optional[str] = None


class ChatStreamChunk(BaseModel):
    """Top-level stream chunk envelope."""

    model_config = ConfigDict(extra="ignore")

    choices: List[StreamChoice]
    object: Optional[str] = None
    model: Optional[str] = None
    created: Optional[int] = None
    id: Optional[str] = None


__all__ = ["ChatStreamChunk", "ChoiceDelta", "StreamChoice"]
