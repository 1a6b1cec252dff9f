"""textgen_client: OpenAI API client with an incremental streaming assembler.

Layers:
- ``base``: errors, logging, timeouts, HTTP client construction, and the
  streamed-response assembler (frame splitter, decoder, accumulator,
  controller, channel bridge)
- ``config``: merged configuration from defaults, files, ``.env`` and env vars
- ``openai``: the endpoint client, model catalog and wire types
- ``cli``: ``python -m textgen_client.cli``
"""

from __future__ import annotations

from typing import Any

from .base import (
    AccumulatedResult,
    ChatStreamEvent,
    ErrorCode,
    Message,
    ProviderError,
    StreamController,
    StreamStateError,
    StreamStatus,
    accumulate_events,
)
from .openai import OpenAIClient

__version__ = "0.1.0"


def create(**kwargs: Any) -> OpenAIClient:
    """Return an :class:`OpenAIClient` configured from the environment plus ``kwargs``."""
    return OpenAIClient(**kwargs)


__all__ = [
    "__version__",
    "create",
    "OpenAIClient",
    "AccumulatedResult",
    "ChatStreamEvent",
    "ErrorCode",
    "Message",
    "ProviderError",
    "StreamController",
    "StreamStateError",
    "StreamStatus",
    "accumulate_events",
]
