"""Base shared constants for the client and the streaming assembler.

Central location to avoid scattering magic strings across modules.
"""
from __future__ import annotations

# Server-sent event framing
FRAME_DELIMITER = "\n\n"
EVENT_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"

# Server error envelope markers
INVALID_REQUEST_ERROR_TYPE = "invalid_request_error"
CONTEXT_LENGTH_MARKER = "maximum context length"

# Request validation limits
IMAGE_PROMPT_MAX_CHARS = 1000
IMAGE_COUNT_MIN = 1
IMAGE_COUNT_MAX = 10

__all__ = [
    "FRAME_DELIMITER",
    "EVENT_PREFIX",
    "DONE_SENTINEL",
    "INVALID_REQUEST_ERROR_TYPE",
    "CONTEXT_LENGTH_MARKER",
    "IMAGE_PROMPT_MAX_CHARS",
    "IMAGE_COUNT_MIN",
    "IMAGE_COUNT_MAX",
]
