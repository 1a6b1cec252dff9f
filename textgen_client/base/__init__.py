"""
Client Base Package

Exports the layers shared by every endpoint of the client:
- Errors: normalized taxonomy and exception classification
- Logging: structured JSON events with a shared context object
- Models: chat message and role types
- Transport: timeout configuration and ``httpx`` client construction
- Streaming: the incremental streamed-response assembler
"""

from .errors import ErrorCode, ProviderError, classify_exception
from .logging import LogContext, get_logger, configure_logger
from .models import DEFAULT_ROLE, KNOWN_ROLES, Message, Role
from .timeouts import TimeoutConfig, get_timeout_config
from .streaming import (
    AccumulatedResult,
    ChatStreamEvent,
    StreamController,
    StreamStateError,
    StreamStatus,
    accumulate_events,
)

__all__ = [
    # Errors
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    # Logging
    "LogContext",
    "get_logger",
    "configure_logger",
    # Models
    "Role",
    "KNOWN_ROLES",
    "DEFAULT_ROLE",
    "Message",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
    # Streaming
    "AccumulatedResult",
    "ChatStreamEvent",
    "StreamController",
    "StreamStateError",
    "StreamStatus",
    "accumulate_events",
]
