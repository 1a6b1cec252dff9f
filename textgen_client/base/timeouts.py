"""Unified timeout configuration for the HTTP transport.

This module centralizes the timeout values applied by the transport layer
(connection establishment, single-shot requests, and the idle read timeout of
streaming responses). The streaming assembler itself enforces no timeout: a
stalled stream surfaces only when the transport gives up and reports an error.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use (and again whenever the relevant variables change). Supported
    environment variables (all optional):
        TEXTGEN_TIMEOUT_CONNECT_SECONDS
        TEXTGEN_TIMEOUT_HTTP_SECONDS
        TEXTGEN_TIMEOUT_STREAM_SECONDS
"""
from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the TCP/TLS connection.
        http_timeout_seconds: Overall read timeout for single-shot requests.
        stream_timeout_seconds: Idle timeout while waiting for the next chunk
            of a streaming response.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 60.0
    stream_timeout_seconds: float = 60.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None
_ENV_NAMES = (
    "TEXTGEN_TIMEOUT_CONNECT_SECONDS",
    "TEXTGEN_TIMEOUT_HTTP_SECONDS",
    "TEXTGEN_TIMEOUT_STREAM_SECONDS",
)


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float, else ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
