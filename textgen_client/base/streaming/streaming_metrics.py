"""Streaming metrics data structure.

Isolated within the streaming package to keep the controller small.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single streaming call.

    Attributes
    ----------
    emitted: int
        Progress notifications delivered (deltas carrying content).
    frames: int
        Complete frames split out of the byte stream.
    skipped: int
        Frames discarded (no ``data:`` marker or undecodable payload).
    bytes_received: int
        Raw transport bytes fed to the controller.
    time_to_first_token_ms: float | None
        Latency from controller creation to the first progress notification.
    total_duration_ms: float | None
        Latency from controller creation to the terminal signal.
    """

    emitted: int = 0
    frames: int = 0
    skipped: int = 0
    bytes_received: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emitted_count": self.emitted,
            "frames": self.frames,
            "frames_skipped": self.skipped,
            "bytes_received": self.bytes_received,
            "time_to_first_token_ms": self.time_to_first_token_ms,
            "total_duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]
