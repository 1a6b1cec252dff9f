"""Pull-based streaming event type.

``ChatStreamEvent`` is what the iterator surfaces yield: zero or more
progress events carrying the cumulative text, followed by exactly one
terminal event carrying either the final result or the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..errors import ErrorCode, ProviderError
from .accumulator import AccumulatedResult


@dataclass(frozen=True)
class ChatStreamEvent:
    """One notification from a streaming chat call.

    Fields:
      provider: canonical provider name
      model: model id/name
      text: cumulative content so far (final content on a successful terminal
            event, ``None`` on a failed one)
      finish: True on the terminal event
      result: final role/content on a successful terminal event
      error: transport error on a failed terminal event
    """

    provider: str
    model: str
    text: Optional[str]
    finish: bool = False
    result: Optional[AccumulatedResult] = None
    error: Optional[Exception] = None

    def is_error(self) -> bool:
        return self.error is not None


def accumulate_events(events: Iterable[ChatStreamEvent]) -> AccumulatedResult:
    """Drain ``events`` and return the final result.

    Raises
    ------
    Exception
        The terminal event's error when the stream failed.
    ProviderError
        ``INTERNAL`` when the events end without a terminal one.
    """
    provider = "unknown"
    model: Optional[str] = None
    for event in events:
        provider, model = event.provider, event.model
        if not event.finish:
            continue
        if event.error is not None:
            raise event.error
        return event.result if event.result is not None else AccumulatedResult(content=event.text or "")
    raise ProviderError(
        code=ErrorCode.INTERNAL,
        message="stream ended without a terminal event",
        provider=provider,
        model=model,
    )


__all__ = [
    "ChatStreamEvent",
    "accumulate_events",
]
