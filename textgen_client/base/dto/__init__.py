"""Pydantic wire DTOs shared by the streaming assembler and the API client."""

from .stream_chunk import ChatStreamChunk, ChoiceDelta, StreamChoice

__all__ = ["ChatStreamChunk", "ChoiceDelta", "StreamChoice"]
