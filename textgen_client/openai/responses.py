"""Typed response bodies for the non-streaming endpoints.

All models ignore unknown keys so additive server changes do not break
decoding. ``ErrorEnvelope`` matches the ``{"error": {...}}`` body the API
returns instead of a result.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class _Response(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Usage(_Response):
    prompt_tokens: int
    completion_tokens: Optional[int] = None
    total_tokens: int


class Choice(_Response):
    text: str
    index: Optional[int] = None
    finish_reason: Optional[str] = None


class TextResponse(_Response):
    """Result of the completions and edits endpoints."""

    object: str
    model: Optional[str] = None
    choices: List[Choice]
    usage: Optional[Usage] = None

    @property
    def text(self) -> Optional[str]:
        return self.choices[0].text if self.choices else None


class ChatMessage(_Response):
    role: str
    content: str


class ChatChoice(_Response):
    message: ChatMessage
    index: Optional[int] = None
    finish_reason: Optional[str] = None


class ChatCompletionResponse(_Response):
    object: str
    model: Optional[str] = None
    choices: List[ChatChoice]
    usage: Optional[Usage] = None

    @property
    def text(self) -> Optional[str]:
        return self.choices[0].message.content if self.choices else None


class Embedding(_Response):
    object: str
    embedding: List[float]
    index: int


class EmbeddingResponse(_Response):
    object: str
    data: List[Embedding]
    model: str
    usage: Optional[Usage] = None


class Image(_Response):
    url: Optional[str] = None
    b64_json: Optional[str] = None


class ImageResponse(_Response):
    created: Optional[int] = None
    data: List[Image]


class ErrorDetail(_Response):
    message: str
    type: str


class ErrorEnvelope(_Response):
    error: ErrorDetail


__all__ = [
    "Usage",
    "Choice",
    "TextResponse",
    "ChatMessage",
    "ChatChoice",
    "ChatCompletionResponse",
    "Embedding",
    "EmbeddingResponse",
    "Image",
    "ImageResponse",
    "ErrorDetail",
    "ErrorEnvelope",
]
