"""Request bodies for the OpenAI endpoints.

Pydantic v2 models validate the caller's arguments before any I/O and
serialize to the wire JSON through :meth:`RequestParams.to_payload`, which
drops unset optional fields so the server applies its own defaults.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..base.constants import IMAGE_COUNT_MAX, IMAGE_COUNT_MIN, IMAGE_PROMPT_MAX_CHARS
from ..base.models import Role


class RequestParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ChatMessageParam(BaseModel):
    role: Role
    content: str


class ChatCompletionParams(RequestParams):
    messages: List[ChatMessageParam] = Field(min_length=1)
    model: str
    max_tokens: Optional[int] = None
    temperature: float = 1.0
    stop: Optional[List[str]] = None
    user: Optional[str] = None
    stream: Optional[bool] = None


class CompletionParams(RequestParams):
    prompt: str
    suffix: Optional[str] = None
    model: str
    max_tokens: int = 16
    temperature: float = 1.0
    stop: Optional[List[str]] = None
    user: Optional[str] = None


class EditParams(RequestParams):
    instruction: str
    model: str
    input: str = ""
    temperature: float = 1.0


class EmbeddingParams(RequestParams):
    input: str
    model: str


class ImageParams(RequestParams):
    prompt: str = Field(max_length=IMAGE_PROMPT_MAX_CHARS - 1)
    n: int = Field(default=1, ge=IMAGE_COUNT_MIN, le=IMAGE_COUNT_MAX)
    size: Optional[str] = None
    response_format: Optional[str] = None
    user: Optional[str] = None


__all__ = [
    "RequestParams",
    "ChatMessageParam",
    "ChatCompletionParams",
    "CompletionParams",
    "EditParams",
    "EmbeddingParams",
    "ImageParams",
]
