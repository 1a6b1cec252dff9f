"""OpenAI endpoint client, model catalog, and wire types."""

from .client import OpenAIClient
from .endpoints import Endpoint
from .models import (
    GPT3,
    ChatModel,
    Codex,
    CompletionsModel,
    EditsModel,
    EmbeddingModel,
    ImageResponseFormat,
    ImageSize,
    completions_model_from_dict,
)
from .responses import (
    ChatCompletionResponse,
    EmbeddingResponse,
    ImageResponse,
    TextResponse,
    Usage,
)

__all__ = [
    "OpenAIClient",
    "Endpoint",
    "GPT3",
    "Codex",
    "CompletionsModel",
    "completions_model_from_dict",
    "EditsModel",
    "EmbeddingModel",
    "ChatModel",
    "ImageSize",
    "ImageResponseFormat",
    "ChatCompletionResponse",
    "EmbeddingResponse",
    "ImageResponse",
    "TextResponse",
    "Usage",
]
