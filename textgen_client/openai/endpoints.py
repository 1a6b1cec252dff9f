"""REST endpoints used by the client (paths relative to the base URL)."""
from __future__ import annotations

from enum import Enum


class Endpoint(str, Enum):
    COMPLETIONS = "completions"
    EDITS = "edits"
    CHAT = "chat"
    EMBEDDINGS = "embeddings"
    IMAGE_GENERATIONS = "image_generations"

    @property
    def path(self) -> str:
        return _PATHS[self]

    @property
    def method(self) -> str:
        # Every endpoint the client talks to is a JSON POST.
        return "POST"


_PATHS = {
    Endpoint.COMPLETIONS: "/v1/completions",
    Endpoint.EDITS: "/v1/edits",
    Endpoint.CHAT: "/v1/chat/completions",
    Endpoint.EMBEDDINGS: "/v1/embeddings",
    Endpoint.IMAGE_GENERATIONS: "/v1/images/generations",
}


__all__ = ["Endpoint"]
