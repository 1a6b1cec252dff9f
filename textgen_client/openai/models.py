"""Model catalog for the OpenAI endpoints.

Each family is a ``str`` enum whose value is the wire model name, so members
can be passed anywhere a plain model string is accepted. Families with a
documented context window expose it via ``max_tokens``.

The completions endpoint accepts two families, :class:`GPT3` and
:class:`Codex`; ``as_dict`` / :func:`completions_model_from_dict` convert a
member to and from a one-key mapping (``{"gpt3": "text-davinci-003"}``) for
persisting a user's model choice.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

# Context window per wire model name.
MAX_TOKENS: Dict[str, int] = {
    "text-davinci-003": 4000,
    "text-curie-001": 2048,
    "text-babbage-001": 2048,
    "text-ada-001": 2048,
    "code-davinci-002": 8000,
    "code-cushman-001": 2048,
    "text-davinci-edit-001": 3000,
    "code-davinci-edit-001": 3000,
    "text-embedding-ada-002": 8191,
    "text-embedding-ada-001": 2046,
}


class CatalogModel(str, Enum):
    """Base for model families with a known context window."""

    @property
    def model_name(self) -> str:
        return self.value

    @property
    def max_tokens(self) -> int:
        return MAX_TOKENS[self.value]


class GPT3(CatalogModel):
    """Natural-language completion models."""

    DAVINCI = "text-davinci-003"
    CURIE = "text-curie-001"
    BABBAGE = "text-babbage-001"
    ADA = "text-ada-001"

    def as_dict(self) -> Dict[str, str]:
        return {"gpt3": self.value}


class Codex(CatalogModel):
    """Code completion models."""

    DAVINCI = "code-davinci-002"
    CUSHMAN = "code-cushman-001"

    def as_dict(self) -> Dict[str, str]:
        return {"codex": self.value}


CompletionsModel = Union[GPT3, Codex]

_COMPLETIONS_FAMILIES = {"gpt3": GPT3, "codex": Codex}


def completions_model_from_dict(data: Any) -> Optional[CompletionsModel]:
    """Inverse of ``as_dict``; returns ``None`` for anything unrecognized.

    Families are tried in order (``gpt3`` then ``codex``); a missing,
    non-string or unknown value falls through to the next family.
    """
    if not isinstance(data, dict):
        return None
    for key, family in _COMPLETIONS_FAMILIES.items():
        name = data.get(key)
        if not isinstance(name, str):
            continue
        try:
            return family(name)
        except ValueError:
            continue
    return None


class EditsModel(CatalogModel):
    DAVINCI_TEXT = "text-davinci-edit-001"
    DAVINCI_CODE = "code-davinci-edit-001"


class EmbeddingModel(CatalogModel):
    ADA_V2 = "text-embedding-ada-002"
    ADA_V1 = "text-embedding-ada-001"


class ChatModel(str, Enum):
    GPT_35_TURBO = "gpt-3.5-turbo"
    GPT_4 = "gpt-4"


class ImageSize(str, Enum):
    X256 = "256x256"
    X512 = "512x512"
    X1024 = "1024x1024"


class ImageResponseFormat(str, Enum):
    URL = "url"
    B64_JSON = "b64_json"


def model_name(model: Union[str, Enum]) -> str:
    """Return the wire name for an enum member or a plain model string."""
    return model.value if isinstance(model, Enum) else str(model)


__all__ = [
    "MAX_TOKENS",
    "CatalogModel",
    "GPT3",
    "Codex",
    "CompletionsModel",
    "completions_model_from_dict",
    "EditsModel",
    "EmbeddingModel",
    "ChatModel",
    "ImageSize",
    "ImageResponseFormat",
    "model_name",
]
