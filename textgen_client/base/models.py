"""
Provider-agnostic chat message model.

Defines the `Message` dataclass and the `Role` literal representing the sender
of a chat message. Roles are limited to the three labels the chat API accepts
and emits in stream deltas.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Literal, Optional, cast


# Message roles accepted by the chat endpoint.
Role = Literal["system", "user", "assistant"]

KNOWN_ROLES: FrozenSet[str] = frozenset(("system", "user", "assistant"))

DEFAULT_ROLE: Role = "assistant"


def coerce_role(value: Any) -> Optional[Role]:
    """Return ``value`` as a :data:`Role` when it is a known label, else ``None``."""
    if isinstance(value, str) and value in KNOWN_ROLES:
        return cast(Role, value)
    return None


@dataclass
class Message:
    """A chat message sent to or received from the chat endpoint.

    Attributes:
        role: The role of the message author.
        content: Plain text content of the message.
    """

    role: Role
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation of the message."""
        return {"role": self.role, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)


__all__ = [
    "Role",
    "KNOWN_ROLES",
    "DEFAULT_ROLE",
    "coerce_role",
    "Message",
]
