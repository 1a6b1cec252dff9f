"""Delta accumulation for streamed chat completions."""
from __future__ import annotations

from dataclasses import dataclass

from ..models import DEFAULT_ROLE, Message, Role
from .decoder import DeltaRecord


@dataclass(frozen=True)
class AccumulatedResult:
    """Role and content assembled from the deltas seen so far."""

    role: Role = DEFAULT_ROLE
    content: str = ""

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content)


class DeltaAccumulator:
    """Running fold of deltas into an :class:`AccumulatedResult`.

    The role starts as ``assistant`` and is overwritten by every recognized
    role a delta carries. Content fragments are appended strictly in call
    order.
    """

    def __init__(self) -> None:
        self._role: Role = DEFAULT_ROLE
        self._content = ""
        self._fragments = 0

    def apply_role(self, role: Role) -> None:
        self._role = role

    def apply_content(self, fragment: str) -> None:
        self._content += fragment
        self._fragments += 1

    def apply(self, delta: DeltaRecord) -> bool:
        """Apply ``delta`` (role first, then content).

        Returns
        -------
        bool
            True when the delta carried content (including an empty string).
        """
        if delta.role is not None:
            self.apply_role(delta.role)
        if delta.content is None:
            return False
        self.apply_content(delta.content)
        return True

    @property
    def fragments(self) -> int:
        """Number of content fragments applied so far."""
        return self._fragments

    def snapshot(self) -> AccumulatedResult:
        return AccumulatedResult(role=self._role, content=self._content)


__all__ = ["AccumulatedResult", "DeltaAccumulator"]
