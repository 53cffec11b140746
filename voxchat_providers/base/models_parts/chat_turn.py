"""
ChatTurn DTO: one immutable entry of a conversation.

Defines the `ChatTurn` dataclass and the `Role` literal. An ordered sequence
of turns forms the conversation sent to a backend; order is significant
because it defines dialogue causality.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal


# Roles understood by every supported dialect.
Role = Literal["system", "user", "assistant"]

ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatTurn:
    """A single chat turn.

    Attributes:
        role: Author of the turn (``"system"``, ``"user"`` or ``"assistant"``).
        content: Plain text content.

    Turns are frozen: once sent they are never edited, only appended after.
    """

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Return the ``{role, content}`` wire mapping shared by all dialects."""
        return {"role": self.role, "content": self.content}


__all__ = ["ChatTurn", "Role", "ROLES"]
