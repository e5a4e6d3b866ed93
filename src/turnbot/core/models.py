"""Core data models for turnbot."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class Role(Enum):
    """Author of a chat message."""

    ASSISTANT = "assistant"
    USER = "user"
    SYSTEM = "system"


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a turn's message sequence.

    ``content`` is always a string; anything else (``None``, content-block
    lists, dicts) becomes ``""`` on construction.  ``raw`` optionally keeps
    the provider's untouched payload.
    """

    id: str
    content: str
    role: Role
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.content, str):
            object.__setattr__(self, "content", "")
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "role": self.role.value, "content": self.content}


# ---------------------------------------------------------------------------
# Continuation handle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConversationIdentity:
    """Opaque continuation handle threaded by the caller across turns.

    Both fields are ``None`` on the first turn of a conversation.
    """

    message_id: str | None = None
    thread_id: str | None = None

    @classmethod
    def empty(cls) -> ConversationIdentity:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.message_id and not self.thread_id

    @property
    def can_resume(self) -> bool:
        """True when both a prior message and a thread reference are present."""
        return bool(self.message_id) and bool(self.thread_id)

    def to_dict(self) -> dict[str, str]:
        """Serialize to the ``{messageId, threadId}`` shape, omitting absent keys."""
        d: dict[str, str] = {}
        if self.message_id:
            d["messageId"] = self.message_id
        if self.thread_id:
            d["threadId"] = self.thread_id
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ConversationIdentity:
        if not data:
            return cls()
        return cls(
            message_id=data.get("messageId") or data.get("message_id") or None,
            thread_id=data.get("threadId") or data.get("thread_id") or None,
        )


# ---------------------------------------------------------------------------
# Completion call parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompletionParams:
    """Model parameters for one completion call. Streaming is always off."""

    model: str
    temperature: float = 0.0
    max_tokens: int = 4000
    stream: bool = field(default=False, init=False)


# ---------------------------------------------------------------------------
# History lookup
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoryResult:
    """Outcome of a history lookup: prior messages, or the error that prevented it."""

    messages: tuple[ChatMessage, ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, messages: list[ChatMessage] | tuple[ChatMessage, ...]) -> HistoryResult:
        return cls(messages=tuple(messages))

    @classmethod
    def failure(cls, error: Exception) -> HistoryResult:
        return cls(error=error)
