"""Protocols for the remote collaborators of a turn."""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from turnbot.core.models import ChatMessage, CompletionParams, HistoryResult


@runtime_checkable
class CompletionProvider(Protocol):
    """Executes one remote completion call."""

    def complete(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
        """Send the message sequence and return the model's reply.

        Args:
            messages: Ordered turn messages, system message first and user
                message last.
            params: Model name, temperature and token limit for the call.

        Returns:
            The reply as a single :class:`ChatMessage`.

        Raises:
            Exception: Any transport or API failure.  Callers treat every
                exception as transient.
        """
        ...


@runtime_checkable
class HistoryProvider(Protocol):
    """Resolves a thread reference to the messages of earlier turns."""

    def list(self, thread_id: str) -> HistoryResult:
        """Return prior messages of ``thread_id`` in conversation order.

        Failures are reported through :attr:`HistoryResult.error` rather
        than raised.
        """
        ...
