"""Exception types raised inside turnbot."""
from __future__ import annotations


class TurnbotError(Exception):
    """Base class for turnbot errors."""


class MissingCredentialError(TurnbotError, ValueError):
    """No API key was configured; the bot cannot be constructed."""


class InvalidResponseError(TurnbotError):
    """The completion service answered with something other than one assistant message."""


class HistoryUnavailableError(TurnbotError):
    """Prior messages for a thread could not be listed."""

    def __init__(self, thread_id: str, reason: str) -> None:
        self.thread_id = thread_id
        self.reason = reason
        super().__init__(f"history for thread {thread_id!r} unavailable: {reason}")
