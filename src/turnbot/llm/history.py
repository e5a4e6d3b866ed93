"""History providers: where prior turn messages come from."""
from __future__ import annotations

import threading
from typing import Sequence

import openai

from turnbot.core.errors import HistoryUnavailableError
from turnbot.core.models import ChatMessage, HistoryResult, Role


class OpenAIThreadHistory:
    """Lists thread messages through the OpenAI Assistants threads API.

    Only text content blocks are kept; any other first block yields an empty
    string.
    """

    def __init__(self, client: openai.OpenAI) -> None:
        self._client = client

    def list(self, thread_id: str) -> HistoryResult:
        try:
            page = self._client.beta.threads.messages.list(thread_id, order="asc")
        except openai.OpenAIError as exc:
            return HistoryResult.failure(HistoryUnavailableError(thread_id, str(exc)))

        messages: list[ChatMessage] = []
        for msg in page.data:
            messages.append(ChatMessage(id=msg.id, content=_first_text(msg.content), role=Role(msg.role)))
        return HistoryResult.success(messages)


def _first_text(blocks: Sequence[object]) -> str:
    if not blocks:
        return ""
    first = blocks[0]
    if getattr(first, "type", None) != "text":
        return ""
    return getattr(getattr(first, "text", None), "value", "") or ""


class InMemoryHistory:
    """Caller-supplied message lists keyed by thread id.

    Unknown threads are reported as failures so the turn degrades to a
    history-less request.
    """

    def __init__(self, threads: dict[str, Sequence[ChatMessage]] | None = None) -> None:
        self._threads: dict[str, list[ChatMessage]] = {
            tid: list(msgs) for tid, msgs in (threads or {}).items()
        }
        self._lock = threading.Lock()

    def append(self, thread_id: str, *messages: ChatMessage) -> None:
        with self._lock:
            self._threads.setdefault(thread_id, []).extend(messages)

    def list(self, thread_id: str) -> HistoryResult:
        with self._lock:
            msgs = self._threads.get(thread_id)
            if msgs is None:
                return HistoryResult.failure(HistoryUnavailableError(thread_id, "unknown thread"))
            return HistoryResult.success(list(msgs))
