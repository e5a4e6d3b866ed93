"""Message assembly: system prompt, prior turns, new user message."""
from __future__ import annotations

import logging

from turnbot.core.models import ChatMessage, ConversationIdentity, HistoryResult, Role
from turnbot.llm.protocol import HistoryProvider

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE_ID = "system"
USER_MESSAGE_ID = "user"


def fetch_history(history: HistoryProvider, thread_id: str) -> HistoryResult:
    """Ask the provider for prior messages; a raising provider becomes a failed result."""
    try:
        result = history.list(thread_id)
        if not isinstance(result, HistoryResult):
            result = HistoryResult.success(list(result))
    except Exception as exc:
        return HistoryResult.failure(exc)
    return result


def assemble_messages(
    system_prompt: str,
    message: str,
    identity: ConversationIdentity,
    history: HistoryProvider | None = None,
) -> list[ChatMessage]:
    """Build the ordered message sequence for one turn.

    The sequence starts with exactly one system message and ends with the
    new user message.  Prior messages of the identity's thread are placed in
    between when the identity can be resumed and the lookup succeeds; a
    failed lookup only drops the history.
    """
    messages = [ChatMessage(id=SYSTEM_MESSAGE_ID, content=system_prompt, role=Role.SYSTEM)]

    if history is not None and identity.can_resume:
        assert identity.thread_id is not None
        result = fetch_history(history, identity.thread_id)
        if result.ok:
            for prior in result.messages:
                messages.append(_as_history_entry(prior))
        else:
            logger.warning(
                "Failed to retrieve message history, continuing with new message: %s",
                result.error,
            )

    messages.append(ChatMessage(id=USER_MESSAGE_ID, content=message, role=Role.USER))
    return messages


def _as_history_entry(prior: ChatMessage) -> ChatMessage:
    # Only the leading message may carry the system role.
    if prior.role is not Role.SYSTEM:
        return prior
    return ChatMessage(id=prior.id, content=prior.content, role=Role.USER)
