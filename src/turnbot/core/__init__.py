from turnbot.core.errors import (
    HistoryUnavailableError,
    InvalidResponseError,
    MissingCredentialError,
    TurnbotError,
)
from turnbot.core.models import (
    ChatMessage,
    CompletionParams,
    ConversationIdentity,
    HistoryResult,
    Role,
)

__all__ = [
    "ChatMessage", "CompletionParams", "ConversationIdentity", "HistoryResult", "Role",
    "TurnbotError", "MissingCredentialError", "InvalidResponseError", "HistoryUnavailableError",
]
