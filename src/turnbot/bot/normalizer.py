"""Response cleanup and continuation-handle derivation."""
from __future__ import annotations

from turnbot.bot.ids import IdGenerator
from turnbot.core.models import ChatMessage, ConversationIdentity

# Some completions come back prefixed with this literal.
DEFAULT_STRIP_PREFIX = "with "


class ResponseNormalizer:
    """Turns a raw assistant message into ``(text, next_identity)``.

    Args:
        strip_prefix: Literal removed once from the start of the reply when
            present.  ``None`` or ``""`` leaves replies untouched.
        ids: Identifier generator for the new handle.
    """

    def __init__(
        self,
        strip_prefix: str | None = DEFAULT_STRIP_PREFIX,
        ids: IdGenerator | None = None,
    ) -> None:
        self.strip_prefix = strip_prefix or None
        self.ids = ids or IdGenerator()

    def clean(self, content: str) -> str:
        if self.strip_prefix and content.startswith(self.strip_prefix):
            return content[len(self.strip_prefix):]
        return content

    def normalize(
        self, response: ChatMessage, identity: ConversationIdentity,
    ) -> tuple[str, ConversationIdentity]:
        text = self.clean(response.content or "")
        next_identity = ConversationIdentity(
            message_id=self.ids.message_id(response.role.value),
            thread_id=identity.thread_id or self.ids.thread_id(),
        )
        return text, next_identity
