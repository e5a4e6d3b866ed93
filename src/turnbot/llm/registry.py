"""Provider factories: build collaborators from configuration."""
from __future__ import annotations

import openai

from turnbot.config.schema import HistoryConfig
from turnbot.llm.protocol import HistoryProvider


def create_history_provider(config: HistoryConfig, client: openai.OpenAI | None) -> HistoryProvider | None:
    """Create a history provider based on ``config.type``.

    Supported types:
        - ``"openai-threads"`` (default): OpenAI threads message listing.
          Needs ``client``; without one no history is attached.
        - ``"memory"``: in-process message lists fed by the caller.
        - ``"none"``: turns never carry history.

    Raises:
        ValueError: If the history type is not recognised.
    """
    history_type = config.type.lower().replace("_", "-")

    if history_type in ("openai-threads", "openai"):
        if client is None:
            return None
        from turnbot.llm.history import OpenAIThreadHistory

        return OpenAIThreadHistory(client)

    if history_type == "memory":
        from turnbot.llm.history import InMemoryHistory

        return InMemoryHistory()

    if history_type == "none":
        return None

    raise ValueError(
        f"Unknown history type: {config.type!r}. "
        f"Supported: openai-threads, memory, none"
    )
