"""Single-turn chat orchestration."""
from __future__ import annotations

import datetime
import json
import logging
import time
from typing import Callable

from turnbot.bot.assembler import assemble_messages
from turnbot.bot.normalizer import ResponseNormalizer
from turnbot.bot.prompt import build_system_prompt
from turnbot.bot.retry import BackoffPolicy, RetryingInvoker
from turnbot.config.schema import DEFAULT_MODEL, TurnbotConfig
from turnbot.core.models import CompletionParams, ConversationIdentity
from turnbot.llm.protocol import CompletionProvider, HistoryProvider

logger = logging.getLogger(__name__)


class Bot:
    """Drives one turn of dialogue against the completion service.

    When no ``completion`` provider is passed, an OpenAI client is built from
    ``config.llm`` and the history provider is taken from ``config.history``.
    A missing API key then raises :class:`~turnbot.core.errors.MissingCredentialError`
    here, at construction, never from :meth:`chat`.

    Args:
        config: Full turnbot configuration.
        completion: Completion provider to use instead of the OpenAI client.
        history: History provider.  When omitted, turns carry no history if
            ``completion`` is injected, else it is built from ``config.history``.
        sleep: Sleep function used between retry attempts.
        today: Date written into the system prompt (defaults to today).
    """

    def __init__(
        self,
        config: TurnbotConfig,
        completion: CompletionProvider | None = None,
        history: HistoryProvider | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        today: datetime.date | None = None,
    ) -> None:
        self.config = config
        self._system_prompt = build_system_prompt(
            config.bot.system_message,
            config.bot.knowledge_cutoff,
            config.bot.language,
            today=today,
        )

        if completion is None:
            from turnbot.llm.openai_compat import OpenAIProvider, create_client
            from turnbot.llm.registry import create_history_provider

            client = create_client(config.llm)
            completion = OpenAIProvider(client)
            if history is None:
                history = create_history_provider(config.history, client)

        self._completion: CompletionProvider | None = completion
        self.history = history
        self._params = CompletionParams(
            model=config.llm.model or DEFAULT_MODEL,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
        )
        self._invoker = RetryingInvoker(
            completion,
            retries=config.llm.retries,
            backoff=BackoffPolicy(
                initial=config.backoff.initial_s,
                factor=config.backoff.factor,
                maximum=config.backoff.max_s,
            ),
            sleep=sleep,
        )
        self._normalizer = ResponseNormalizer(strip_prefix=config.bot.strip_prefix)
        self._debug = config.bot.debug

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def params(self) -> CompletionParams:
        return self._params

    def chat(
        self, message: str, identity: ConversationIdentity | None = None,
    ) -> tuple[str, ConversationIdentity]:
        """Run one turn.  Never raises.

        Returns:
            The cleaned reply and the handle for the next turn, or
            ``("", ConversationIdentity.empty())`` when the turn failed.
        """
        try:
            return self._chat(message, identity or ConversationIdentity.empty())
        except Exception as exc:
            logger.warning("Failed to chat: %s", exc, exc_info=True)
            return "", ConversationIdentity.empty()

    def _chat(self, message: str, identity: ConversationIdentity) -> tuple[str, ConversationIdentity]:
        if not message or self._completion is None:
            return "", ConversationIdentity.empty()

        messages = assemble_messages(self._system_prompt, message, identity, self.history)

        start = time.monotonic()
        try:
            response = self._invoker.invoke(messages, self._params)
        except Exception as exc:
            logger.info("Failed to send message to OpenAI: %s", exc)
            raise
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("openai response time: %d ms", elapsed_ms)

        if self._debug:
            payload = response.raw if response.raw is not None else response.to_dict()
            logger.info("openai response: %s", json.dumps(payload, ensure_ascii=False, default=str))

        return self._normalizer.normalize(response, identity)
