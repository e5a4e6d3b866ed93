"""Bounded retry around completion calls."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from turnbot.core.errors import InvalidResponseError
from turnbot.core.models import ChatMessage, CompletionParams, Role
from turnbot.llm.protocol import CompletionProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential delay, capped at ``maximum`` seconds."""

    initial: float = 1.0
    factor: float = 2.0
    maximum: float = 30.0

    def delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        base = max(self.initial, 0.0)
        grown = base * max(self.factor, 1.0) ** (attempt - 1)
        return min(grown, max(self.maximum, 0.0))


class RetryingInvoker:
    """Calls a completion provider up to ``retries + 1`` times.

    Every exception counts as a failed attempt.  Attempts run one after the
    other; the last failure is re-raised once the budget is spent.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        retries: int,
        backoff: BackoffPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.retries = max(retries, 0)
        self.backoff = backoff or BackoffPolicy()
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def invoke(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._attempt(messages, params)
            except Exception as exc:
                remaining = self.max_attempts - attempt
                logger.info(
                    "Attempt failed: %s. %d of %d attempts made, %d remaining.",
                    exc, attempt, self.max_attempts, remaining,
                )
                if remaining == 0:
                    raise
                self._sleep(self.backoff.delay(attempt))
        raise AssertionError("unreachable")

    def _attempt(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
        response = self.provider.complete(messages, params)
        if not isinstance(response, ChatMessage) or response.role is not Role.ASSISTANT:
            raise InvalidResponseError(f"Expected one assistant message, got {response!r}")
        return response
