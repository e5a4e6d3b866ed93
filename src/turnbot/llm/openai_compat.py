"""OpenAI-compatible completion provider."""
from __future__ import annotations

from typing import Any, Sequence

import openai

from turnbot.config.schema import DEFAULT_MODEL, LLMConfig
from turnbot.core.errors import InvalidResponseError, MissingCredentialError
from turnbot.core.models import ChatMessage, CompletionParams, Role

# Reasoning models reject ``temperature`` and take ``max_completion_tokens``.
_REASONING_MODEL_PREFIXES = ("o1", "o3", "o4")


def create_client(config: LLMConfig) -> openai.OpenAI:
    """Build the SDK client for the configured endpoint.

    The SDK's own retries are disabled; attempts are governed by
    :class:`turnbot.bot.retry.RetryingInvoker`.

    Raises:
        MissingCredentialError: If no API key is configured.
    """
    if not config.api_key:
        raise MissingCredentialError(
            "Unable to initialize the OpenAI API: no API key configured "
            "(set llm.api_key, TURNBOT_LLM_API_KEY or OPENAI_API_KEY)"
        )
    return openai.OpenAI(
        api_key=config.api_key,
        organization=config.organization or None,
        base_url=config.base_url or None,
        timeout=config.timeout_s,
        max_retries=0,
    )


class OpenAIProvider:
    """Completion provider backed by any OpenAI-compatible API.

    Works with the official OpenAI API as well as any third-party endpoint
    that implements the same ``/v1/chat/completions`` interface (vLLM, Ollama,
    LM Studio, Together, etc.).

    Implements :class:`turnbot.llm.protocol.CompletionProvider`.

    Args:
        client: A configured :class:`openai.OpenAI` client.
    """

    def __init__(self, client: openai.OpenAI) -> None:
        self._client = client

    def complete(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
        """Send messages via the chat completions API and return the reply."""
        api_messages: list[dict[str, str]] = [
            {"role": m.role.value, "content": m.content} for m in messages
        ]
        model = params.model or DEFAULT_MODEL

        create_kwargs: dict[str, Any] = {
            "model": model,
            "messages": api_messages,
            "stream": params.stream,
        }
        if model.startswith(_REASONING_MODEL_PREFIXES):
            create_kwargs["max_completion_tokens"] = params.max_tokens
        else:
            create_kwargs["max_tokens"] = params.max_tokens
            create_kwargs["temperature"] = params.temperature

        completion = self._client.chat.completions.create(**create_kwargs)

        if not completion.choices:
            raise InvalidResponseError(f"Completion {completion.id} returned no choices")
        message = completion.choices[0].message
        return ChatMessage(
            id=completion.id,
            content=message.content or "",
            role=Role(message.role),
            raw=message.model_dump(),
        )
