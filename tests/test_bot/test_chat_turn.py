"""Tests for the single-turn orchestrator."""
from __future__ import annotations

import datetime
import logging
import threading
from typing import Sequence

import pytest

from turnbot.bot.bot import Bot
from turnbot.config.schema import TurnbotConfig
from turnbot.core.errors import MissingCredentialError
from turnbot.core.models import ChatMessage, CompletionParams, ConversationIdentity, Role

EMPTY = ConversationIdentity.empty()


def _bot(config: TurnbotConfig, completion: object, sleeps: list[float], history: object = None,
         fixed_date: datetime.date | None = None) -> Bot:
    return Bot(config, completion=completion, history=history, sleep=sleeps.append, today=fixed_date)  # type: ignore[arg-type]


def test_missing_credential_is_fatal_at_construction(config: TurnbotConfig) -> None:
    config.llm.api_key = None
    with pytest.raises(MissingCredentialError):
        Bot(config)


def test_builds_openai_provider_from_config(config: TurnbotConfig) -> None:
    bot = Bot(config)
    assert bot.params.model == "o3-mini"
    assert bot.history is not None


def test_system_prompt_built_once(
    config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float], fixed_date: datetime.date,
) -> None:
    config.bot.language = "pt-BR"
    provider = fake_completion_cls(["one", "two"])
    bot = _bot(config, provider, sleeps, fixed_date=fixed_date)

    bot.chat("first", EMPTY)
    bot.chat("second", EMPTY)

    prompts = [messages[0].content for messages, _ in provider.calls]
    assert prompts[0] == prompts[1] == bot.system_prompt
    assert "Current date: 2024-05-17" in bot.system_prompt
    assert "ISO code: pt-BR" in bot.system_prompt


def test_successful_turn(config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float]) -> None:
    provider = fake_completion_cls(["with hello"])
    bot = _bot(config, provider, sleeps)

    text, ident = bot.chat("hi", EMPTY)

    assert text == "hello"
    assert ident.thread_id
    assert ident.message_id and ident.message_id.startswith("assistant_")
    messages, params = provider.calls[0]
    assert [m.role for m in messages] == [Role.SYSTEM, Role.USER]
    assert params == CompletionParams(model="o3-mini", temperature=0.05, max_tokens=4000)


def test_blank_model_falls_back(config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float]) -> None:
    config.llm.model = ""
    assert _bot(config, fake_completion_cls(), sleeps).params.model == "o3-mini"


@pytest.mark.parametrize("identity", [
    EMPTY,
    ConversationIdentity(message_id="m", thread_id="t"),
    None,
])
def test_empty_message_short_circuits(
    config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float],
    identity: ConversationIdentity | None,
) -> None:
    provider = fake_completion_cls()
    bot = _bot(config, provider, sleeps)

    assert bot.chat("", identity) == ("", EMPTY)
    assert provider.call_count == 0


def test_permanent_failure_uses_whole_budget(
    config: TurnbotConfig, failing_completion_cls: type, sleeps: list[float],
    caplog: pytest.LogCaptureFixture,
) -> None:
    config.llm.retries = 3
    provider = failing_completion_cls()
    bot = _bot(config, provider, sleeps)

    with caplog.at_level(logging.WARNING):
        result = bot.chat("hi", ConversationIdentity(message_id="m", thread_id="t"))

    assert result == ("", EMPTY)
    assert provider.call_count == 4
    assert len(sleeps) == 3
    assert "Failed to chat: service unavailable" in caplog.text
    assert "Traceback" in caplog.text


def test_history_failure_still_answers(
    config: TurnbotConfig, fake_completion_cls: type, fake_history_cls: type, sleeps: list[float],
) -> None:
    provider = fake_completion_cls(["answer"])
    bot = _bot(config, provider, sleeps, history=fake_history_cls({}))

    text, ident = bot.chat("hi", ConversationIdentity(message_id="m", thread_id="thread_gone"))

    assert text == "answer"
    assert ident.thread_id == "thread_gone"
    assert ident.message_id
    messages, _ = provider.calls[0]
    assert len(messages) == 2


def test_history_is_reattached(
    config: TurnbotConfig, fake_completion_cls: type, fake_history_cls: type, sleeps: list[float],
) -> None:
    prior = [
        ChatMessage(id="p1", content="earlier", role=Role.USER),
        ChatMessage(id="p2", content="reply", role=Role.ASSISTANT),
    ]
    provider = fake_completion_cls(["next"])
    bot = _bot(config, provider, sleeps, history=fake_history_cls({"t": prior}))

    bot.chat("follow-up", ConversationIdentity(message_id="m", thread_id="t"))

    messages, _ = provider.calls[0]
    assert [m.content for m in messages][1:] == ["earlier", "reply", "follow-up"]


def test_never_raises_on_garbage_identity(
    config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float],
) -> None:
    bot = _bot(config, fake_completion_cls(), sleeps)
    assert bot.chat("hi", "not-an-identity") == ("", EMPTY)  # type: ignore[arg-type]


def test_timing_and_debug_logs(
    config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float],
    caplog: pytest.LogCaptureFixture,
) -> None:
    config.bot.debug = True
    bot = _bot(config, fake_completion_cls(["raw reply"]), sleeps)

    with caplog.at_level(logging.INFO):
        bot.chat("hi", EMPTY)

    assert "openai response time:" in caplog.text
    assert 'openai response: {"id": "chatcmpl-0", "role": "assistant", "content": "raw reply"}' in caplog.text


def test_no_debug_log_by_default(
    config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float],
    caplog: pytest.LogCaptureFixture,
) -> None:
    bot = _bot(config, fake_completion_cls(["raw reply"]), sleeps)
    with caplog.at_level(logging.INFO):
        bot.chat("hi", EMPTY)
    assert "openai response:" not in caplog.text


def test_concurrent_turns_are_independent(config: TurnbotConfig, sleeps: list[float]) -> None:
    class ByMessage:
        """Fails for messages starting with 'fail', echoes the rest."""

        def complete(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
            text = messages[-1].content
            if text.startswith("fail"):
                raise RuntimeError(text)
            return ChatMessage(id=text, content=f"re: {text}", role=Role.ASSISTANT)

    config.llm.retries = 1
    bot = _bot(config, ByMessage(), sleeps)
    results: dict[str, tuple[str, ConversationIdentity]] = {}
    lock = threading.Lock()

    def turn(msg: str, thread: str) -> None:
        out = bot.chat(msg, ConversationIdentity(thread_id=thread))
        with lock:
            results[msg] = out

    workers = [
        threading.Thread(target=turn, args=(f"{kind}-{i}", f"thread_{kind}_{i}"))
        for i in range(10) for kind in ("ok", "fail")
    ]
    for w in workers:
        w.start()
    for w in workers:
        w.join()

    for i in range(10):
        text, ident = results[f"ok-{i}"]
        assert text == f"re: ok-{i}"
        assert ident.thread_id == f"thread_ok_{i}"
        assert results[f"fail-{i}"] == ("", EMPTY)


def test_send_failure_is_logged_before_soft_fail(
    config: TurnbotConfig, failing_completion_cls: type, sleeps: list[float],
    caplog: pytest.LogCaptureFixture,
) -> None:
    config.llm.retries = 0
    bot = _bot(config, failing_completion_cls(), sleeps)

    with caplog.at_level(logging.INFO, logger="turnbot.bot.bot"):
        assert bot.chat("hi", EMPTY) == ("", EMPTY)

    sent = [r for r in caplog.records if r.getMessage().startswith("Failed to send message to OpenAI")]
    assert len(sent) == 1
    assert sent[0].levelno == logging.INFO
    assert sent[0].getMessage() == "Failed to send message to OpenAI: service unavailable"
    assert "openai response time:" not in caplog.text


def test_debug_log_shows_provider_payload(
    config: TurnbotConfig, sleeps: list[float], caplog: pytest.LogCaptureFixture,
) -> None:
    class Refusing:
        def complete(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
            raw = {"role": "assistant", "content": None, "refusal": "I can't help with that."}
            return ChatMessage(id="chatcmpl-9", content=None, role=Role.ASSISTANT, raw=raw)  # type: ignore[arg-type]

    config.bot.debug = True
    bot = _bot(config, Refusing(), sleeps)

    with caplog.at_level(logging.INFO):
        text, _ = bot.chat("hi", EMPTY)

    assert text == ""
    assert '"refusal": "I can\'t help with that."' in caplog.text


def test_debug_flag_is_read_at_construction(
    config: TurnbotConfig, fake_completion_cls: type, sleeps: list[float],
    caplog: pytest.LogCaptureFixture,
) -> None:
    bot = _bot(config, fake_completion_cls(["quiet", "still quiet"]), sleeps)
    config.bot.debug = True

    with caplog.at_level(logging.INFO):
        bot.chat("hi", EMPTY)
    assert "openai response:" not in caplog.text
