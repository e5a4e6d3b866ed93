"""Shared fixtures for turnbot tests."""
from __future__ import annotations

import datetime
import threading
from pathlib import Path
from typing import Sequence

import pytest

from turnbot.config.schema import TurnbotConfig
from turnbot.core.models import ChatMessage, CompletionParams, HistoryResult, Role

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FIXED_DATE = datetime.date(2024, 5, 17)


class FakeCompletion:
    """Completion provider returning canned replies in order.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, replies: Sequence[str | Exception] = ("Mock reply",)) -> None:
        self._replies = list(replies)
        self.calls: list[tuple[list[ChatMessage], CompletionParams]] = []
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def complete(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
        with self._lock:
            idx = min(len(self.calls), len(self._replies) - 1)
            self.calls.append((list(messages), params))
        reply = self._replies[idx]
        if isinstance(reply, Exception):
            raise reply
        return ChatMessage(id=f"chatcmpl-{idx}", content=reply, role=Role.ASSISTANT)


class FailingCompletion:
    """Completion provider that always raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or ConnectionError("service unavailable")
        self.call_count = 0

    def complete(self, messages: Sequence[ChatMessage], params: CompletionParams) -> ChatMessage:
        self.call_count += 1
        raise self.error


class FakeHistory:
    """History provider backed by a dict; unknown threads fail."""

    def __init__(self, threads: dict[str, list[ChatMessage]] | None = None) -> None:
        self.threads = threads or {}
        self.requested: list[str] = []

    def list(self, thread_id: str) -> HistoryResult:
        self.requested.append(thread_id)
        if thread_id not in self.threads:
            return HistoryResult.failure(KeyError(thread_id))
        return HistoryResult.success(self.threads[thread_id])


class RaisingHistory:
    """History provider that raises instead of returning a failed result."""

    def list(self, thread_id: str) -> HistoryResult:
        raise RuntimeError("history backend down")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def config() -> TurnbotConfig:
    cfg = TurnbotConfig.create_default()
    cfg.llm.api_key = "sk-test-key"
    cfg.llm.retries = 2
    return cfg


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_completion_cls() -> type[FakeCompletion]:
    return FakeCompletion


@pytest.fixture
def failing_completion_cls() -> type[FailingCompletion]:
    return FailingCompletion


@pytest.fixture
def fake_history_cls() -> type[FakeHistory]:
    return FakeHistory


@pytest.fixture
def raising_history() -> RaisingHistory:
    return RaisingHistory()


@pytest.fixture
def fixed_date() -> datetime.date:
    return FIXED_DATE
