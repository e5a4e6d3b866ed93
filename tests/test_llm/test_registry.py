"""Tests for history provider construction."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from turnbot.config.schema import HistoryConfig
from turnbot.llm.history import InMemoryHistory, OpenAIThreadHistory
from turnbot.llm.registry import create_history_provider


def test_openai_threads_needs_client() -> None:
    assert create_history_provider(HistoryConfig(type="openai-threads"), None) is None
    provider = create_history_provider(HistoryConfig(type="openai_threads"), SimpleNamespace())  # type: ignore[arg-type]
    assert isinstance(provider, OpenAIThreadHistory)


def test_memory_and_none() -> None:
    assert isinstance(create_history_provider(HistoryConfig(type="memory"), None), InMemoryHistory)
    assert create_history_provider(HistoryConfig(type="none"), None) is None


def test_unknown_type() -> None:
    with pytest.raises(ValueError, match="Unknown history type"):
        create_history_provider(HistoryConfig(type="redis"), None)
