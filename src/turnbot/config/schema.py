"""Configuration schema dataclasses for turnbot."""
from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MODEL = "o3-mini"

DEFAULT_SYSTEM_MESSAGE = (
    "You are a helpful assistant. Answer precisely and concisely, and say so "
    "when you do not know the answer."
)


@dataclass
class LLMConfig:
    """Completion service connection and model parameters."""

    api_key: str | None = None
    organization: str | None = None
    base_url: str | None = None
    model: str = DEFAULT_MODEL
    temperature: float = 0.05
    max_tokens: int = 4000
    timeout_s: float = 360.0
    retries: int = 5


@dataclass
class BotConfig:
    """Turn behaviour: system prompt inputs and response handling."""

    system_message: str = DEFAULT_SYSTEM_MESSAGE
    knowledge_cutoff: str = "2021-09-01"
    language: str = "en-US"
    strip_prefix: str | None = "with "
    debug: bool = False


@dataclass
class BackoffConfig:
    """Delay between completion attempts."""

    initial_s: float = 1.0
    factor: float = 2.0
    max_s: float = 30.0


@dataclass
class HistoryConfig:
    """Where prior turn messages are looked up."""

    type: str = "openai-threads"


@dataclass
class OutputConfig:
    """Output and logging settings."""

    session_file: str = "turnbot-sessions.json"
    log_dir: str | None = None
    format: str = "text"


@dataclass
class TurnbotConfig:
    """Top-level configuration for turnbot."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    bot: BotConfig = field(default_factory=BotConfig)
    backoff: BackoffConfig = field(default_factory=BackoffConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def create_default(cls) -> TurnbotConfig:
        """Create a configuration with all default values."""
        return cls(
            llm=LLMConfig(),
            bot=BotConfig(),
            backoff=BackoffConfig(),
            history=HistoryConfig(),
            output=OutputConfig(),
        )
