"""Default configuration templates for turnbot."""
from __future__ import annotations

DEFAULT_CONFIG_YAML: str = """\
# turnbot configuration

llm:
  # api_key: null  # Set via TURNBOT_LLM_API_KEY or OPENAI_API_KEY env var
  # organization: null  # Set via OPENAI_API_ORG env var
  # base_url: null  # Set via TURNBOT_LLM_BASE_URL env var
  model: "o3-mini"
  temperature: 0.05
  max_tokens: 4000
  timeout_s: 360
  retries: 5

bot:
  system_message: "You are a helpful assistant. Answer precisely and concisely, and say so when you do not know the answer."
  knowledge_cutoff: "2021-09-01"
  language: "en-US"
  strip_prefix: "with "
  debug: false

backoff:
  initial_s: 1.0
  factor: 2.0
  max_s: 30.0

history:
  # openai-threads only resolves thread ids issued by the OpenAI threads API.
  # Ids minted by turnbot (thread_<hex>) are not, so resumed `chat --session`
  # turns go out without history unless --thread-id names a real OpenAI thread.
  # `repl` keeps its own in-process history regardless of this setting.
  type: "openai-threads"  # openai-threads | memory | none

output:
  session_file: "turnbot-sessions.json"
  # log_dir: null
  format: "text"
"""

SYSTEM_MESSAGE_PRESETS: dict[str, str] = {
    "assistant": (
        "You are a helpful assistant. Answer precisely and concisely, and say so "
        "when you do not know the answer."
    ),
    "code-reviewer": (
        "You are a highly experienced software engineer acting as a code "
        "reviewer. Focus on correctness, security, performance and "
        "maintainability. Point at specific lines, explain the problem, and "
        "suggest a concrete fix. Do not comment on formatting that an "
        "automated formatter would handle."
    ),
    "summarizer": (
        "You summarize technical discussions. Keep the key decisions, open "
        "questions and action items; drop pleasantries and repetition."
    ),
}
