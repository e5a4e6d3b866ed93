"""Output formatters for turnbot results."""
from __future__ import annotations

import json
from typing import Any

from turnbot.core.models import ConversationIdentity


def format_turn(text: str, identity: ConversationIdentity) -> str:
    """Format a turn result for terminal display."""
    if not text:
        return "(no reply, see log for details)"
    lines = [text.rstrip(), ""]
    if identity.thread_id:
        lines.append(f"  thread: {identity.thread_id}")
    if identity.message_id:
        lines.append(f"  message: {identity.message_id}")
    return "\n".join(lines)


def turn_to_json(text: str, identity: ConversationIdentity) -> str:
    """Serialize a turn result to JSON."""
    return json.dumps({"text": text, "ids": identity.to_dict()}, indent=2, ensure_ascii=False)


def format_sessions(entries: list[dict[str, Any]]) -> str:
    """Format stored sessions as a markdown table."""
    if not entries:
        return "No sessions."
    lines = [
        "| Session | Turns | Thread | Updated |",
        "|---------|-------|--------|---------|",
    ]
    for e in entries:
        thread = e.get("identity", {}).get("threadId", "-")
        lines.append(f"| {e['name']} | {e.get('turns', 0)} | {thread} | {e.get('updated', '-')} |")
    return "\n".join(lines)
