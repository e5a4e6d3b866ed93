"""System prompt construction."""
from __future__ import annotations

import datetime
import string
from pathlib import Path

PROMPTS_DIR = Path(__file__).parent / "prompts"
SYSTEM_TEMPLATE = "system.md"


def build_system_prompt(
    system_message: str,
    knowledge_cutoff: str,
    language: str,
    today: datetime.date | None = None,
) -> str:
    """Compose the system instruction used for every turn of one bot.

    The result holds, in order: the base instruction, the knowledge cutoff,
    the current date (ISO, day precision) and the reply-language directive.
    Placeholders are filled with ``safe_substitute``, so a ``$`` inside the
    configured message is kept as typed.
    """
    current_date = (today or datetime.date.today()).isoformat()
    template = string.Template((PROMPTS_DIR / SYSTEM_TEMPLATE).read_text(encoding="utf-8"))
    return template.safe_substitute(
        system_message=system_message.strip(),
        knowledge_cutoff=knowledge_cutoff,
        current_date=current_date,
        language=language,
    )
