"""JSON-backed store for caller-held conversation identities."""
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from turnbot.core.models import ConversationIdentity


class IdentityStore:
    """Keeps the last continuation handle of each named session in a JSON file.

    Only the handle is stored; message history itself stays with the history
    provider.
    """

    def __init__(self, path: str | Path = "turnbot-sessions.json") -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = {"sessions": {}}
        if self.path.exists():
            self.load()

    def load(self) -> None:
        try:
            self._data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            self._data = {"sessions": {}}
        self._data.setdefault("sessions", {})

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, name: str) -> ConversationIdentity:
        entry = self._data["sessions"].get(name)
        if entry is None:
            return ConversationIdentity.empty()
        return ConversationIdentity.from_dict(entry.get("identity"))

    def record_turn(self, name: str, identity: ConversationIdentity) -> None:
        """Store the identity returned by a turn.

        An empty identity (failed turn) leaves the stored handle untouched so
        the conversation can be resumed on the next attempt.
        """
        if identity.is_empty:
            return
        previous = self._data["sessions"].get(name, {})
        self._data["sessions"][name] = {
            "identity": identity.to_dict(),
            "turns": int(previous.get("turns", 0)) + 1,
            "updated": time.strftime("%Y-%m-%dT%H:%M:%S"),
        }
        self.save()

    def reset(self, name: str) -> bool:
        """Forget a session. Returns True if it existed."""
        if name not in self._data["sessions"]:
            return False
        del self._data["sessions"][name]
        self.save()
        return True

    def list_sessions(self) -> list[dict[str, Any]]:
        return [
            {"name": name, **entry}
            for name, entry in sorted(self._data["sessions"].items())
        ]
