"""Identifier generation for continuation handles."""
from __future__ import annotations

import itertools
import threading
import time
import uuid


class IdGenerator:
    """Mints message and thread references.

    Message ids combine a nanosecond timestamp with a per-generator sequence
    number, so two ids from one generator never collide even when minted
    within the same clock tick.
    """

    def __init__(self) -> None:
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def message_id(self, role: str) -> str:
        with self._lock:
            seq = next(self._seq)
        return f"{role}_{time.time_ns()}_{seq}"

    def thread_id(self) -> str:
        return f"thread_{uuid.uuid4().hex}"
