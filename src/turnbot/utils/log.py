"""Logging setup for the command line entry point."""
from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def setup_logging(verbose: bool = False, log_dir: str | Path | None = None) -> None:
    """Configure the root logger: stderr always, plus ``turnbot.log`` when ``log_dir`` is set."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path / "turnbot.log", encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    # The SDK's transport logs every request at DEBUG/INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
