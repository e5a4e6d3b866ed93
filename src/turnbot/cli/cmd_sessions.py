"""turnbot sessions command: list or forget stored continuation handles."""
from __future__ import annotations

import argparse

from turnbot.config.schema import TurnbotConfig
from turnbot.core.session import IdentityStore
from turnbot.reports.formatter import format_sessions


def cmd_sessions(args: argparse.Namespace, config: TurnbotConfig) -> int:
    store = IdentityStore(config.output.session_file)

    if args.reset:
        if store.reset(args.reset):
            print(f"Forgot session: {args.reset}")
            return 0
        print(f"No such session: {args.reset}")
        return 1

    print(format_sessions(store.list_sessions()))
    return 0
