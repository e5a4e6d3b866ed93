"""CLI entry point for turnbot."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from turnbot.config.loader import DEFAULT_CONFIG_PATH, load_config
from turnbot.config.schema import TurnbotConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turnbot",
        description="Single-turn conversational front-end for OpenAI-compatible chat models",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Config file path")
    parser.add_argument(
        "--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
        help="Override a config value, e.g. --set llm.model=gpt-4o (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_p = sub.add_parser("init", help="Initialize turnbot.yaml config file")
    init_p.add_argument("--preset", default=None, help="Use a built-in system message preset")

    # chat
    chat_p = sub.add_parser("chat", help="Run one turn of dialogue")
    chat_p.add_argument("message", help="User message ('-' reads stdin)")
    chat_p.add_argument("--message-id", help="Message reference from the previous turn")
    chat_p.add_argument("--thread-id", help="Thread reference from the previous turn")
    chat_p.add_argument(
        "--session",
        help=(
            "Read and store the continuation handle under this name. "
            "Locally minted thread ids carry no server-side history; "
            "pass --thread-id with an OpenAI thread id to resume one"
        ),
    )
    chat_p.add_argument("--new", action="store_true", help="Start a new conversation in --session")
    chat_p.add_argument("--format", choices=["text", "json"], default=None)

    # repl
    sub.add_parser("repl", help="Interactive conversation with in-process history")

    # prompt
    sub.add_parser("prompt", help="Print the system prompt")

    # sessions
    ses_p = sub.add_parser("sessions", help="List stored continuation handles")
    ses_p.add_argument("--reset", metavar="NAME", help="Forget a stored session")

    return parser


def parse_overrides(pairs: list[str]) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into loader overrides."""
    overrides: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid override {pair!r}, expected KEY=VALUE")
        overrides[key.strip()] = value
    return overrides


def load_cli_config(args: argparse.Namespace) -> TurnbotConfig:
    """Load config for a command; the default path may be absent, an explicit one may not."""
    path = Path(args.config)
    if not path.exists() and path == DEFAULT_CONFIG_PATH:
        yaml_path = None
    else:
        yaml_path = path
    return load_config(yaml_path, cli_overrides=parse_overrides(args.overrides))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init":
        from turnbot.cli.cmd_init import cmd_init
        return cmd_init(args)

    from turnbot.utils.log import setup_logging

    config = load_cli_config(args)
    setup_logging(verbose=args.verbose, log_dir=config.output.log_dir)

    if args.command == "chat":
        from turnbot.cli.cmd_chat import cmd_chat
        return cmd_chat(args, config)

    if args.command == "repl":
        from turnbot.cli.cmd_chat import cmd_repl
        return cmd_repl(args, config)

    if args.command == "prompt":
        from turnbot.cli.cmd_chat import cmd_prompt
        return cmd_prompt(args, config)

    if args.command == "sessions":
        from turnbot.cli.cmd_sessions import cmd_sessions
        return cmd_sessions(args, config)

    parser.print_help()
    return 1
