"""turnbot chat, repl and prompt commands."""
from __future__ import annotations

import argparse
import logging
import sys

from turnbot.bot.bot import Bot
from turnbot.bot.prompt import build_system_prompt
from turnbot.config.schema import TurnbotConfig
from turnbot.core.errors import MissingCredentialError
from turnbot.core.models import ChatMessage, ConversationIdentity, Role
from turnbot.core.session import IdentityStore
from turnbot.llm.history import InMemoryHistory
from turnbot.llm.protocol import HistoryProvider
from turnbot.reports.formatter import format_turn, turn_to_json

logger = logging.getLogger(__name__)


def _create_bot(config: TurnbotConfig, history: HistoryProvider | None = None) -> Bot | None:
    try:
        return Bot(config, history=history)
    except MissingCredentialError as exc:
        logger.critical("%s", exc)
        return None


def _resolve_identity(args: argparse.Namespace, store: IdentityStore | None) -> ConversationIdentity:
    identity = ConversationIdentity.empty()
    if store is not None and not args.new:
        identity = store.get(args.session)
    if args.message_id or args.thread_id:
        identity = ConversationIdentity(
            message_id=args.message_id or identity.message_id,
            thread_id=args.thread_id or identity.thread_id,
        )
    return identity


def cmd_chat(args: argparse.Namespace, config: TurnbotConfig) -> int:
    message = sys.stdin.read() if args.message == "-" else args.message

    bot = _create_bot(config)
    if bot is None:
        return 1

    store = IdentityStore(config.output.session_file) if args.session else None
    if store is not None and args.new:
        store.reset(args.session)
    identity = _resolve_identity(args, store)

    text, next_identity = bot.chat(message, identity)

    if store is not None:
        store.record_turn(args.session, next_identity)

    fmt = args.format or config.output.format
    if fmt == "json":
        print(turn_to_json(text, next_identity))
    else:
        print(format_turn(text, next_identity))
    return 0 if text else 1


def cmd_repl(args: argparse.Namespace, config: TurnbotConfig) -> int:
    history = InMemoryHistory()
    bot = _create_bot(config, history=history)
    if bot is None:
        return 1

    identity = ConversationIdentity.empty()
    print("Empty line or Ctrl-D to quit, /new to start over.")
    while True:
        try:
            message = input("> ")
        except EOFError:
            print()
            break
        if not message.strip():
            break
        if message.strip() == "/new":
            identity = ConversationIdentity.empty()
            continue

        text, next_identity = bot.chat(message, identity)
        if not text:
            print("(no reply, see log for details)")
            continue

        assert next_identity.thread_id is not None and next_identity.message_id is not None
        history.append(
            next_identity.thread_id,
            ChatMessage(id=f"user_{next_identity.message_id}", content=message, role=Role.USER),
            ChatMessage(id=next_identity.message_id, content=text, role=Role.ASSISTANT),
        )
        identity = next_identity
        print(text)
    return 0


def cmd_prompt(args: argparse.Namespace, config: TurnbotConfig) -> int:
    print(build_system_prompt(
        config.bot.system_message,
        config.bot.knowledge_cutoff,
        config.bot.language,
    ))
    return 0
