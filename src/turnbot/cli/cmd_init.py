"""turnbot init command: generates config file."""
from __future__ import annotations

import argparse
from pathlib import Path

import yaml  # type: ignore[import-untyped]

from turnbot.config.defaults import DEFAULT_CONFIG_YAML, SYSTEM_MESSAGE_PRESETS


def cmd_init(args: argparse.Namespace) -> int:
    config_path = Path(args.config)

    if config_path.exists():
        print(f"Config already exists: {config_path}")
        print("Delete it first if you want to regenerate.")
        return 1

    content = DEFAULT_CONFIG_YAML

    if args.preset and args.preset in SYSTEM_MESSAGE_PRESETS:
        print(f"Using system message preset: {args.preset}")
        data = yaml.safe_load(content)
        data.setdefault("bot", {})["system_message"] = SYSTEM_MESSAGE_PRESETS[args.preset]
        content = "# turnbot configuration\n"
        content += f"# Preset: {args.preset}\n\n"
        content += yaml.dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
    elif args.preset:
        available = ", ".join(SYSTEM_MESSAGE_PRESETS)
        print(f"Unknown preset: {args.preset}")
        print(f"Available presets: {available}")
        return 1

    config_path.write_text(content, encoding="utf-8")
    print(f"Created {config_path}")
    print("Edit it to configure the model, language and system message.")
    return 0
