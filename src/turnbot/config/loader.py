"""Configuration loader for turnbot."""
from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml  # type: ignore[import-untyped]

from turnbot.config.schema import (
    BackoffConfig,
    BotConfig,
    HistoryConfig,
    LLMConfig,
    OutputConfig,
    TurnbotConfig,
)

DEFAULT_CONFIG_PATH = Path("turnbot.yaml")


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    text = path.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at top level in {path}, got {type(data).__name__}")
    return data


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


# Later entries win, so the generic OPENAI_* variables come first.
_ENV_MAPPINGS: list[tuple[str, list[str], Callable[[str], Any]]] = [
    ("OPENAI_API_KEY", ["llm", "api_key"], str),
    ("OPENAI_API_ORG", ["llm", "organization"], str),
    ("OPENAI_API_BASE_URL", ["llm", "base_url"], str),
    ("TURNBOT_LLM_API_KEY", ["llm", "api_key"], str),
    ("TURNBOT_LLM_ORGANIZATION", ["llm", "organization"], str),
    ("TURNBOT_LLM_BASE_URL", ["llm", "base_url"], str),
    ("TURNBOT_LLM_MODEL", ["llm", "model"], str),
    ("TURNBOT_LLM_TIMEOUT", ["llm", "timeout_s"], float),
    ("TURNBOT_LLM_RETRIES", ["llm", "retries"], int),
    ("TURNBOT_BOT_LANGUAGE", ["bot", "language"], str),
    ("TURNBOT_BOT_DEBUG", ["bot", "debug"], _as_bool),
    ("TURNBOT_HISTORY_TYPE", ["history", "type"], str),
]


def _set_path(raw: dict[str, Any], key_path: list[str], value: Any) -> None:
    # Navigate to the correct nested dict, creating intermediates as needed.
    d = raw
    for part in key_path[:-1]:
        if part not in d or not isinstance(d[part], dict):
            d[part] = {}
        d = d[part]
    d[key_path[-1]] = value


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay OPENAI_* and TURNBOT_* environment variables onto the raw config dict."""
    for env_var, key_path, cast in _ENV_MAPPINGS:
        value = os.environ.get(env_var)
        if not value:
            continue
        _set_path(raw, key_path, cast(value))
    return raw


def _apply_cli_overrides(raw: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Apply CLI overrides using dot-notation keys (e.g., 'llm.model')."""
    for dotted_key, value in overrides.items():
        _set_path(raw, dotted_key.split("."), value)
    return raw


def _coerce_field(value: Any, field_type_str: str) -> Any:
    """Best-effort coercion of a value to match a dataclass field type string."""
    if value is None:
        return value
    # Stringified annotations (from __future__ import annotations)
    if "bool" in field_type_str and not isinstance(value, bool):
        if isinstance(value, str):
            return _as_bool(value)
        return bool(value)
    if "int" in field_type_str and not isinstance(value, int):
        try:
            return int(value)
        except (ValueError, TypeError):
            return value
    if "float" in field_type_str and not isinstance(value, (int, float)):
        try:
            return float(value)
        except (ValueError, TypeError):
            return value
    if "str" in field_type_str and not isinstance(value, str):
        return str(value)
    return value


_T = TypeVar("_T")


_log = logging.getLogger(__name__)


def _build_with_coercion(cls: type[_T], data: dict[str, Any]) -> _T:
    """Build a dataclass from a raw dict, coercing types and warning on unknowns."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping for {cls.__name__}, got {type(data).__name__}")
    known = {f.name: f for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    filtered: dict[str, Any] = {}
    for k, v in data.items():
        if k in known:
            ft = known[k].type
            type_str = ft if isinstance(ft, str) else getattr(ft, "__name__", str(ft))
            filtered[k] = _coerce_field(v, type_str)
        else:
            _log.warning(
                "Unknown config key '%s' in %s (known: %s), ignored",
                k, cls.__name__, ", ".join(sorted(known)),
            )
    return cls(**filtered)


def _build_config(raw: dict[str, Any]) -> TurnbotConfig:
    """Build a TurnbotConfig from a raw dict."""
    sections = {"llm", "bot", "backoff", "history", "output"}
    for key in raw:
        if key not in sections:
            _log.warning("Unknown config section '%s', ignored", key)
    return TurnbotConfig(
        llm=_build_with_coercion(LLMConfig, raw.get("llm") or {}),
        bot=_build_with_coercion(BotConfig, raw.get("bot") or {}),
        backoff=_build_with_coercion(BackoffConfig, raw.get("backoff") or {}),
        history=_build_with_coercion(HistoryConfig, raw.get("history") or {}),
        output=_build_with_coercion(OutputConfig, raw.get("output") or {}),
    )


def load_config(
    yaml_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> TurnbotConfig:
    """Load configuration from YAML, environment variables, and CLI overrides.

    Priority (highest to lowest):
        1. CLI overrides (dot-notation keys, e.g., ``llm.model``)
        2. Environment variables (``TURNBOT_*``, then ``OPENAI_*``)
        3. YAML file values
        4. Dataclass defaults

    Args:
        yaml_path: Path to the YAML configuration file.  If ``None``, the
            loader attempts ``turnbot.yaml`` in the current directory; if that
            does not exist, pure defaults are used.
        cli_overrides: Optional dict of dot-notation key/value overrides from
            the command line.

    Returns:
        A fully-populated :class:`TurnbotConfig` instance.
    """
    raw: dict[str, Any] = {}

    if yaml_path is not None:
        if yaml_path.exists():
            raw = _load_yaml_file(yaml_path)
        else:
            raise FileNotFoundError(f"Config file not found: {yaml_path}")
    elif DEFAULT_CONFIG_PATH.exists():
        raw = _load_yaml_file(DEFAULT_CONFIG_PATH)

    raw = _apply_env_overrides(raw)

    if cli_overrides:
        raw = _apply_cli_overrides(raw, cli_overrides)

    return _build_config(raw)
