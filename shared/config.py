"""Environment-driven configuration for the help catalog bot."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

__all__ = [
    "DEFAULT_BOT_NAME",
    "DEFAULT_SUGGEST_IGNORE_CHANNELS",
    "HelpSettings",
    "get_discord_token",
    "get_port",
    "load_help_settings",
]

log = logging.getLogger("c1c.config")

DEFAULT_BOT_NAME = "helpbot"
DEFAULT_SUGGEST_IGNORE_CHANNELS = "general"
DEFAULT_PORT = 10000


@dataclass(frozen=True)
class HelpSettings:
    """Resolved help configuration derived from environment variables."""

    bot_name: str
    bot_alias: str
    command_prefix: str
    reply_in_private: bool
    disable_http: bool
    hidden_commands: tuple[str, ...]
    suggest_ignore_channels: tuple[str, ...]
    admin_role_ids: frozenset[int]
    port: int
    log_level: str

    @property
    def display_name(self) -> str:
        return self.bot_alias or self.bot_name

    def describe(self) -> dict[str, object]:
        """Return a serializable summary for logging."""

        return {
            "bot_name": self.bot_name,
            "bot_alias": self.bot_alias,
            "prefix": self.command_prefix,
            "reply_in_private": self.reply_in_private,
            "http": not self.disable_http,
            "hidden_commands": list(self.hidden_commands),
            "suggest_ignore_channels": list(self.suggest_ignore_channels),
            "admin_roles": len(self.admin_role_ids),
            "port": self.port,
        }


def load_help_settings() -> HelpSettings:
    """Load help settings from the current process environment."""

    bot_name = (os.getenv("BOT_NAME") or "").strip() or DEFAULT_BOT_NAME
    command_prefix = (os.getenv("COMMAND_PREFIX") or "").strip() or "!"
    # Documented invocations read "!ping" unless an explicit alias is set.
    bot_alias = (os.getenv("BOT_ALIAS") or "").strip() or command_prefix

    return HelpSettings(
        bot_name=bot_name,
        bot_alias=bot_alias,
        command_prefix=command_prefix,
        reply_in_private=_coerce_bool(os.getenv("HELP_REPLY_IN_PRIVATE"), default=False),
        disable_http=_coerce_bool(os.getenv("HELP_DISABLE_HTTP"), default=False),
        hidden_commands=_parse_list(os.getenv("HELP_HIDDEN_COMMANDS", "")),
        suggest_ignore_channels=_parse_list(
            os.getenv("HELP_SUGGEST_IGNORE_CHANNELS", DEFAULT_SUGGEST_IGNORE_CHANNELS),
            lower=True,
        ),
        admin_role_ids=frozenset(_parse_ids(os.getenv("ADMIN_ROLE_IDS", ""))),
        port=get_port(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )


def get_discord_token() -> str:
    value = os.getenv("DISCORD_TOKEN")
    if value is None or not value.strip():
        raise RuntimeError("Missing required environment variable: DISCORD_TOKEN")
    return value.strip()


def get_port(env_var: str = "PORT", fallback: int = DEFAULT_PORT) -> int:
    """Read PORT (Render/Heroku style), falling back on bad values."""

    raw: Optional[str] = os.getenv(env_var)
    if not raw:
        return fallback
    try:
        return int(raw)
    except ValueError:
        log.warning("invalid port value", extra={"env_var": env_var, "value": raw})
        return fallback


def _coerce_bool(raw: str | None, *, default: bool) -> bool:
    if raw is None:
        return default
    text = raw.strip().lower()
    if not text:
        return default
    return text in {"1", "true", "t", "yes", "y", "on"}


def _parse_list(raw: str, *, lower: bool = False) -> tuple[str, ...]:
    items: list[str] = []
    seen: set[str] = set()
    for chunk in raw.split(","):
        cleaned = " ".join(chunk.split())
        if lower:
            cleaned = cleaned.lower()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        items.append(cleaned)
    return tuple(items)


def _parse_ids(raw: str) -> set[int]:
    ids: set[int] = set()
    for chunk in _parse_list(raw):
        try:
            ids.add(int(chunk))
        except ValueError:
            log.warning("ignoring non-numeric role id", extra={"value": chunk})
    return ids
