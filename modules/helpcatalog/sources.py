"""Collect and prepare catalog lines contributed by loaded cogs.

Each cog documents its commands in the docstring of the module that defines
it, below a ``Commands:`` header::

    Commands:
      hubot ping - Reply with pong.
      begin admin
      hubot reload - Reload every extension.
      end admin

The ``hubot`` placeholder is replaced with the bot's display name when the
catalog is prepared for a request.
"""

from __future__ import annotations

import re
import sys
from typing import Iterable, List, Optional, Sequence

from .markers import LineKind, classify_line
from .matcher import is_probable_match
from .render import PLACEHOLDER_TOKEN, substitute_bot_name

__all__ = [
    "collect_catalog",
    "hidden_commands_pattern",
    "parse_documentation",
    "prepare_catalog",
    "suggest_commands",
    "suggestion_name",
]

_COMMANDS_HEADER = re.compile(r"^commands:\s*$", re.IGNORECASE)
_ANY_HEADER = re.compile(r"^[A-Za-z][\w ]*:\s*$")
_ARGUMENT = re.compile(r"<[^>]*>")
_MENTION = re.compile(r"@\S*")


def parse_documentation(text: Optional[str]) -> List[str]:
    """Return the command lines listed under ``Commands:`` in ``text``.

    The block ends at the first blank line or at the next unindented header.
    """

    if not text:
        return []
    lines: List[str] = []
    collecting = False
    for raw in text.splitlines():
        stripped = raw.strip()
        if _COMMANDS_HEADER.match(stripped):
            collecting = True
            continue
        if not collecting:
            continue
        if not stripped:
            if lines:
                break
            continue
        if _ANY_HEADER.match(stripped) and not raw[:1].isspace():
            break
        lines.append(stripped)
    return lines


def collect_catalog(bot) -> List[str]:
    """Concatenate the documented commands of every loaded cog, in load order."""

    catalog: List[str] = []
    seen: set[str] = set()
    for cog in list(getattr(bot, "cogs", {}).values()):
        module_name = type(cog).__module__
        if module_name in seen:
            continue
        seen.add(module_name)
        module = sys.modules.get(module_name)
        catalog.extend(parse_documentation(getattr(module, "__doc__", None)))
    return catalog


def hidden_commands_pattern(hidden: Iterable[str]) -> Optional[re.Pattern[str]]:
    names = [re.escape(name.strip()) for name in hidden if name and name.strip()]
    if not names:
        return None
    return re.compile(rf"^{PLACEHOLDER_TOKEN} (?:{'|'.join(names)}) - ")


def prepare_catalog(
    raw_catalog: Sequence[str], *, bot_name: str, hidden: Iterable[str] = ()
) -> List[str]:
    """Drop hidden commands and substitute the display name into each line."""

    pattern = hidden_commands_pattern(hidden)
    lines = [line for line in raw_catalog if pattern is None or not pattern.search(line)]
    return [substitute_bot_name(line, bot_name) for line in lines]


def _invocation(line: str) -> str:
    return line.split(" - ", 1)[0].strip()


def suggestion_name(line: str, bot_name: str) -> str:
    """Normalized command name of a catalog line, as typed after the prefix."""

    text = _invocation(line)
    if bot_name and text.lower().startswith(bot_name.lower()):
        text = text[len(bot_name) :]
    text = _ARGUMENT.sub(" ", text)
    text = _MENTION.sub(" ", text)
    text = text.replace("*", "")
    return " ".join(text.split())


def suggest_commands(utterance: str, lines: Sequence[str], bot_name: str) -> List[str]:
    """Invocations from ``lines`` that ``utterance`` probably meant, in catalog order."""

    suggestions: List[str] = []
    for line in lines:
        if _is_marker(line):
            continue
        name = suggestion_name(line, bot_name)
        if not name or not is_probable_match(utterance, name):
            continue
        invocation = _invocation(line)
        if invocation not in suggestions:
            suggestions.append(invocation)
    return suggestions


def _is_marker(line: str) -> bool:
    return any(
        classify_line(line, keyword)[0] is not LineKind.PLAIN for keyword in ("group", "admin")
    )
