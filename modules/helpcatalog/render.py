"""Presentation forms for the grouped help catalog."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

import discord

from .assembler import iter_groups

__all__ = [
    "HELP_COLOR",
    "RichUnit",
    "batch_embeds",
    "build_help_embeds",
    "build_rich_units",
    "chunk_lines",
    "emphasize_invocation",
    "render_html_commands",
    "render_help_page",
    "render_markdown_catalog",
    "substitute_bot_name",
]

HELP_COLOR = "#459d87"
PLACEHOLDER_TOKEN = "hubot"
EMBED_DESCRIPTION_LIMIT = 4096
MESSAGE_EMBED_CHAR_LIMIT = 6000
EMBEDS_PER_MESSAGE = 10

_MARKER_PREFIX = re.compile(r"^(begin|end)", re.IGNORECASE)
_PLACEHOLDER = re.compile(rf"^{PLACEHOLDER_TOKEN}", re.IGNORECASE)
_PLACEHOLDER_WITH_SPACE = re.compile(rf"^{PLACEHOLDER_TOKEN}\s*", re.IGNORECASE)

_HELP_PAGE = """\
<!DOCTYPE html>
<html>
  <head>
  <meta charset="utf-8">
  <title>{name} Help</title>
  <style type="text/css">
    body {{
      background: #d3d6d9;
      color: #636c75;
      text-shadow: 0 1px 1px rgba(255, 255, 255, .5);
      font-family: Helvetica, Arial, sans-serif;
    }}
    h1 {{
      margin: 8px 0;
      padding: 0;
    }}
    .commands {{
      font-size: 13px;
    }}
    p {{
      border-bottom: 1px solid #eee;
      margin: 6px 0 0 0;
      padding-bottom: 5px;
    }}
    p:last-child {{
      border: 0;
    }}
  </style>
  </head>
  <body>
    <h1>{name} Help</h1>
    <div class="commands">
      {commands}
    </div>
  </body>
</html>"""


@dataclass(frozen=True)
class RichUnit:
    """One collapsible attachment in the chat help reply."""

    title: str
    text: str
    color: str = HELP_COLOR
    collapsed: bool = True


def substitute_bot_name(line: str, bot_name: str) -> str:
    """Replace the leading ``hubot`` placeholder with the display name."""

    if len(bot_name) == 1:
        return _PLACEHOLDER_WITH_SPACE.sub(bot_name, line, count=1)
    return _PLACEHOLDER.sub(bot_name, line, count=1)


def emphasize_invocation(line: str) -> str:
    """Bold the invocation part of ``line`` (everything before the first ``" - "``)."""

    if _MARKER_PREFIX.match(line):
        return line
    invocation, sep, description = line.partition(" - ")
    if not sep:
        return f"**{line}**"
    return f"**{invocation}** - {description}"


def build_rich_units(grouped: Mapping[str, Sequence[str]]) -> List[RichUnit]:
    return [RichUnit(title=name, text="\n".join(lines)) for name, lines in iter_groups(grouped)]


def chunk_lines(lines: Sequence[str], *, limit: int) -> List[str]:
    """Join ``lines`` into newline-separated chunks no longer than ``limit``."""

    chunks: List[str] = []
    current: List[str] = []
    current_len = 0

    def flush() -> None:
        nonlocal current, current_len
        if current:
            chunks.append("\n".join(current))
            current = []
            current_len = 0

    for line in lines:
        text = line.strip("\n")
        projected = current_len + (1 if current else 0) + len(text)
        if projected > limit and current:
            flush()
        if len(text) > limit:
            for start in range(0, len(text), limit):
                chunks.append(text[start : start + limit])
            continue
        current_len = current_len + (1 if current else 0) + len(text)
        current.append(text)

    flush()
    return chunks


def build_help_embeds(
    units: Sequence[RichUnit], *, limit: int = EMBED_DESCRIPTION_LIMIT
) -> List[discord.Embed]:
    """Convert rich units into Discord embeds, splitting long bodies."""

    embeds: List[discord.Embed] = []
    for unit in units:
        colour = discord.Colour(int(unit.color.lstrip("#"), 16))
        chunks = chunk_lines(unit.text.split("\n"), limit=limit) or [""]
        for index, chunk in enumerate(chunks):
            title = unit.title if index == 0 else f"{unit.title} (cont.)"
            embeds.append(discord.Embed(title=title, description=chunk, colour=colour))
    return embeds


def batch_embeds(
    embeds: Sequence[discord.Embed],
    *,
    max_count: int = EMBEDS_PER_MESSAGE,
    max_chars: int = MESSAGE_EMBED_CHAR_LIMIT,
) -> List[List[discord.Embed]]:
    """Group embeds into per-message batches Discord will accept.

    A batch holds at most ``max_count`` embeds whose combined ``len(embed)``
    stays within ``max_chars``. An embed is never split across batches.
    """

    batches: List[List[discord.Embed]] = []
    current: List[discord.Embed] = []
    current_chars = 0
    for embed in embeds:
        size = len(embed)
        if current and (len(current) >= max_count or current_chars + size > max_chars):
            batches.append(current)
            current, current_chars = [], 0
        current.append(embed)
        current_chars += size
    if current:
        batches.append(current)
    return batches


def render_markdown_catalog(grouped: Mapping[str, Sequence[str]]) -> List[str]:
    """Flat markdown lines with a bold header per group, for plain-text replies."""

    lines: List[str] = []
    for name, entries in iter_groups(grouped):
        if lines:
            lines.append("")
        lines.append(f"__{name}__")
        lines.extend(entries)
    return lines


def render_html_commands(
    lines: Sequence[str], bot_name: str, query: Optional[str] = None
) -> str:
    """Return the ``<p>`` fragment listing ``lines`` for the help web page.

    ``query`` is a case-insensitive substring filter over the raw lines. Each
    line is escaped exactly once before the bot name is bolded.
    """

    selected = list(lines)
    if query:
        needle = query.lower()
        selected = [line for line in selected if needle in line.lower()]

    body = "".join(f"<p>{html.escape(line, quote=False)}</p>" for line in selected)
    if not bot_name:
        return body
    name_pattern = re.compile(re.escape(html.escape(bot_name, quote=False)), re.IGNORECASE)
    return _bold_outside_tags(body, name_pattern)


def _bold_outside_tags(body: str, pattern: re.Pattern[str]) -> str:
    parts = re.split(r"(<[^>]*>)", body)
    for index, part in enumerate(parts):
        if part.startswith("<"):
            continue
        parts[index] = pattern.sub(lambda match: f"<b>{match.group(0)}</b>", part)
    return "".join(parts)


def render_help_page(bot_name: str, commands: str) -> str:
    return _HELP_PAGE.format(name=html.escape(bot_name, quote=False), commands=commands)
