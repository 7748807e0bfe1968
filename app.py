from __future__ import annotations

import asyncio
import logging
import os
from typing import List

import discord
from discord.ext import commands

from modules.common.runtime import Runtime
from shared.config import get_discord_token, load_help_settings
from shared.logging import setup_logging

SETTINGS = load_help_settings()

setup_logging(static_fields={"bot": SETTINGS.bot_name}, level=SETTINGS.log_level)
log = logging.getLogger("c1c.app")

INTENTS = discord.Intents.default()
INTENTS.message_content = True

DEFAULT_EXTENSIONS = ("cogs.app_admin", "cogs.help")


def _configured_extensions() -> tuple[str, ...]:
    raw = os.getenv("BOT_EXTENSIONS", "")
    extra = tuple(item.strip() for item in raw.split(",") if item.strip())
    return DEFAULT_EXTENSIONS + tuple(name for name in extra if name not in DEFAULT_EXTENSIONS)


class HelpBot(commands.Bot):
    async def setup_hook(self) -> None:
        for name in _configured_extensions():
            await self.load_extension(name)
            log.info("extension loaded", extra={"extension": name})


bot = HelpBot(
    command_prefix=commands.when_mentioned_or(SETTINGS.command_prefix),
    intents=INTENTS,
    help_command=None,
)


def _web_catalog() -> List[str]:
    cog = bot.get_cog("HelpCatalogCog")
    if cog is None:
        return []
    return cog.prepared_catalog()


runtime = Runtime(bot, SETTINGS, _web_catalog)


@bot.event
async def on_ready() -> None:
    log.info("bot ready", extra={"user": str(bot.user), "guilds": len(bot.guilds)})


async def main() -> None:
    log.info("starting", extra=SETTINGS.describe())
    await runtime.start(get_discord_token())


if __name__ == "__main__":
    asyncio.run(main())
