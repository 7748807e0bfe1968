"""App-level administrative commands.

Commands:
  begin group Operations
  hubot ping - Check that the bot is awake.
  begin admin
  hubot reload - Reload every loaded extension.
  hubot reload <extension> - Reload a single extension, e.g. cogs.help.
  end admin
  end group
"""

from __future__ import annotations

import logging

from discord.ext import commands

from shared.config import HelpSettings, load_help_settings
from shared.permissions import admin_only, make_admin_check

log = logging.getLogger("c1c.admin")


class AppAdmin(commands.Cog):
    """Lightweight administrative utilities for bot operators."""

    def __init__(self, bot: commands.Bot, settings: HelpSettings | None = None) -> None:
        self.bot = bot
        settings = settings or load_help_settings()
        self.admin_check = make_admin_check(settings.admin_role_ids)

    @commands.command(name="ping", help="Check that the bot is awake.")
    async def ping(self, ctx: commands.Context) -> None:
        try:
            await ctx.message.add_reaction("🏓")
        except Exception:
            # Missing permissions or a deleted message; fall back to text.
            await ctx.reply("pong", mention_author=False)

    @commands.command(name="reload", hidden=True, help="Reload loaded extensions.")
    @admin_only()
    async def reload(self, ctx: commands.Context, extension: str | None = None) -> None:
        targets = [extension] if extension else list(self.bot.extensions)
        failed: list[str] = []
        for name in targets:
            try:
                await self.bot.reload_extension(name)
            except commands.ExtensionError:
                log.exception("extension reload failed", extra={"extension": name})
                failed.append(name)

        reloaded = len(targets) - len(failed)
        if failed:
            await ctx.reply(
                f"Reloaded {reloaded} extension(s); failed: {', '.join(failed)}.",
                mention_author=False,
            )
            return
        await ctx.reply(f"Reloaded {reloaded} extension(s).", mention_author=False)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(AppAdmin(bot))
