"""Help catalog commands and "did you mean" suggestions.

Commands:
  begin group Help
  hubot help - Displays all of the help commands that this bot knows about.
  hubot help <query> - Displays all help commands that match <query>.
  end group
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from discord.ext import commands

from modules.helpcatalog.assembler import assemble_catalog, filter_catalog, flatten_catalog
from modules.helpcatalog.markers import MarkerError
from modules.helpcatalog.render import (
    batch_embeds,
    build_help_embeds,
    build_rich_units,
    chunk_lines,
    emphasize_invocation,
    render_markdown_catalog,
)
from modules.helpcatalog.sources import collect_catalog, prepare_catalog, suggest_commands
from shared.config import HelpSettings, load_help_settings
from shared.permissions import AdminCheck, make_admin_check

log = logging.getLogger("c1c.help")

CatalogSource = Callable[[], List[str]]

DM_CHUNK_LIMIT = 2000


class HelpCatalogCog(commands.Cog):
    """Serve the grouped help catalog and suggest commands for typos."""

    def __init__(
        self,
        bot: commands.Bot,
        settings: HelpSettings | None = None,
        *,
        admin_check: AdminCheck | None = None,
        catalog_source: CatalogSource | None = None,
    ) -> None:
        self.bot = bot
        self.settings = settings or load_help_settings()
        self.admin_check = admin_check or make_admin_check(self.settings.admin_role_ids)
        self._catalog_source = catalog_source

    def prepared_catalog(self) -> List[str]:
        """Catalog lines for one request, rebuilt from the loaded cogs each time."""

        if self._catalog_source is not None:
            raw = self._catalog_source()
        else:
            raw = collect_catalog(self.bot)
        return prepare_catalog(
            raw,
            bot_name=self.settings.display_name,
            hidden=self.settings.hidden_commands,
        )

    async def _assemble_for(
        self, ctx: commands.Context
    ) -> Optional[Dict[str, List[str]]]:
        is_admin = await self.admin_check(ctx.author)
        try:
            return assemble_catalog(self.prepared_catalog(), is_admin)
        except MarkerError as exc:
            log.error(
                "help catalog rejected",
                extra={"keyword": exc.keyword, "label": exc.label},
            )
            await ctx.reply(str(exc), mention_author=False)
            return None

    @commands.command(name="help")
    async def help_command(self, ctx: commands.Context, *, query: Optional[str] = None) -> None:
        grouped = await self._assemble_for(ctx)
        if grouped is None:
            return

        if query:
            grouped = filter_catalog(grouped, query)
            if not grouped:
                await ctx.reply(f"No available commands match {query}", mention_author=False)
                return

        grouped = {
            name: [emphasize_invocation(line) for line in lines]
            for name, lines in grouped.items()
        }

        if self.settings.reply_in_private and ctx.guild is not None:
            await ctx.reply("I just replied to you in private.", mention_author=False)
            for chunk in chunk_lines(render_markdown_catalog(grouped), limit=DM_CHUNK_LIMIT):
                await ctx.author.send(chunk)
            return

        for batch in batch_embeds(build_help_embeds(build_rich_units(grouped))):
            await ctx.reply(embeds=batch, mention_author=False)

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: Exception) -> None:
        if not isinstance(error, commands.CommandNotFound):
            log.warning(
                "cmd error: cmd=%s user=%s err=%r",
                getattr(ctx.command, "name", None),
                getattr(ctx.author, "id", None),
                error,
            )
            return

        channel_name = str(getattr(ctx.channel, "name", "") or "").lower()
        if channel_name and channel_name in self.settings.suggest_ignore_channels:
            return

        content = getattr(ctx.message, "content", "") or ""
        utterance = content[len(ctx.prefix or "") :].strip()
        if not utterance:
            return

        grouped = await self._assemble_for(ctx)
        if grouped is None:
            return

        suggestions = suggest_commands(
            utterance, flatten_catalog(grouped), self.settings.display_name
        )
        log.info(
            "unknown command",
            extra={"utterance": utterance, "suggestions": len(suggestions)},
        )
        if suggestions:
            await ctx.reply("Did you mean:\n" + "\n".join(suggestions), mention_author=False)
        else:
            await ctx.reply("I don't know that command.", mention_author=False)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(HelpCatalogCog(bot))
