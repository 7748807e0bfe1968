import asyncio
import dataclasses
import logging
from types import SimpleNamespace

import discord
from discord.ext import commands

from cogs.help import HelpCatalogCog

CATALOG = [
    "begin group Alpha",
    "hubot foo - does foo",
    "begin admin",
    "hubot secret - admin thing",
    "end admin",
    "end group",
    "hubot ping - reply with pong",
]


class FakeAuthor:
    def __init__(self) -> None:
        self.name = "member"
        self.sent: list[str] = []

    async def send(self, content: str) -> None:
        self.sent.append(content)


class FakeContext:
    def __init__(self, *, content: str = "", prefix: str = "!", guild=True, channel_name="bots"):
        self.author = FakeAuthor()
        self.guild = SimpleNamespace(id=1) if guild else None
        self.channel = SimpleNamespace(name=channel_name)
        self.message = SimpleNamespace(content=content)
        self.prefix = prefix
        self.command = None
        self.replies: list[dict] = []

    async def reply(self, content: str | None = None, **kwargs) -> None:
        self.replies.append({"content": content, **kwargs})


def _admin_check(result: bool):
    calls: list[object] = []

    async def check(user) -> bool:
        calls.append(user)
        return result

    return check, calls


def _cog(settings, *, admin: bool = False, catalog=CATALOG) -> tuple[HelpCatalogCog, list]:
    check, calls = _admin_check(admin)
    cog = HelpCatalogCog(
        SimpleNamespace(cogs={}),
        settings,
        admin_check=check,
        catalog_source=lambda: list(catalog),
    )
    return cog, calls


def _run_help(cog: HelpCatalogCog, ctx: FakeContext, query: str | None = None) -> None:
    asyncio.run(cog.help_command.callback(cog, ctx, query=query))


def test_help_replies_with_grouped_embeds_for_non_admin(help_settings):
    cog, calls = _cog(help_settings)
    ctx = FakeContext()

    _run_help(cog, ctx)

    assert calls == [ctx.author]
    embeds = ctx.replies[0]["embeds"]
    assert all(isinstance(embed, discord.Embed) for embed in embeds)
    assert [embed.title for embed in embeds] == ["Alpha", "Other commands"]
    assert embeds[0].description == "**helpbot foo** - does foo"
    assert "secret" not in embeds[0].description


def test_help_includes_admin_section_for_admins(help_settings):
    cog, _ = _cog(help_settings, admin=True)
    ctx = FakeContext()

    _run_help(cog, ctx)

    alpha = ctx.replies[0]["embeds"][0]
    assert alpha.description.split("\n") == [
        "**helpbot foo** - does foo",
        "**Admin only:**",
        "**helpbot secret** - admin thing",
    ]


def test_help_query_without_matches(help_settings):
    cog, _ = _cog(help_settings)
    ctx = FakeContext()

    _run_help(cog, ctx, query="nothing")

    assert ctx.replies == [{"content": "No available commands match nothing", "mention_author": False}]


def test_help_query_filters_groups(help_settings):
    cog, _ = _cog(help_settings)
    ctx = FakeContext()

    _run_help(cog, ctx, query="PING")

    embeds = ctx.replies[0]["embeds"]
    assert [embed.title for embed in embeds] == ["Other commands"]


def test_help_reports_marker_errors(help_settings):
    cog, _ = _cog(help_settings, catalog=["begin group Broken", "hubot a - b"])
    ctx = FakeContext()

    _run_help(cog, ctx)

    assert ctx.replies[0]["content"] == 'In the script "Broken" the closing marker was not found.'


def test_help_private_reply_mode(help_settings):
    settings = dataclasses.replace(help_settings, reply_in_private=True)
    cog, _ = _cog(settings)
    ctx = FakeContext()

    _run_help(cog, ctx)

    assert ctx.replies[0]["content"] == "I just replied to you in private."
    assert len(ctx.author.sent) == 1
    assert "__Alpha__" in ctx.author.sent[0]
    assert "**helpbot ping** - reply with pong" in ctx.author.sent[0]


def test_private_mode_answers_in_place_inside_dms(help_settings):
    settings = dataclasses.replace(help_settings, reply_in_private=True)
    cog, _ = _cog(settings)
    ctx = FakeContext(guild=False)

    _run_help(cog, ctx)

    assert ctx.author.sent == []
    assert "embeds" in ctx.replies[0]


def test_unknown_command_suggests_close_matches(help_settings):
    cog, calls = _cog(help_settings)
    ctx = FakeContext(content="!pnig")

    asyncio.run(cog.on_command_error(ctx, commands.CommandNotFound('Command "pnig" is not found')))

    assert calls == [ctx.author]
    assert ctx.replies[0]["content"] == "Did you mean:\nhelpbot ping"


def test_unknown_command_does_not_suggest_admin_commands_to_members(help_settings):
    cog, _ = _cog(help_settings)
    ctx = FakeContext(content="!secrte")

    asyncio.run(cog.on_command_error(ctx, commands.CommandNotFound("x")))

    assert ctx.replies[0]["content"] == "I don't know that command."


def test_unknown_command_suggests_admin_commands_to_admins(help_settings):
    cog, _ = _cog(help_settings, admin=True)
    ctx = FakeContext(content="!secrte")

    asyncio.run(cog.on_command_error(ctx, commands.CommandNotFound("x")))

    assert ctx.replies[0]["content"] == "Did you mean:\nhelpbot secret"


def test_unknown_command_ignored_in_quiet_channels(help_settings):
    cog, calls = _cog(help_settings)
    ctx = FakeContext(content="!pnig", channel_name="General")

    asyncio.run(cog.on_command_error(ctx, commands.CommandNotFound("x")))

    assert ctx.replies == []
    assert calls == []


def test_other_command_errors_are_logged_without_suggestions(help_settings, caplog):
    cog, calls = _cog(help_settings)
    ctx = FakeContext(content="!ping")
    ctx.command = SimpleNamespace(name="ping")
    error = commands.CommandInvokeError(RuntimeError("boom"))

    with caplog.at_level(logging.WARNING, logger="c1c.help"):
        asyncio.run(cog.on_command_error(ctx, error))

    assert ctx.replies == []
    assert calls == []
    records = [r for r in caplog.records if r.name == "c1c.help"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert "cmd=ping" in records[0].getMessage()
    assert "boom" in records[0].getMessage()


def test_check_failures_are_logged(help_settings, caplog):
    cog, _ = _cog(help_settings)
    ctx = FakeContext(content="!reload")

    with caplog.at_level(logging.WARNING, logger="c1c.help"):
        asyncio.run(cog.on_command_error(ctx, commands.CheckFailure("nope")))

    assert ctx.replies == []
    assert any("nope" in r.getMessage() for r in caplog.records if r.name == "c1c.help")


def test_large_catalog_is_split_across_messages_within_discord_limits(help_settings):
    catalog: list[str] = []
    for group in range(6):
        catalog.append(f"begin group Group {group}")
        catalog.extend(
            f"hubot command{group}x{index} <arg> - " + "describes the command in some detail " * 2
            for index in range(20)
        )
        catalog.append("end group")
    cog, _ = _cog(help_settings, catalog=catalog)
    ctx = FakeContext()

    _run_help(cog, ctx)

    batches = [reply["embeds"] for reply in ctx.replies]
    assert len(batches) > 1
    for batch in batches:
        assert len(batch) <= 10
        assert sum(len(embed) for embed in batch) <= 6000
    titles = [embed.title for batch in batches for embed in batch]
    assert titles == [f"Group {group}" for group in range(6)]
