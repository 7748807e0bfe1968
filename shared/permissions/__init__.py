"""Admin-membership capability shared by the help catalog and admin commands."""

from __future__ import annotations

from typing import Awaitable, Callable, Collection

from discord.ext import commands

__all__ = ["AdminCheck", "admin_only", "make_admin_check"]

AdminCheck = Callable[[object], Awaitable[bool]]


def make_admin_check(admin_role_ids: Collection[int]) -> AdminCheck:
    """Return an admin check backed by guild permissions and configured roles.

    Users outside a guild (direct messages) are never admins.
    """

    role_ids = frozenset(admin_role_ids)

    async def is_admin(user: object) -> bool:
        permissions = getattr(user, "guild_permissions", None)
        if permissions is None:
            return False
        if getattr(permissions, "administrator", False):
            return True
        return any(getattr(role, "id", None) in role_ids for role in getattr(user, "roles", ()))

    return is_admin


def admin_only() -> Callable:
    """Command check that defers to the owning cog's ``admin_check``.

    Cogs without an ``admin_check`` attribute fall back to the Discord
    ``administrator`` permission alone.
    """

    async def predicate(ctx: commands.Context) -> bool:
        check = getattr(ctx.cog, "admin_check", None) or make_admin_check(())
        return await check(ctx.author)

    return commands.check(predicate)
