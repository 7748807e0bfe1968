"""Custom aiohttp web routes exposed by the bot runtime."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from aiohttp import web

from modules.helpcatalog.assembler import assemble_catalog, flatten_catalog
from modules.helpcatalog.markers import MarkerError
from modules.helpcatalog.render import render_help_page, render_html_commands

__all__ = ["CatalogSource", "help_path", "mount_help_page"]

log = logging.getLogger("c1c.help.web")

CatalogSource = Callable[[], Sequence[str]]


def help_path(bot_name: str) -> str:
    return f"/{bot_name}/help"


def mount_help_page(
    app: web.Application, *, bot_name: str, catalog_source: CatalogSource
) -> None:
    """Register ``GET /<bot_name>/help`` if not already mounted.

    ``catalog_source`` returns the prepared catalog lines (hidden commands
    removed, display name substituted). The page never shows admin-only
    entries since HTTP requests carry no requester identity.
    """

    if app.get("_help_page_mounted"):
        return

    async def handle(request: web.Request) -> web.Response:
        query = request.query.get("q")
        try:
            grouped = assemble_catalog(catalog_source(), False)
        except MarkerError as exc:
            log.error(
                "help catalog rejected",
                extra={"keyword": exc.keyword, "label": exc.label, "path": request.path},
            )
            raise web.HTTPInternalServerError(text=str(exc)) from exc

        fragment = render_html_commands(flatten_catalog(grouped), bot_name, query)
        return web.Response(
            text=render_help_page(bot_name, fragment),
            content_type="text/html",
        )

    path = help_path(bot_name)
    app.router.add_get(path, handle)
    app["_help_page_mounted"] = True
    log.debug("help route registered", extra={"path": path})
