"""Application runtime scaffolding for the bot process and its web server."""

from __future__ import annotations

import logging
import os
import time
from typing import Awaitable, Callable, Optional

from aiohttp import web
from discord.ext import commands

from shared.config import HelpSettings
from shared.logging import get_trace_id, set_trace_id, setup_logging
from shared.web_routes import CatalogSource, help_path, mount_help_page

log = logging.getLogger("c1c.runtime")


async def create_app(
    *, settings: HelpSettings, catalog_source: CatalogSource
) -> web.Application:
    """Create the aiohttp application served next to the bot."""

    static_fields = {"bot": settings.bot_name}
    access_logger = setup_logging(static_fields=static_fields, level=settings.log_level)

    @web.middleware
    async def tracing_middleware(
        request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]
    ) -> web.StreamResponse:
        trace = set_trace_id()
        started = time.perf_counter()
        status = 500
        try:
            response = await handler(request)
            status = response.status
            response.headers["X-Trace-Id"] = trace
            return response
        except web.HTTPException as exc:
            status = exc.status
            raise
        finally:
            access_logger.info(
                "http_request",
                extra={
                    "trace": trace,
                    "path": request.path,
                    "method": request.method,
                    "status": status,
                    "ms": int((time.perf_counter() - started) * 1000),
                },
            )

    app = web.Application(middlewares=[tracing_middleware])

    async def root(_: web.Request) -> web.Response:
        payload = {
            "ok": True,
            "bot": settings.bot_name,
            "version": os.getenv("BOT_VERSION", "dev"),
            "trace": get_trace_id(),
        }
        return web.json_response(payload)

    app.router.add_get("/", root)

    if settings.disable_http:
        log.info("web: help page disabled (HELP_DISABLE_HTTP)")
    else:
        mount_help_page(app, bot_name=settings.bot_name, catalog_source=catalog_source)
        log.info("web: %s mounted", help_path(settings.bot_name))

    return app


class Runtime:
    """Container object that wires the bot and its web server."""

    def __init__(
        self, bot: commands.Bot, settings: HelpSettings, catalog_source: CatalogSource
    ) -> None:
        self.bot = bot
        self.settings = settings
        self.catalog_source = catalog_source
        self._web_app: Optional[web.Application] = None
        self._web_runner: Optional[web.AppRunner] = None
        self._web_site: Optional[web.TCPSite] = None

    async def start_webserver(self, *, port: Optional[int] = None) -> None:
        if self._web_site is not None:
            return
        port = port if port is not None else self.settings.port

        app = await create_app(settings=self.settings, catalog_source=self.catalog_source)
        self._web_app = app
        self._web_runner = web.AppRunner(app)
        await self._web_runner.setup()
        self._web_site = web.TCPSite(self._web_runner, host="0.0.0.0", port=port)
        await self._web_site.start()
        log.info("web server listening", extra={"port": port})

    async def shutdown_webserver(self) -> None:
        site, runner = self._web_site, self._web_runner
        self._web_site = None
        self._web_runner = None
        self._web_app = None
        if site is not None:
            await site.stop()
        if runner is not None:
            await runner.cleanup()

    async def start(self, token: str) -> None:
        """Serve the web app and run the bot until it disconnects."""

        await self.start_webserver()
        try:
            async with self.bot:
                await self.bot.start(token)
        finally:
            await self.shutdown_webserver()
