import asyncio

from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from shared import web_routes

CATALOG = [
    "begin group Alpha",
    "helpbot foo <x> - does foo & more",
    "begin admin",
    "helpbot secret - admin thing",
    "end admin",
    "end group",
    "helpbot ping - reply with pong",
]


def _fetch(catalog, path: str, params=None) -> tuple[int, str, str]:
    async def runner() -> tuple[int, str, str]:
        app = web.Application()
        web_routes.mount_help_page(app, bot_name="helpbot", catalog_source=lambda: list(catalog))

        async with TestServer(app) as server:
            async with TestClient(server) as client:
                resp = await client.get(path, params=params or {})
                return resp.status, resp.content_type, await resp.text()

    return asyncio.run(runner())


def test_help_page_lists_public_commands():
    status, content_type, body = _fetch(CATALOG, "/helpbot/help")

    assert status == 200
    assert content_type == "text/html"
    assert "<title>helpbot Help</title>" in body
    assert "<p><b>helpbot</b> foo &lt;x&gt; - does foo &amp; more</p>" in body
    assert "<p><b>helpbot</b> ping - reply with pong</p>" in body
    assert "secret" not in body
    assert "begin group" not in body


def test_help_page_query_filter():
    status, _, body = _fetch(CATALOG, "/helpbot/help", params={"q": "PONG"})

    assert status == 200
    assert "ping" in body
    assert "foo" not in body


def test_help_page_reports_broken_catalog():
    status, _, body = _fetch(["end group"], "/helpbot/help")

    assert status == 500
    assert "opening marker was not found" in body


def test_mount_help_page_is_idempotent():
    app = web.Application()
    web_routes.mount_help_page(app, bot_name="helpbot", catalog_source=lambda: [])
    web_routes.mount_help_page(app, bot_name="helpbot", catalog_source=lambda: [])

    paths = [resource.canonical for resource in app.router.resources()]
    assert paths.count("/helpbot/help") == 1
