from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from carcircle._transport import HttpTransport
from carcircle.config import CarCircleConfig
from carcircle.exceptions import RemoteRejectedError, RemoteUnreachableError


async def _echo(request: web.Request) -> web.Response:
    body = await request.json()
    return web.json_response({"received": body, "query": dict(request.query)})


async def _missing(request: web.Request) -> web.Response:
    return web.json_response({"message": "circle not found"}, status=404)


async def _broken(request: web.Request) -> web.Response:
    return web.Response(text="<html>oops</html>", content_type="text/html")


async def _empty(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(0.5)
    return web.json_response([])


@asynccontextmanager
async def _transport(request_timeout: float = 5.0) -> AsyncIterator[HttpTransport]:
    app = web.Application()
    app.router.add_post("/api/echo", _echo)
    app.router.add_get("/api/missing", _missing)
    app.router.add_get("/api/broken", _broken)
    app.router.add_delete("/api/empty", _empty)
    app.router.add_get("/api/slow", _slow)
    async with test_utils.TestServer(app) as server, aiohttp.ClientSession() as http:
        config = CarCircleConfig(
            database_path=":memory:",
            api_base_url=str(server.make_url("/api")),
            request_timeout=request_timeout,
        )
        yield HttpTransport(config, http)


@pytest.mark.asyncio
async def test_json_round_trip_with_params() -> None:
    async with _transport() as transport:
        data = await transport.request_json("POST", "/echo", payload={"name": "Family"}, params={"privacy": "PUBLIC"})
    assert data == {"received": {"name": "Family"}, "query": {"privacy": "PUBLIC"}}


@pytest.mark.asyncio
async def test_non_success_status_is_rejected() -> None:
    async with _transport() as transport:
        with pytest.raises(RemoteRejectedError) as excinfo:
            await transport.request_json("GET", "/missing")
    assert excinfo.value.status_code == 404
    assert excinfo.value.endpoint == "/missing"
    assert "circle not found" in str(excinfo.value)


@pytest.mark.asyncio
async def test_unparseable_success_body_is_rejected() -> None:
    async with _transport() as transport:
        with pytest.raises(RemoteRejectedError, match="Invalid JSON") as excinfo:
            await transport.request_json("GET", "/broken")
    assert excinfo.value.status_code == 200


@pytest.mark.asyncio
async def test_empty_body_is_none() -> None:
    async with _transport() as transport:
        assert await transport.request_json("DELETE", "/empty") is None


@pytest.mark.asyncio
async def test_timeout_is_unreachable() -> None:
    async with _transport(request_timeout=0.05) as transport:
        with pytest.raises(RemoteUnreachableError, match="timed out"):
            await transport.request_json("GET", "/slow")


@pytest.mark.asyncio
async def test_connection_refused_is_unreachable() -> None:
    config = CarCircleConfig(database_path=":memory:", api_base_url="http://127.0.0.1:9/api", request_timeout=2.0)
    async with aiohttp.ClientSession() as http:
        with pytest.raises(RemoteUnreachableError) as excinfo:
            await HttpTransport(config, http).request_json("GET", "/circles")
    assert excinfo.value.status_code is None
