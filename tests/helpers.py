"""Probe builders and scripted target handlers shared by the tests."""

from __future__ import annotations

from typing import Awaitable, Callable

import httpx

from benchwatch.adapters.http_probe import HttpProbe

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


def probe_for(handler: Handler) -> HttpProbe:
    """Build a probe whose client answers every request through ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpProbe(client=client)


def probe_for_app(app) -> HttpProbe:
    """Build a probe whose client serves requests from an ASGI app in-process."""
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app))
    return HttpProbe(client=client)


async def ok_handler(request: httpx.Request) -> httpx.Response:
    """Answer every request with an empty 200."""
    return httpx.Response(200)


async def refused_handler(request: httpx.Request) -> httpx.Response:
    """Fail every request as a refused connection."""
    raise httpx.ConnectError("Connection refused", request=request)
