"""Pytest configuration and fixtures for modem-watchdog tests."""

from __future__ import annotations

import pytest
import pytest_asyncio
import structlog
from aiohttp import web
from aiohttp.test_utils import TestServer
from pages import status_page

from main import configure_logging
from util.const import LogLevel


class FakeModem:
    """Stands in for the modem web UI: serves the status page and records reboot requests."""

    def __init__(self):
        self.page = status_page()
        self.status = 200
        self.address = None
        self.status_requests: list[dict[str, str]] = []
        self.reboots: list[str] = []

    async def handle_status(self, request: web.Request) -> web.Response:
        self.status_requests.append(dict(request.headers))
        return web.Response(text=self.page, status=self.status, content_type="text/html")

    async def handle_reboot(self, request: web.Request) -> web.Response:
        self.reboots.append(await request.text())
        return web.Response(text="<html>Rebooting</html>", content_type="text/html")

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self.handle_status)
        app.router.add_post("/goform/RgConfiguration.pl", self.handle_reboot)
        return app


@pytest_asyncio.fixture
async def modem():
    """A running FakeModem; `modem.address` is host:port, as MODEM_ADDRESS would be."""
    fake = FakeModem()
    server = TestServer(fake.app())
    await server.start_server()
    fake.address = f"{server.host}:{server.port}"
    yield fake
    await server.close()


@pytest.fixture(autouse=True)
def _structlog_to_stderr():
    """Keep log lines off stdout so tests can assert on exactly what the watchdog prints."""
    configure_logging(LogLevel.DEBUG)
    yield
    structlog.reset_defaults()
