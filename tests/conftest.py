from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Optional

import httpx
import pytest

from remote_webdriver.config import WaitConfig
from remote_webdriver.driver import WebDriver
from remote_webdriver.executor import CommandExecutor
from remote_webdriver.models import Session
from remote_webdriver.transport import HttpxTransport
from remote_webdriver.wait import WaitPoller

SERVER_URL = "http://hub.test/wd/hub"
SESSION_ID = "abc123"

Responder = Callable[[httpx.Request], httpx.Response]


def reply(
    value: Any = None,
    *,
    status: int = 0,
    http_status: int = 200,
    headers: Optional[dict[str, str]] = None,
    **fields: Any,
) -> Responder:
    envelope = {"status": status, "value": value, **fields}

    def _build(request: httpx.Request) -> httpx.Response:
        return httpx.Response(http_status, json=envelope, headers=headers)

    return _build


def raw(body: str, *, http_status: int = 200, headers: Optional[dict[str, str]] = None) -> Responder:
    def _build(request: httpx.Request) -> httpx.Response:
        return httpx.Response(http_status, text=body, headers=headers)

    return _build


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeServer:
    """In-process wire protocol server built on ``httpx.MockTransport``.

    Each route holds a queue of responders; the last one repeats.
    """

    def __init__(self, base_url: str = SERVER_URL) -> None:
        self._prefix = httpx.URL(base_url).path.rstrip("/")
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responders: Responder) -> "FakeServer":
        self.routes[(method, self._prefix + path)] = list(responders)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            message = f"no route for {request.method} {request.url.path}"
            return httpx.Response(500, json={"status": 9, "value": {"message": message}})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        return responder(request)

    def transport(self) -> HttpxTransport:
        return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(self.handler)))

    def calls(self, method: str, path: str) -> list[Any]:
        """Decoded JSON bodies (or ``None``) of requests sent to a route."""

        full_path = self._prefix + path
        bodies = []
        for request in self.requests:
            if request.method == method and request.url.path == full_path:
                bodies.append(json.loads(request.content) if request.content else None)
        return bodies


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def transport(server: FakeServer) -> HttpxTransport:
    return server.transport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_driver(
    transport: HttpxTransport,
    clock: FakeClock,
    *,
    browser_name: str = "firefox",
    server_url: str = SERVER_URL,
    wait: Optional[WaitConfig] = None,
) -> WebDriver:
    session = Session(
        server_url=server_url,
        session_id=SESSION_ID,
        browser_name=browser_name,
        wait=wait or WaitConfig(),
    )
    executor = CommandExecutor(server_url, transport, session_id=SESSION_ID)
    return WebDriver(session, executor, poller=WaitPoller(session.wait, clock=clock))


@pytest.fixture
def driver(transport: HttpxTransport, clock: FakeClock) -> WebDriver:
    return make_driver(transport, clock)
