"""
endpointkit — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the whole suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    make_request: Factory for Starlette requests over a scripted ASGI receive
    writer:       Fresh ResponseWriter
    server:       Fresh Server with no routes
    client:       HTTPX AsyncClient talking to `server` behind the CORS gate
"""

import os
from typing import Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request
from starlette.types import Message

# Keep test runs independent of any local .env / shell configuration.
os.environ["ENDPOINTKIT_LOG_LEVEL"] = "WARNING"
os.environ.pop("ENDPOINTKIT_REQUIRED_ENV", None)

from endpointkit.main import create_app  # noqa: E402
from endpointkit.server import Server  # noqa: E402
from endpointkit.writer import ResponseWriter  # noqa: E402


class ScriptedReceive:
    """
    ASGI receive callable that replays body chunks, then reports a disconnect.

    `calls` counts how many messages were pulled, so tests can assert that a
    reader stopped early.
    """

    def __init__(self, chunks: Iterable[bytes]):
        parts = list(chunks)
        self.messages: List[Message] = [
            {"type": "http.request", "body": part, "more_body": i < len(parts) - 1}
            for i, part in enumerate(parts)
        ]
        self.calls = 0

    async def __call__(self) -> Message:
        self.calls += 1
        if self.messages:
            return self.messages.pop(0)
        return {"type": "http.disconnect"}


def build_scope(method: str, path: str, headers: Optional[Dict[str, str]]) -> dict:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [
            (key.lower().encode("latin-1"), value.encode("latin-1"))
            for key, value in (headers or {}).items()
        ],
        "client": ("127.0.0.1", 50000),
        "server": ("test", 80),
    }


@pytest.fixture
def make_request():
    """
    Factory for requests that are not routed through a server.

    Usage:
        request = make_request(body=b'{"a": 1}')
        request = make_request(chunks=[b'{"a"', b': 1}'])
        request = make_request(receive=my_receive)
    """

    def factory(
        method: str = "POST",
        path: str = "/",
        body: bytes = b"",
        chunks: Optional[Iterable[bytes]] = None,
        headers: Optional[Dict[str, str]] = None,
        receive=None,
    ) -> Request:
        if receive is None:
            receive = ScriptedReceive(chunks if chunks is not None else [body])
        return Request(build_scope(method, path, headers), receive)

    return factory


@pytest.fixture
def writer() -> ResponseWriter:
    return ResponseWriter()


@pytest.fixture
def server() -> Server:
    return Server()


@pytest_asyncio.fixture
async def client(server):
    """
    Async HTTP client for end-to-end tests.

    Routes may be added to `server` after the client is created; the router
    is consulted per request.
    """
    transport = ASGITransport(app=create_app(server))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
