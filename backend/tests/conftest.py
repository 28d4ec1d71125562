"""Shared fixtures: a counting fake upstream and a TestClient wired to it."""

import asyncio
from typing import Callable, List, Optional

import httpx
import orjson
import pytest
from fastapi.testclient import TestClient

from interview_relay.config import Settings, get_settings
from interview_relay.dependencies import get_http_client
from interview_relay.main import app


def sse_line(content: str) -> bytes:
    """One upstream SSE record carrying a text delta."""
    payload = {"choices": [{"index": 0, "delta": {"content": content}}]}
    return b"data: " + orjson.dumps(payload) + b"\n\n"


def byte_stream(chunks: List[bytes]):
    """Async body for httpx.Response that yields each chunk separately."""

    async def gen():
        for chunk in chunks:
            yield chunk

    return gen()


class FakeUpstream:
    """MockTransport handler that records every request it receives."""

    # Instances created during the current test; closed by `close_fake_upstreams`
    created: List["FakeUpstream"] = []

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []
        self._client: Optional[httpx.AsyncClient] = None
        FakeUpstream.created.append(self)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def http_client(self) -> httpx.AsyncClient:
        """One shared client per fake, like the app's lifespan pool."""
        if self._client is None:
            self._client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    def last_json(self) -> dict:
        return orjson.loads(self.requests[-1].content)


def make_settings(api_key="test-key") -> Settings:
    return Settings(_env_file=None, groq_api_key=api_key)


@pytest.fixture(autouse=True)
def close_fake_upstreams():
    yield
    upstreams, FakeUpstream.created = FakeUpstream.created, []
    for upstream in upstreams:
        asyncio.run(upstream.aclose())
        assert upstream._client is None or upstream._client.is_closed


@pytest.fixture
def make_client():
    """Build a TestClient whose upstream calls go to `upstream`."""

    def _make(upstream: FakeUpstream, api_key="test-key", raise_server_exceptions=True) -> TestClient:
        settings = make_settings(api_key)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_http_client] = upstream.http_client
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    yield _make
    app.dependency_overrides.clear()
