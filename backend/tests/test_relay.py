"""Tests for the streaming relay state machine."""

import asyncio

import httpx
import pytest

from interview_relay.providers.groq import GroqClient
from interview_relay.services.relay import RelayState, StreamRelay
from interview_relay.utils.exceptions import ConfigurationError, TransportError, UpstreamError

from conftest import FakeUpstream, byte_stream, make_settings, sse_line

MESSAGES = [{"role": "user", "content": "Hi"}]


def make_relay(upstream: FakeUpstream, api_key="test-key") -> StreamRelay:
    return StreamRelay(GroqClient.from_settings(make_settings(api_key), upstream.http_client()))


async def collect(relay: StreamRelay):
    await relay.open(MESSAGES)
    return [chunk async for chunk in relay.iter_bytes()]


def test_fragments_forwarded_in_order():
    chunks = [sse_line("Two "), sse_line("pointers "), sse_line("work."), b"data: [DONE]\n\n"]
    upstream = FakeUpstream(lambda request: httpx.Response(200, content=byte_stream(chunks)))
    relay = make_relay(upstream)

    out = asyncio.run(collect(relay))

    assert out == [b"Two ", b"pointers ", b"work."]
    assert relay.state == RelayState.CLOSED
    assert relay.fragments_sent == 3
    assert relay._response.is_closed


def test_done_stops_reading_upstream():
    pulled = []

    async def body():
        for chunk in (sse_line("a"), b"data: [DONE]\n\n", sse_line("b"), sse_line("c")):
            pulled.append(chunk)
            yield chunk

    upstream = FakeUpstream(lambda request: httpx.Response(200, content=body()))
    relay = make_relay(upstream)

    assert asyncio.run(collect(relay)) == [b"a"]
    assert relay.state == RelayState.CLOSED
    assert len(pulled) == 2


def test_eof_without_done_closes_cleanly():
    upstream = FakeUpstream(
        lambda request: httpx.Response(200, content=byte_stream([sse_line("x"), b"data: {\"choi"]))
    )
    relay = make_relay(upstream)

    assert asyncio.run(collect(relay)) == [b"x"]
    assert relay.state == RelayState.CLOSED


def test_empty_fragments_not_written():
    chunks = [
        b'data: {"choices":[{"delta":{"role":"assistant","content":""}}]}\n\n',
        sse_line("ok"),
        b'data: {"choices":[{"delta":{},"finish_reason":"stop"}]}\n\n',
    ]
    upstream = FakeUpstream(lambda request: httpx.Response(200, content=byte_stream(chunks)))

    assert asyncio.run(collect(make_relay(upstream))) == [b"ok"]


def test_read_failure_errors_the_stream():
    async def body():
        yield sse_line("partial ")
        raise httpx.ReadError("connection reset")

    upstream = FakeUpstream(lambda request: httpx.Response(200, content=body()))
    relay = make_relay(upstream)
    received = []

    async def run():
        await relay.open(MESSAGES)
        async for chunk in relay.iter_bytes():
            received.append(chunk)

    with pytest.raises(TransportError, match="connection reset"):
        asyncio.run(run())
    assert received == [b"partial "]
    assert relay.state == RelayState.ERRORED
    assert relay._response.is_closed


def test_client_disconnect_releases_upstream():
    chunks = [sse_line("a"), sse_line("b"), sse_line("c")]
    upstream = FakeUpstream(lambda request: httpx.Response(200, content=byte_stream(chunks)))
    relay = make_relay(upstream)

    async def run():
        await relay.open(MESSAGES)
        stream = relay.iter_bytes()
        first = await stream.__anext__()
        await stream.aclose()
        return first

    assert asyncio.run(run()) == b"a"
    assert relay.state == RelayState.ERRORED
    assert relay._response.is_closed


def test_open_configuration_error():
    upstream = FakeUpstream(lambda request: httpx.Response(200))
    relay = make_relay(upstream, api_key=None)

    with pytest.raises(ConfigurationError):
        asyncio.run(relay.open(MESSAGES))
    assert relay.state == RelayState.ERRORED
    assert upstream.call_count == 0


def test_open_upstream_error():
    upstream = FakeUpstream(lambda request: httpx.Response(401, text="invalid api key"))
    relay = make_relay(upstream)

    with pytest.raises(UpstreamError, match="401"):
        asyncio.run(relay.open(MESSAGES))
    assert relay.state == RelayState.ERRORED


def test_iter_after_terminal_state_yields_nothing():
    upstream = FakeUpstream(lambda request: httpx.Response(200, content=byte_stream([sse_line("a")])))
    relay = make_relay(upstream)

    async def run():
        first = await collect(relay)
        second = [chunk async for chunk in relay.iter_bytes()]
        return first, second

    assert asyncio.run(run()) == ([b"a"], [])


def test_split_inside_multibyte_character():
    line = sse_line("é")
    idx = line.index("é".encode("utf-8")) + 1  # between the two UTF-8 bytes
    upstream = FakeUpstream(
        lambda request: httpx.Response(200, content=byte_stream([line[:idx], line[idx:]]))
    )

    assert asyncio.run(collect(make_relay(upstream))) == ["é".encode("utf-8")]


def test_any_byte_partition_gives_same_text():
    body = b"".join(sse_line(d) for d in ("Big-O ", "is ", "O(n·log n) ", "🚀")) + b"data: [DONE]\n\n"
    expected = "Big-O is O(n·log n) 🚀".encode("utf-8")

    for size in (1, 2, 3, 5, 13, len(body)):
        chunks = [body[i:i + size] for i in range(0, len(body), size)]
        upstream = FakeUpstream(lambda request, chunks=chunks: httpx.Response(200, content=byte_stream(chunks)))
        assert b"".join(asyncio.run(collect(make_relay(upstream)))) == expected, size
