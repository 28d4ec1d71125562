"""
Streaming relay: upstream SSE in, concatenated plain-text deltas out.

Lifecycle of one request:

    IDLE -> AWAITING_UPSTREAM -> STREAMING -> CLOSED
                  |                  |
                  +----> ERRORED <---+

Each upstream chunk is decoded and its fragments forwarded before the next
chunk is requested, so reads are paced by the client's consumption.
"""

import logging
from enum import Enum
from typing import AsyncIterator, List, Optional

import httpx

from interview_relay.providers.base import ChatCompletionsClient
from interview_relay.utils.deltas import extract_delta_content
from interview_relay.utils.exceptions import RelayError, TransportError
from interview_relay.utils.sse import SSEFrameDecoder, encode_fragment

logger = logging.getLogger(__name__)


class RelayState(str, Enum):
    IDLE = "idle"
    AWAITING_UPSTREAM = "awaiting_upstream"
    STREAMING = "streaming"
    CLOSED = "closed"
    ERRORED = "errored"


TERMINAL_STATES = (RelayState.CLOSED, RelayState.ERRORED)


class StreamRelay:
    """Relays one chat request's upstream stream to the client."""

    def __init__(self, client: ChatCompletionsClient):
        self.client = client
        self.state = RelayState.IDLE
        self.fragments_sent = 0
        self._response: Optional[httpx.Response] = None
        self._decoder = SSEFrameDecoder()

    def _transition(self, state: RelayState) -> None:
        logger.debug(f"[{self.client.name}] relay {self.state.value} -> {state.value}")
        self.state = state

    async def open(self, messages: List[dict]) -> None:
        """Open the upstream stream. Errors propagate before any bytes are sent."""
        if self.state != RelayState.IDLE:
            raise RuntimeError(f"Relay already started (state={self.state.value})")

        self._transition(RelayState.AWAITING_UPSTREAM)
        try:
            self._response = await self.client.open_stream(messages)
        except RelayError:
            self._transition(RelayState.ERRORED)
            raise
        self._transition(RelayState.STREAMING)

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """
        Yield encoded text fragments in upstream order.

        Stops at ``[DONE]`` or upstream EOF. A mid-stream read failure raises
        TransportError so the server aborts the response instead of ending it
        cleanly. The upstream response is released on every exit path,
        including the client disconnecting (generator close).
        """
        if self.state != RelayState.STREAMING or self._response is None:
            return

        try:
            async for text in self._response.aiter_text():
                for event in self._decoder.feed(text):
                    content = extract_delta_content(event.data)
                    if content:
                        self.fragments_sent += 1
                        yield encode_fragment(content)
                if self._decoder.done:
                    break
            self._transition(RelayState.CLOSED)
            logger.info(f"[{self.client.name}] stream complete: {self.fragments_sent} fragments")
        except httpx.HTTPError as e:
            self._transition(RelayState.ERRORED)
            logger.error(f"[{self.client.name}] stream reading error: {e!r}")
            raise TransportError(f"Upstream stream interrupted: {e}") from e
        finally:
            if self.state == RelayState.STREAMING:
                # Generator closed early: the client went away
                logger.info(f"[{self.client.name}] client disconnected after {self.fragments_sent} fragments")
                self._transition(RelayState.ERRORED)
            self._decoder.close()
            await self.aclose()

    async def aclose(self) -> None:
        """Release the upstream response. Safe to call more than once."""
        if self._response is not None:
            await self._response.aclose()
