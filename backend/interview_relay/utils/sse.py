"""
Incremental Server-Sent-Events decoding and plain-text re-encoding.

The upstream speaks ``data: <json>\\n`` lines terminated by ``data: [DONE]``.
Text chunks (already decoded by httpx) may split a line anywhere, so the
decoder only ever acts on lines whose terminator it has seen. httpx.aiter_lines()
is not used because it flushes an unterminated final line at end of stream.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator

import orjson

from interview_relay.utils.exceptions import FrameParseError

logger = logging.getLogger(__name__)

# Constants
SSE_DATA_PREFIX = "data: "
SSE_DONE_PAYLOAD = "[DONE]"
LINE_TERMINATOR = "\n"


@dataclass
class SSEEvent:
    """A complete ``data:`` record from the upstream stream"""

    payload: str
    data: Any


def parse_event_payload(payload: str) -> Any:
    """Parse one SSE payload as JSON, raising FrameParseError on failure."""
    try:
        return orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise FrameParseError(payload, str(e)) from e


class SSEFrameDecoder:
    """
    Per-request SSE decoder.

    Holds the stream state: the pending partial line and the ``done``
    flag set once ``[DONE]`` is observed.

    Usage:
        decoder = SSEFrameDecoder()
        async for text in response.aiter_text():
            for event in decoder.feed(text):
                ...
            if decoder.done:
                break
        decoder.close()
    """

    def __init__(self):
        self._buffer = ""
        self.done = False
        self.skipped_lines = 0

    def feed(self, text: str) -> Iterator[SSEEvent]:
        """
        Consume one decoded text chunk and yield every complete event it finishes.

        Args:
            text: Decoded text from the transport, split at arbitrary points

        Yields:
            SSEEvent for each well-formed ``data:`` line, in arrival order
        """
        if self.done:
            return

        self._buffer += text

        lines = self._buffer.split(LINE_TERMINATOR)
        # Last piece has no terminator yet; keep it for the next chunk
        self._buffer = lines.pop()

        for line in lines:
            event = self._process_line(line)
            if event is not None:
                yield event
            if self.done:
                self._buffer = ""
                return

    def _process_line(self, line: str) -> SSEEvent | None:
        stripped = line.strip()
        if not stripped.startswith(SSE_DATA_PREFIX):
            # Comments, event:/id: fields, keep-alives and blank separators
            return None

        payload = stripped[len(SSE_DATA_PREFIX):]
        if payload == SSE_DONE_PAYLOAD:
            self.done = True
            return None

        try:
            return SSEEvent(payload=payload, data=parse_event_payload(payload))
        except FrameParseError as e:
            self.skipped_lines += 1
            logger.warning(f"Skipping SSE line: {e}")
            return None

    def close(self) -> None:
        """End the stream. A trailing line with no terminator is discarded."""
        residual = self._buffer
        if residual.strip() and not self.done:
            logger.debug(f"Discarding unterminated SSE fragment ({len(residual)} chars)")
        self._buffer = ""
        self.done = True


def encode_fragment(text: str) -> bytes:
    """Encode one text delta for the outbound ``text/plain`` stream."""
    return text.encode("utf-8")
