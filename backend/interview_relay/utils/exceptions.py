"""
Relay error taxonomy and the FastAPI handlers that turn it into responses.

Every error reaching the request boundary is rendered as ``{"error": str}``:

    from interview_relay.utils.exceptions import UpstreamError

    raise UpstreamError(429, "rate limited")
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class RelayError(Exception):
    """Base class for errors surfaced to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(RelayError):
    """Required configuration (the upstream credential) is missing."""


class UpstreamError(RelayError):
    """Upstream answered with a non-success status or an unusable body."""

    def __init__(self, status_code: Optional[int], body: str, provider: str = "Groq"):
        self.upstream_status = status_code
        self.body = body
        if status_code is None:
            message = f"{provider} API Error: {body}"
        else:
            message = f"{provider} API Error: {status_code} - {body}"
        super().__init__(message)


class BadRequestError(RelayError):
    """Inbound request body is malformed. Raised before contacting upstream."""

    status_code = status.HTTP_400_BAD_REQUEST


class FrameParseError(RelayError):
    """A single SSE data line could not be parsed. Always recovered locally."""

    def __init__(self, payload: str, reason: str):
        self.payload = payload
        super().__init__(f"Malformed SSE payload ({reason}): {payload[:200]!r}")


class TransportError(Exception):
    """Upstream connection dropped mid-stream.

    Raised only after the response has started. Not a RelayError, so no JSON
    handler catches it and the server aborts the stream.
    """


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body validation failures in the same ``{"error": ...}`` envelope."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    detail = "; ".join(parts) or "Invalid request body"
    return JSONResponse(
        {"error": f"Bad request: {detail}"},
        status_code=BadRequestError.status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
