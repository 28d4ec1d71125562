"""FastAPI dependencies wiring settings and the shared HTTP client into handlers."""

import httpx
from fastapi import Depends, Request

from interview_relay.config import Settings, get_settings
from interview_relay.providers.groq import GroqClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared connection pool created in the app lifespan."""
    return request.app.state.http_client


def get_groq_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> GroqClient:
    """Per-request upstream client built from read-only settings."""
    return GroqClient.from_settings(settings, http_client)
