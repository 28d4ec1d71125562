import logging

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from interview_relay.config import get_settings, setup_logging
from interview_relay.routes import chat, health, problems
from interview_relay.utils.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle events"""
    settings = get_settings()

    # Shared upstream connection pool; no per-request state lives here
    app.state.http_client = httpx.AsyncClient(timeout=float(settings.provider_timeout))
    logger.info(f"Relay ready: model={settings.groq_model}, base_url={settings.groq_base_url}")

    yield

    # Shutdown: Cleanup resources
    await app.state.http_client.aclose()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.debug)

    app = FastAPI(
        title="Interview Relay API",
        description="LLM chat relay for mock-interview practice",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware (useful when the frontend dev server runs on another port)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(chat.router, prefix="/api", tags=["chat"])
    app.include_router(problems.router, prefix="/api", tags=["problems"])
    return app


app = create_app()


def run():
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "interview_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
