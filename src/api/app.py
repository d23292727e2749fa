"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn src.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import register_error_handlers
from src.api.routes import speech, transcribe, translate
from src.core.config import get_settings
from src.core.models import HealthResponse
from src.core.utils import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Startup: configure logging and warn when the provider credential is
    missing. Requests will then fail individually instead of blocking startup.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    if not settings.openai_api_key:
        logger.warning("WARNING: OPENAI_API_KEY is not set in environment variables!")
    yield


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application.

    Returns:
        FastAPI: The configured application, ready for ``uvicorn``.
    """

    app = FastAPI(
        title="VoiceBridge",
        description="Voice-to-voice translation: transcription, translation, "
        "and speech synthesis through a hosted AI provider.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- CORS --
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(
            timestamp=datetime.now(UTC),
            provider_configured=bool(get_settings().openai_api_key),
        )

    # -- Provider proxies --
    app.include_router(transcribe.router, prefix="/api")
    app.include_router(translate.router, prefix="/api")
    app.include_router(speech.router, prefix="/api")

    return app


app = create_app()
