"""FastAPI application factory with lifespan for speech_intent."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from speech_intent import __version__
from speech_intent.intent.classifier import IntentClassifier, LLMIntentClassifier
from speech_intent.observability import configure_logging
from speech_intent.pipeline.service import TEXT_REQUIRED
from speech_intent.providers.factory import build_provider
from speech_intent.settings import SpeechIntentSettings, get_settings
from speech_intent.storage.database import Database


def create_app(
    settings: SpeechIntentSettings | None = None,
    *,
    database: Database | None = None,
    classifier: IntentClassifier | None = None,
) -> FastAPI:
    """Build the app.  *database* and *classifier* replace the ones the
    lifespan would otherwise construct from *settings*."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup: connect DB, build classifier. Shutdown: dispose engine."""
        db = database or Database(settings.database_url, echo=settings.debug)
        await db.connect()
        app.state.db = db
        if classifier is None:
            provider = build_provider(settings)
            app.state.classifier = LLMIntentClassifier(provider)
            logger.info(f"Intent classifier using {type(provider).__name__} ({provider.get_default_model()})")
        else:
            app.state.classifier = classifier
        logger.info(f"{settings.app_name} ready (env={settings.env})")
        try:
            yield
        finally:
            await db.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"message": TEXT_REQUIRED})

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}: {exc}")
        message = (
            "An internal server error occurred."
            if settings.is_production
            else f"Internal Server Error: {exc}"
        )
        return JSONResponse(status_code=500, content={"message": message})

    # ── mount routers ──
    from speech_intent.api.routes import health, speech

    app.include_router(health.router, tags=["health"])
    app.include_router(speech.router, prefix="/api", tags=["speech"])

    return app
