"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
the speech / extraction / storage services on ``app.state``, routers and
the health endpoint. The module-level ``app`` instance allows
``uvicorn craftstory.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from craftstory import __version__
from craftstory.api.middleware.error_handler import register_error_handlers
from craftstory.api.routes import assistant, crafts, onboarding, profiles, speech
from craftstory.core.config import Settings, get_settings
from craftstory.core.languages import LANGUAGES
from craftstory.core.models import HealthResponse, LanguageResponse
from craftstory.services.assistant import ConversationRegistry
from craftstory.services.extraction import ProfileExtractor
from craftstory.services.llm import create_llm
from craftstory.services.onboarding import FlowRegistry
from craftstory.services.storage import SQLProfileStore
from craftstory.services.storage.database import close_db, init_db
from craftstory.services.synthesis import create_tts
from craftstory.services.transcription import create_stt


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the profile tables on startup; dispose the engine on shutdown."""
    await init_db()
    yield
    await close_db()


def _init_services(app: FastAPI, settings: Settings) -> None:
    """Wire provider adapters and the flow / conversation registries."""
    stt = create_stt(settings)
    tts = create_tts(settings)
    extractor = ProfileExtractor(create_llm(settings))
    store = SQLProfileStore()

    app.state.stt = stt
    app.state.tts = tts
    app.state.extractor = extractor
    app.state.profile_store = store
    app.state.flows = FlowRegistry(
        stt=stt,
        extractor=extractor,
        store=store,
        tts=tts,
        default_language=settings.default_language,
    )
    app.state.conversations = ConversationRegistry(extractor=extractor, stt=stt, tts=tts)


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    logging.getLogger("craftstory").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="CraftStory",
        description="Guided voice onboarding and assistant for artisans.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    _init_services(app, settings)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    @app.get("/api/v1/languages", response_model=list[LanguageResponse], tags=["system"])
    async def languages() -> list[LanguageResponse]:
        return [
            LanguageResponse(
                code=lang.code,
                name=lang.name,
                native_name=lang.native_name,
                speech_code=lang.speech_code,
                tts_code=lang.tts_code,
                region=lang.region,
            )
            for lang in LANGUAGES
        ]

    # -- REST routes --
    app.include_router(onboarding.router, prefix="/api/v1")
    app.include_router(profiles.router, prefix="/api/v1")
    app.include_router(speech.router, prefix="/api/v1")
    app.include_router(crafts.router, prefix="/api/v1")
    app.include_router(assistant.router, prefix="/api/v1")

    return app


app = create_app()
