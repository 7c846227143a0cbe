"""FastAPI application factory for the sales training simulator."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from salestrainer.core.config import Settings, get_settings
from salestrainer.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Prepare storage directories and tables; dispose the engine on shutdown."""
    start_time = datetime.now()
    settings: Settings = app.state.settings

    from salestrainer.api.health import set_app_start_time
    from salestrainer.core import db

    set_app_start_time(start_time)
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.audio_dir.mkdir(parents=True, exist_ok=True)

    if db.DATABASE_URL.startswith("sqlite"):
        await db.create_all()

    logger.info("app.startup", message="Sales trainer starting up", timestamp=start_time.isoformat())

    yield

    await db.engine.dispose()
    logger.info("app.shutdown", message="Sales trainer shutting down gracefully")


def _setup_middleware(app: FastAPI) -> None:
    """Configure middleware (last added = first executed)."""
    from salestrainer.middleware.logging import RequestIDMiddleware
    from salestrainer.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    # RequestIDMiddleware LAST so it runs FIRST
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from salestrainer.api.audio import router as audio_router
    from salestrainer.api.catalog import router as catalog_router
    from salestrainer.api.health import router as health_router
    from salestrainer.api.metrics import router as metrics_router
    from salestrainer.api.sessions import router as sessions_router

    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(sessions_router)
    app.include_router(audio_router)
    app.include_router(metrics_router)


def _mount_static(app: FastAPI, settings: Settings) -> None:
    """Serve synthesized audio and, when present, the front-end bundle."""
    app.mount(
        "/audio",
        StaticFiles(directory=str(settings.audio_dir), check_dir=False),
        name="audio",
    )

    static_dir = settings.static_dir.resolve()
    if static_dir.exists():
        # Mounted last so /api routes take precedence
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    else:
        logger.info("static.skipped", directory=str(static_dir))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Sales Trainer API",
        description="Conversational sales-training simulator with scored sessions",
        version="0.1.0",
        lifespan=lifespan,
    )

    from salestrainer.core.exception_handlers import register_exception_handlers
    from salestrainer.core.sentry import init_sentry
    from salestrainer.services.catalog import CatalogRepository
    from salestrainer.services.locks import SessionLocks

    init_sentry()
    register_exception_handlers(app)

    app.state.settings = settings
    app.state.catalog = CatalogRepository(
        settings.catalog_seed_path, sample_size=settings.catalog_sample_size
    )
    app.state.session_locks = SessionLocks()
    app.state.generative_client = None

    _setup_middleware(app)
    _register_routers(app)
    _mount_static(app, settings)

    logger.info("app.configured", environment=settings.environment, tts_enabled=settings.tts_enabled)

    return app


def run() -> None:
    """Console entrypoint; auto-reload only in development."""
    settings = get_settings()
    uvicorn.run(
        "salestrainer.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.environment == "development",
    )
