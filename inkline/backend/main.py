"""
InkLine backend application.

Run with ``python cli.py --service server`` or ``uvicorn inkline.backend.main:app``.
The app object is built lazily so that importing this module never reads
configuration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkline.backend.api import health, share
from inkline.backend.api.v1 import router as api_v1_router
from inkline.backend.core.config import get_app_config
from inkline.backend.core.config_schema import ApplicationSchema
from inkline.backend.core.database import create_tables, dispose_engine
from inkline.backend.core.exception_handlers import register_exception_handlers
from inkline.backend.core.logging import get_logger, setup_logging
from inkline.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_app_config()
    setup_logging()
    if config.features.database_create_tables:
        await create_tables()

    logger.info(
        "InkLine backend started",
        extra={
            "env": config.application.environment,
            "note_limit": config.notes.note_limit,
            "quota_policy": config.notes.quota_policy.value,
            "sharing_enabled": config.features.sharing_enabled,
        },
    )
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("InkLine backend stopped")


def _add_middleware(app: FastAPI, settings: ApplicationSchema) -> None:
    # Starlette runs the last-added middleware first
    app.add_middleware(RequestContextMiddleware)
    if settings.cors.origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors.origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )


def create_app() -> FastAPI:
    settings = get_app_config().application
    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    _add_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(share.router, tags=["share"])
    app.include_router(api_v1_router, prefix=settings.api_prefix)
    return app


def get_app() -> FastAPI:
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    # ``uvicorn inkline.backend.main:app`` resolves the module attribute lazily
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
