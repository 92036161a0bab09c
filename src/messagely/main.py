"""FastAPI application factory.

create_app() returns a configured FastAPI instance. Lifespan manages
startup/shutdown; middleware, exception handlers, and routers are all
registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from messagely import __version__
from messagely.api import api_router
from messagely.config import settings
from messagely.errors import register_exception_handlers
from messagely.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "messagely.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    # Dev convenience: SQLite databases get their tables on first start.
    if settings.environment == "development" and settings.database_url.startswith("sqlite"):
        from messagely.db.engine import create_schema
        await create_schema()

    # Build the timing-equalizer hash off the event loop before serving.
    from messagely.auth.dependencies import get_password_hasher
    await get_password_hasher().warm_up()

    yield

    logger.info("messagely.shutdown")

    from messagely.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings)

    app = FastAPI(
        title="Messagely",
        description="Private user-to-user messaging",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → Security → RequestId → handler

    from messagely.middleware.request_id import RequestIdMiddleware
    from messagely.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: messagely.main:app)
app = create_app()
