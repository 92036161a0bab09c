"""Async SQLAlchemy engine and session factory.

SQLAlchemy 2.0 async mode. One engine per process, one AsyncSession
per request via the get_db dependency.

SQLite is the default backend; PostgreSQL (asyncpg) works by pointing
MESSAGELY_DATABASE_URL at it. SQLite needs foreign keys switched on per
connection, otherwise messages to unknown users would be accepted.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from messagely.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine, applying per-dialect connection setup."""
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # Connection pool: min 5, max 20 connections.
    kwargs.setdefault("pool_size", 5)
    kwargs.setdefault("max_overflow", 15)
    return create_async_engine(url, echo=echo, **kwargs)


engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory, each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency, yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_schema(target: AsyncEngine | None = None) -> None:
    """Create all tables (dev / tests). Production uses Alembic."""
    from messagely.db.models import Base

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
