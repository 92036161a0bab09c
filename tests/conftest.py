"""Test fixtures: a fresh in-memory SQLite database per test.

Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine on `sqlite+aiosqlite://` with a StaticPool,
   so every session in the test shares one in-memory database.
2. Tables are created with Base.metadata.create_all, no migrations.
3. The app's get_db dependency is overridden to hand out sessions bound
   to that engine; the database vanishes when the engine is disposed.

bcrypt runs at its minimum cost (4 rounds) so the suite stays fast. The
env var must be set before messagely.config is imported.
"""

import os

os.environ.setdefault("MESSAGELY_BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("MESSAGELY_DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from messagely.auth.jwt import SessionIssuer
from messagely.auth.password import PasswordHasher
from messagely.db.engine import build_engine, create_schema, get_db
from messagely.main import app

TEST_DB_URL = "sqlite+aiosqlite://"
DEFAULT_PASSWORD = "password_123"


@pytest_asyncio.fixture()
async def engine():
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for testing services directly, without HTTP."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture()
def issuer():
    return SessionIssuer(secret="test-secret", algorithm="HS256")


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db pointed at the test database.

    Auth is NOT overridden: every protected request must carry a real
    token obtained through /auth/register or /auth/login.
    """

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def register_user(client):
    """Register a user through the API and return its bearer token."""

    async def _register(username: str, password: str = DEFAULT_PASSWORD, **profile) -> str:
        body = {
            "username": username,
            "password": password,
            "first_name": profile.get("first_name", username.title()),
            "last_name": profile.get("last_name", "Tester"),
            "phone": profile.get("phone", "555-0100"),
        }
        r = await client.post("/auth/register", json=body)
        assert r.status_code == 200, r.text
        return r.json()["token"]

    return _register
