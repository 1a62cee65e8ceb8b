"""Test fixtures — a fresh database per test and a real auth pipeline.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine and freshly created tables. By default
   that's a SQLite file under tmp_path (via aiosqlite), so the suite runs
   without a database server; point TASKLIST_TEST_DATABASE_URL at
   PostgreSQL to run against the real thing.
2. The app's get_db is overridden to open sessions on that engine, one
   per request, exactly like production.
3. Auth is NOT mocked. Tests register/login through the API and send
   real bearer tokens, because the token pipeline is what's under test.
"""

import os

# Settings are read at import time, so these must be set first.
os.environ.setdefault("TASKLIST_JWT_SECRET", "test-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("TASKLIST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TASKLIST_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TASKLIST_CREATE_TABLES_ON_STARTUP", "false")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from tasklist.auth.dependencies import get_token_service  # noqa: E402
from tasklist.db.engine import build_engine, get_db  # noqa: E402
from tasklist.db.models import Base  # noqa: E402
from tasklist.main import app  # noqa: E402

STRONG_PASSWORD = "Password123!"


@pytest_asyncio.fixture()
async def db_engine(tmp_path):
    """Engine on an empty schema, disposed after the test."""
    url = os.environ.get("TASKLIST_TEST_DATABASE_URL") or (
        f"sqlite+aiosqlite:///{tmp_path / 'tasklist.db'}"
    )
    engine = build_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Session for arranging data and inspecting results directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client against the app with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def tokens():
    """The token service the app signs with."""
    return get_token_service()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client, email: str, password: str = STRONG_PASSWORD) -> tuple[dict, str]:
    """Register through the API; returns (user, token)."""
    r = await client.post(
        "/api/v1/users",
        json={"user": {"email": email, "password": password}},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return body["user"], body["token"]


async def create_todo(client, token: str, title: str) -> dict:
    r = await client.post(
        "/api/v1/todos",
        json={"todo": {"title": title}},
        headers=auth_headers(token),
    )
    assert r.status_code == 201, r.text
    return r.json()
