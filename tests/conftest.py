"""Test fixtures — a fresh database and a real app per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own Database handle (in-memory SQLite by default,
   one shared connection via StaticPool) with tables created from the
   ORM models, and dropped again afterwards.
2. The app's process-wide state (database handle, token service) is
   pointed at those per-test objects — the same slots the lifespan fills
   in production, so no dependency overrides are needed.
3. Auth is never mocked. Tests sign up and log in through the API and
   send real Bearer tokens, so ownership checks run for real.

Set BOOKSHELF_TEST_DATABASE_URL to run the suite against PostgreSQL.
"""

import os

os.environ.setdefault("BOOKSHELF_ENVIRONMENT", "test")
os.environ.setdefault("BOOKSHELF_BCRYPT_ROUNDS", "4")

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from bookshelf.auth.jwt import TokenService
from bookshelf.db.engine import Database
from bookshelf.db.models import Base
from bookshelf.main import app


TEST_DB_URL = os.environ.get("BOOKSHELF_TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
TEST_TOKEN_SECRET = "test-secret-do-not-use-in-production"

DEFAULT_PASSWORD = "Secret123"


@pytest_asyncio.fixture()
async def database():
    """Per-test store handle with a freshly created schema."""
    kwargs = {}
    if TEST_DB_URL.startswith("sqlite"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    db = Database(TEST_DB_URL, **kwargs)
    db.open()
    await db.create_all()
    try:
        yield db
    finally:
        async with db.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await db.close()


@pytest.fixture()
def tokens():
    return TokenService(TEST_TOKEN_SECRET)


@pytest_asyncio.fixture()
async def db_session(database):
    """A session for service-level tests that bypass HTTP."""
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture()
async def client(database, tokens):
    """HTTP client against the real app, wired to the per-test database."""
    app.state.database = database
    app.state.tokens = tokens

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(client):
    """Factory: sign up + log in a fresh user, return their id/email/headers."""

    async def _make(name: str = "Reader", password: str = DEFAULT_PASSWORD) -> dict:
        email = f"{name.lower()}-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/signup", json={"email": email, "password": password, "name": name}
        )
        assert r.status_code == 201, r.text

        r = await client.post("/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        token = r.json()["authToken"]
        return {
            "id": r.json()["id"],
            "email": email,
            "name": name,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest_asyncio.fixture()
async def alice(make_user):
    return await make_user("Alice")


@pytest_asyncio.fixture()
async def bob(make_user):
    return await make_user("Bob")


@pytest_asyncio.fixture()
async def book(client, alice):
    """A book created by alice."""
    r = await client.post(
        "/books",
        json={"title": "Dune", "author": "Frank Herbert", "pages": 412},
        headers=alice["headers"],
    )
    assert r.status_code == 201, r.text
    return r.json()
