"""Async SQLAlchemy store handle.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

The engine is not created at import time. A Database is constructed
explicitly, opened in the app lifespan and closed on shutdown, and lives
on app.state — so tests (and the CLI) can point a fresh one anywhere.
"""

from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bookshelf.config import Settings
from bookshelf.db.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off; the library_books association
    # relies on it to reject unknown book ids.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one process."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self.engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        kwargs = {}
        if not settings.database_url.startswith("sqlite"):
            # Connection pool: min 5, max 20 connections.
            kwargs = {"pool_size": 5, "max_overflow": 15}
        return cls(settings.database_url, echo=settings.debug, **kwargs)

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.url, echo=self.echo, **self.engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def close(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._session_factory = None

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    async def create_all(self) -> None:
        """Create tables straight from the models (tests, local sqlite).

        Deployed databases are migrated with alembic instead.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
