"""Alembic environment for the bookshelf schema.

Learn: migrations connect through the same ``Database`` handle the app
uses, so the URL comes from BOOKSHELF_DATABASE_URL (never alembic.ini)
and SQLite runs get the same foreign-key pragma as the server.

    alembic upgrade head                      # apply
    alembic revision --autogenerate -m "..."  # diff models.py against the DB
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from bookshelf.config import settings
from bookshelf.db.engine import Database
from bookshelf.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER most constraints in place; batch mode recreates tables.
IS_SQLITE = settings.database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout instead of executing it."""
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=IS_SQLITE,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    database = Database(settings.database_url, poolclass=pool.NullPool)
    database.open()
    try:
        async with database.engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await database.close()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
