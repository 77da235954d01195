"""Alembic environment: runs migrations over the async engine."""

import asyncio
import logging
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context
from gophkeeper.core.config import Settings
from gophkeeper.core.database import Base

# Import all models so they're registered with Base.metadata
from gophkeeper.models import (  # noqa: F401
    Card,
    Media,
    Note,
    Password,
    Session,
    User,
)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def get_database_url() -> str:
    """URL from ``alembic -x url=...``, GOPHKEEPER_DATABASE_URL, or the default.

    Full Settings are not loaded here so migrations run without the cipher key.
    """
    return (
        context.get_x_argument(as_dictionary=True).get("url")
        or os.environ.get("GOPHKEEPER_DATABASE_URL")
        or Settings.model_fields["database_url"].default
    )


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (emit SQL only)."""
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode using an async engine."""
    connectable = create_async_engine(get_database_url(), poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()
    logger.info("Migrations complete")


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
