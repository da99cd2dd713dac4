"""Alembic environment for the Rentas schema.

The target database is ``DATABASE_CONFIG__DATABASE_URL`` unless a URL is
given on the command line with ``alembic -x url=... upgrade head``.
"""

import asyncio
import logging

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from src.core.config import get_settings
from src.domain import models  # noqa: F401
from src.infrastructure.database.base import Base

logger = logging.getLogger("alembic.env")

COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def migration_url() -> str:
    """URL passed with ``-x url=`` or the configured database URL."""
    return context.get_x_argument(as_dictionary=True).get(
        "url", get_settings().database_config.database_url
    )


def run_offline() -> None:
    """Emit the migration SQL as text without connecting."""
    logger.info("Generating SQL for the rentas schema")
    context.configure(
        url=migration_url(),
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def apply_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection, target_metadata=Base.metadata, **COMPARE_OPTIONS
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    """Apply pending revisions over a single unpooled asyncpg connection."""
    engine = create_async_engine(
        migration_url(),
        poolclass=pool.NullPool,
        echo=get_settings().database_config.echo,
    )
    logger.info("Applying rentas migrations")
    try:
        async with engine.connect() as connection:
            await connection.run_sync(apply_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
