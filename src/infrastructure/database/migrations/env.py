# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Alembic environment for the practice database.

The URL comes from DB_URL when set, otherwise from the DB_* settings.
Online migrations run over the asyncpg engine the application uses.

Usage:
    alembic upgrade head
    alembic upgrade head --sql   # offline, prints the DDL
"""

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from src.core.config.settings import DatabaseSettings
from src.infrastructure.database.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def database_url() -> str:
    """Practice database URL (asyncpg driver)."""
    return os.environ.get("DB_URL") or DatabaseSettings().url


def _run(**configure_kwargs: object) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        **configure_kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection: Connection) -> None:
    _run(connection=connection)


async def _run_online() -> None:
    engine = create_async_engine(database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _run(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online())
