"""
alembic.env

Alembic migration environment for the two databases.

Responsibilities:
- Pick the target database with `alembic -x db=feedback|troublelog ...`.
- Run migrations offline (SQL script) or online over the async engine.

Notes:
- Executed by Alembic, never imported by the FastAPI runtime.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from irtf_records.db import models  # noqa: F401  # registers tables on both bases
from irtf_records.db.base import BASES
from irtf_records.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

database = context.get_x_argument(as_dictionary=True).get("db", "feedback")
if database not in BASES:
    raise SystemExit(f"unknown database {database!r}; expected one of {sorted(BASES)}")

target_metadata = BASES[database].metadata


def _get_database_url() -> str:
    settings = Settings()
    return getattr(settings, f"{database}_database_url")


def run_migrations_offline() -> None:
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = async_engine_from_config(
        configuration, prefix="sqlalchemy.", poolclass=pool.NullPool
    )

    async with connectable.connect() as connection:
        await connection.run_sync(_run_sync_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())


# --- Module Notes -----------------------------------------------------------
# Each database keeps its own alembic_version table, so run every revision command
# once per `-x db=` value.
