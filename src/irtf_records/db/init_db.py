"""
irtf_records.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for a named database on its engine.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from irtf_records.db import models  # noqa: F401  # registers tables on both bases
from irtf_records.db.base import BASES


async def init_db(engine: AsyncEngine, *, database: str) -> None:
    """
    Dev/test bootstrap: create the tables of `database` ("feedback" or "troublelog").
    """

    base = BASES[database]
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)
