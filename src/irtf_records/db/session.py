"""
irtf_records.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create one async engine per database URL.
- Create the async sessionmaker the API dependencies open sessions from.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # The storage driver commits/rolls back explicitly; never autoflush ORM state behind it.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


# --- Module Notes -----------------------------------------------------------
# A session is the "single shared handle" a request works through: the feedback
# transaction and the schedule ingest each run on exactly one session.
