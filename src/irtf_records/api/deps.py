"""
irtf_records.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide the app's settings and one request-scoped session per database.
- Encapsulate app.state access patterns (engines/sessionmakers).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings the app was built with, not a fresh env read.
    return request.app.state.settings  # type: ignore[no-any-return]


async def feedback_session(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.feedback_sessionmaker() as session:
        yield session


async def troublelog_session(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.troublelog_sessionmaker() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Commit/rollback is owned by the storage driver and services, never by these
# dependencies; closing the session discards anything left uncommitted.
