"""
irtf_records.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) checking both databases.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.api.deps import feedback_session, troublelog_session

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    feedback: AsyncSession = Depends(feedback_session),
    troublelog: AsyncSession = Depends(troublelog_session),
) -> dict[str, str]:
    await feedback.execute(text("SELECT 1"))
    await troublelog.execute(text("SELECT 1"))
    return {"status": "ready"}
