"""
irtf_records.api.routers.schedule

Schedule upload endpoint.

Responsibilities:
- Accept parsed schedule rows for a semester.
- Build the delete queries and (for file loads) stage the bulk-load files.
- Run the ingest and return its per-table report.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.api.deps import settings_dep, troublelog_session
from irtf_records.db.records import ScheduleTable
from irtf_records.schedule.loadfile import LoadType, build_ingest_request
from irtf_records.services.schedule_ingest import build_schedule_ingest_service
from irtf_records.settings import Settings

router = APIRouter(prefix="/v1/schedule", tags=["schedule"])


class ScheduleUpload(BaseModel):
    semester_id: str = Field(min_length=5, max_length=8)
    load_type: LoadType = LoadType.full
    # First night replaced by a partial load; defaults to today.
    log_id: int | None = None
    file_load: bool = True
    rows: dict[ScheduleTable, list[dict[str, Any]]] = Field(default_factory=dict)


class ScheduleIngestResponse(BaseModel):
    results: list[str]


@router.post("/ingest", response_model=ScheduleIngestResponse)
async def ingest_schedule(
    body: ScheduleUpload,
    session: AsyncSession = Depends(troublelog_session),
    settings: Settings = Depends(settings_dep),
) -> ScheduleIngestResponse:
    request = build_ingest_request(
        semester_id=body.semester_id,
        load_type=body.load_type,
        rows=body.rows,
        file_load=body.file_load,
        staging_dir=settings.schedule_data_dir,
        log_id=body.log_id,
    )
    results = await build_schedule_ingest_service(session).ingest_schedule(request)
    return ScheduleIngestResponse(results=results)


# --- Module Notes -----------------------------------------------------------
# The report is returned with 200 even when some tables failed; per-table failures
# show up as "-1 records ..." lines, not as an HTTP error.
