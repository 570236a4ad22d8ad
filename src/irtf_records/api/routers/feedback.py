"""
irtf_records.api.routers.feedback

Feedback form endpoints.

Responsibilities:
- Accept a validated feedback submission and store it transactionally.
- Read a stored submission back, and list a program's submissions.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from irtf_records.api.deps import feedback_session
from irtf_records.db.errors import StorageError
from irtf_records.db.readers.feedback import FEEDBACK_NOT_FOUND
from irtf_records.db.records import FeedbackRecord
from irtf_records.services.feedback_service import build_feedback_reader, build_feedback_service

router = APIRouter(prefix="/v1/feedback", tags=["feedback"])

_LINK_FIELDS = {"instruments", "operators", "support_astronomers"}


class FeedbackSubmission(BaseModel):
    start_date: int
    end_date: int
    technical_rating: int = Field(ge=0, le=5)
    technical_comments: str = ""
    scientific_staff_rating: int = Field(ge=0, le=5)
    to_rating: int = Field(ge=0, le=5)
    daycrew_rating: int = Field(ge=0, le=5)
    personnel_comment: str = ""
    scientific_results: str = ""
    suggestions: str = ""
    name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=256)
    location: int
    program_id: int = Field(ge=0)
    semester_id: str = Field(min_length=5, max_length=8)

    instruments: list[str] = Field(default_factory=list)
    operators: list[str] = Field(default_factory=list)
    support_astronomers: list[str] = Field(default_factory=list)

    def to_record(self) -> FeedbackRecord:
        return FeedbackRecord(**self.model_dump(exclude=_LINK_FIELDS))


class FeedbackCreated(BaseModel):
    feedback_id: int


@router.post("", response_model=FeedbackCreated, status_code=HTTP_201_CREATED)
async def submit_feedback(
    body: FeedbackSubmission,
    session: AsyncSession = Depends(feedback_session),
) -> FeedbackCreated:
    # A failed transaction raises StorageError, rendered by the app-level handler.
    svc = build_feedback_service(session)
    await svc.insert_feedback_with_dependencies(
        body.to_record(), body.instruments, body.operators, body.support_astronomers
    )
    return FeedbackCreated(feedback_id=svc.feedback_id)


@router.get("/programs/{program_id}")
async def list_program_feedback(
    program_id: int,
    semester_id: str = Query(min_length=5, max_length=8),
    ascending: bool = True,
    session: AsyncSession = Depends(feedback_session),
) -> list[dict[str, Any]]:
    reader = build_feedback_reader(session)
    return await reader.list_program_feedback(program_id, semester_id, ascending=ascending)


@router.get("/{feedback_id}")
async def get_feedback(
    feedback_id: int,
    session: AsyncSession = Depends(feedback_session),
) -> dict[str, Any]:
    try:
        detail = await build_feedback_reader(session).fetch_feedback(feedback_id)
    except StorageError as e:
        if str(e) != FEEDBACK_NOT_FOUND:
            raise
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e
    return {
        "feedback_id": detail.feedback_id,
        **detail.record.as_row(),
        "instruments": detail.instruments,
        "operators": detail.operators,
        "support_astronomers": detail.support,
    }
