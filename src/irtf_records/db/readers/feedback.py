"""
irtf_records.db.readers.feedback

Reads committed feedback back out of the feedback database.

Responsibilities:
- Fetch one submission (parent row plus its instrument/operator/support ids).
- List a program's submissions for a semester in either date order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from irtf_records.db.executor import QueryDescriptor, QueryExecutor
from irtf_records.db.records import FeedbackRecord
from irtf_records.db.writers.base import TableSpec
from irtf_records.db.writers.feedback import (
    FEEDBACK_SPEC,
    INSTRUMENT_SPEC,
    OPERATOR_SPEC,
    SUPPORT_SPEC,
)

FEEDBACK_NOT_FOUND = "No feedback found for the given id."

_FEEDBACK_FIELDS = ", ".join(f"`{c}`" for c in FEEDBACK_SPEC.columns)


@dataclass(frozen=True, slots=True)
class FeedbackDetail:
    feedback_id: int
    record: FeedbackRecord
    instruments: list[str]
    operators: list[str]
    support: list[str]


class FeedbackReader:
    def __init__(self, executor: QueryExecutor) -> None:
        self._executor = executor

    async def fetch_feedback(self, feedback_id: int) -> FeedbackDetail:
        rows = await self._executor.fetch_rows(
            QueryDescriptor(
                sql=f"SELECT {_FEEDBACK_FIELDS} FROM `feedback` WHERE `feedback_id` = ?",
                params=(feedback_id,),
                types="i",
                error_message=FEEDBACK_NOT_FOUND,
            )
        )
        return FeedbackDetail(
            feedback_id=feedback_id,
            record=FeedbackRecord.from_row(rows[0]),
            instruments=await self._fetch_links(INSTRUMENT_SPEC, feedback_id),
            operators=await self._fetch_links(OPERATOR_SPEC, feedback_id),
            support=await self._fetch_links(SUPPORT_SPEC, feedback_id),
        )

    async def list_program_feedback(
        self, program_id: int, semester_id: str, *, ascending: bool = True
    ) -> list[dict[str, Any]]:
        direction = self._executor.sort_direction(ascending)
        return await self._executor.fetch_rows(
            QueryDescriptor(
                sql=(
                    "SELECT `feedback_id`, `start_date`, `end_date`, `name`, `email` "
                    "FROM `feedback` WHERE `programID` = ? AND `semesterID` = ? "
                    f"ORDER BY `start_date` {direction}, `feedback_id` {direction}"
                ),
                params=(program_id, semester_id),
                types="is",
            )
        )

    async def _fetch_links(self, spec: TableSpec, feedback_id: int) -> list[str]:
        # Link rows are optional; an empty list is a valid answer.
        entity_column = spec.columns[1]
        rows = await self._executor.fetch_rows(
            QueryDescriptor(
                sql=(
                    f"SELECT `{entity_column}` FROM `{spec.table}` "
                    "WHERE `feedback_id` = ? ORDER BY `id` ASC"
                ),
                params=(feedback_id,),
                types="i",
            )
        )
        return [str(row[entity_column]) for row in rows]
