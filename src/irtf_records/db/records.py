"""
irtf_records.db.records

Plain value types passed into the storage core.

Responsibilities:
- `FeedbackRecord`: the validated parent row of a feedback submission.
- `ScheduleTable`: the five schedule tables, in processing order.
- `LoadFile` / `IngestRequest`: what a schedule ingest is asked to do.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from irtf_records.db.executor import QueryDescriptor


class ScheduleTable(enum.StrEnum):
    # Definition order is the processing order.
    schedule = "schedule"
    instrument = "instrument"
    operator = "operator"
    program = "program"
    engprogram = "engprogram"


SCHEDULE_TABLE_ORDER: tuple[ScheduleTable, ...] = tuple(ScheduleTable)

# Python field name -> legacy column name, where they differ.
_FEEDBACK_COLUMNS = {
    "to_rating": "TO_rating",
    "program_id": "programID",
    "semester_id": "semesterID",
}


@dataclass(frozen=True, slots=True)
class FeedbackRecord:
    start_date: int
    end_date: int
    technical_rating: int
    technical_comments: str
    scientific_staff_rating: int
    to_rating: int
    daycrew_rating: int
    personnel_comment: str
    scientific_results: str
    suggestions: str
    name: str
    email: str
    location: int
    program_id: int
    semester_id: str

    def as_row(self) -> dict[str, Any]:
        return {_FEEDBACK_COLUMNS.get(k, k): v for k, v in asdict(self).items()}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> FeedbackRecord:
        columns = {v: k for k, v in _FEEDBACK_COLUMNS.items()}
        values = {columns.get(k, k): v for k, v in row.items()}
        return cls(**{name: values[name] for name in cls.__dataclass_fields__})


@dataclass(frozen=True, slots=True)
class LoadFile:
    path: Path
    # LOAD DATA statement that reads `path`; built by `schedule.loadfile`.
    statement: str


@dataclass(frozen=True)
class IngestRequest:
    file_load: bool
    deletes: Mapping[ScheduleTable, QueryDescriptor] = field(default_factory=dict)
    files: Mapping[ScheduleTable, LoadFile] = field(default_factory=dict)
    rows: Mapping[ScheduleTable, Sequence[Mapping[str, Any]]] = field(default_factory=dict)
