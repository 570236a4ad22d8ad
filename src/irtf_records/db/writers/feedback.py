"""
irtf_records.db.writers.feedback

Writers for the feedback database: the parent `feedback` row and its three link tables.
"""

from __future__ import annotations

from dataclasses import dataclass

from irtf_records.db.executor import QueryExecutor, RowsAffected
from irtf_records.db.records import FeedbackRecord
from irtf_records.db.writers.base import RecordWriter, TableSpec

FEEDBACK_SPEC = TableSpec(
    table="feedback",
    columns=(
        "start_date",
        "end_date",
        "technical_rating",
        "technical_comments",
        "scientific_staff_rating",
        "TO_rating",
        "daycrew_rating",
        "personnel_comment",
        "scientific_results",
        "suggestions",
        "name",
        "email",
        "location",
        "programID",
        "semesterID",
    ),
    types="iiisiiisssssiis",
    failure_message="Feedback insert failed.",
)

INSTRUMENT_SPEC = TableSpec(
    table="instrument",
    columns=("feedback_id", "hardwareID"),
    types="is",
    failure_message="Instrument insert failed.",
)

OPERATOR_SPEC = TableSpec(
    table="operator",
    columns=("feedback_id", "operatorID"),
    types="is",
    failure_message="Telescope operator insert failed.",
)

SUPPORT_SPEC = TableSpec(
    table="support",
    columns=("feedback_id", "supportID"),
    types="is",
    failure_message="Support astronomer insert failed.",
)


class FeedbackWriter(RecordWriter):
    def __init__(self, executor: QueryExecutor) -> None:
        super().__init__(executor, FEEDBACK_SPEC)

    async def insert_feedback(self, record: FeedbackRecord) -> RowsAffected:
        return await self.insert(record.as_row())

    async def last_insert_id(self) -> int:
        return await self._executor.driver.last_insert_id()


class LinkWriter(RecordWriter):
    """
    Inserts one `(feedback_id, entity id)` row into a link table.
    """

    def __init__(self, executor: QueryExecutor, spec: TableSpec) -> None:
        super().__init__(executor, spec)
        self._entity_column = spec.columns[1]

    async def insert_link(self, feedback_id: int, entity_id: str) -> RowsAffected:
        return await self.insert({"feedback_id": feedback_id, self._entity_column: entity_id})


@dataclass(frozen=True, slots=True)
class FeedbackWriters:
    feedback: FeedbackWriter | None
    instrument: LinkWriter | None
    operator: LinkWriter | None
    support: LinkWriter | None


def build_feedback_writers(executor: QueryExecutor) -> FeedbackWriters:
    return FeedbackWriters(
        feedback=FeedbackWriter(executor),
        instrument=LinkWriter(executor, INSTRUMENT_SPEC),
        operator=LinkWriter(executor, OPERATOR_SPEC),
        support=LinkWriter(executor, SUPPORT_SPEC),
    )
