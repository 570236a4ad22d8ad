"""
tests.test_feedback_roundtrip

Feedback writes and reads against a real SQLite database through `SessionDriver`.

Responsibilities:
- A committed submission reads back with its link rows in insertion order.
- A failed submission leaves no rows behind in any table.
"""

from __future__ import annotations

import pytest

from irtf_records.db.driver import SessionDriver
from irtf_records.db.errors import StorageError
from irtf_records.db.executor import QueryExecutor
from irtf_records.db.readers.feedback import FEEDBACK_NOT_FOUND
from irtf_records.db.records import FeedbackRecord
from irtf_records.db.transaction import TransactionManager
from irtf_records.db.writers.base import TableSpec
from irtf_records.db.writers.feedback import FeedbackWriters, LinkWriter, build_feedback_writers
from irtf_records.services.feedback_service import (
    FeedbackService,
    build_feedback_reader,
    build_feedback_service,
)
from tests.conftest import RecordingSink, count_rows


@pytest.mark.asyncio
async def test_submission_round_trip(feedback_db, feedback_record: FeedbackRecord) -> None:
    async with feedback_db() as session:
        svc = build_feedback_service(session, log=RecordingSink())
        assert await svc.insert_feedback_with_dependencies(
            feedback_record, ["SpeX", "iSHELL"], ["TO-1"], ["SA-2", "SA-7"]
        )
        feedback_id = svc.feedback_id

    async with feedback_db() as session:
        detail = await build_feedback_reader(session, log=RecordingSink()).fetch_feedback(
            feedback_id
        )

    assert detail.record == feedback_record
    assert detail.instruments == ["SpeX", "iSHELL"]
    assert detail.operators == ["TO-1"]
    assert detail.support == ["SA-2", "SA-7"]


@pytest.mark.asyncio
async def test_failed_submission_leaves_nothing(
    feedback_db, feedback_record: FeedbackRecord
) -> None:
    sink = RecordingSink()
    async with feedback_db() as session:
        driver = SessionDriver(session)
        executor = QueryExecutor(driver, log=sink)
        writers = build_feedback_writers(executor)
        broken_support = TableSpec(
            table="no_such_table",
            columns=("feedback_id", "supportID"),
            types="is",
            failure_message="Support astronomer insert failed.",
        )
        svc = FeedbackService(
            transactions=TransactionManager(driver),
            writers=FeedbackWriters(
                feedback=writers.feedback,
                instrument=writers.instrument,
                operator=writers.operator,
                support=LinkWriter(executor, broken_support),
            ),
            log=sink,
        )

        with pytest.raises(StorageError, match="^Transaction failed: Error executing"):
            await svc.insert_feedback_with_dependencies(
                feedback_record, ["SpeX"], ["TO-1", "TO-2"], ["SA-2"]
            )

    async with feedback_db() as session:
        for table in ("feedback", "instrument", "operator", "support"):
            assert await count_rows(session, table) == 0


@pytest.mark.asyncio
async def test_missing_feedback_is_reported(feedback_db) -> None:
    async with feedback_db() as session:
        reader = build_feedback_reader(session, log=RecordingSink())
        with pytest.raises(StorageError, match=f"^{FEEDBACK_NOT_FOUND}$"):
            await reader.fetch_feedback(12345)


@pytest.mark.asyncio
async def test_program_listing_order(feedback_db, feedback_record: FeedbackRecord) -> None:
    from dataclasses import replace

    async with feedback_db() as session:
        svc = build_feedback_service(session, log=RecordingSink())
        for start in (300, 100, 200):
            await svc.insert_feedback_with_dependencies(
                replace(feedback_record, start_date=start), [], [], []
            )
        await svc.insert_feedback_with_dependencies(
            replace(feedback_record, start_date=50, semester_id="2024A"), [], [], []
        )

        reader = build_feedback_reader(session, log=RecordingSink())
        ascending = await reader.list_program_feedback(42, "2024B")
        descending = await reader.list_program_feedback(42, "2024B", ascending=False)

    assert [r["start_date"] for r in ascending] == [100, 200, 300]
    assert [r["start_date"] for r in descending] == [300, 200, 100]


@pytest.mark.asyncio
async def test_rolled_back_insert_id_is_forgotten(
    feedback_db, feedback_record: FeedbackRecord
) -> None:
    async with feedback_db() as session:
        driver = SessionDriver(session)
        writers = build_feedback_writers(QueryExecutor(driver, log=RecordingSink()))

        await driver.begin()
        await writers.feedback.insert_feedback(feedback_record)
        assert await driver.last_insert_id() > 0
        await driver.rollback()

        with pytest.raises(StorageError, match="No insert has been executed"):
            await driver.last_insert_id()
        assert await count_rows(session, "feedback") == 0
