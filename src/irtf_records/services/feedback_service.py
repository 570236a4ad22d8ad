"""
irtf_records.services.feedback_service

Feedback submission service (transaction owner).

Responsibilities:
- Insert the parent feedback row and every instrument/operator/support link row
  inside one transaction.
- Roll back and raise on the first failure; nothing partial is ever committed.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.db.driver import SessionDriver
from irtf_records.db.errors import StorageError
from irtf_records.db.executor import Anomaly, QueryExecutor, RowsAffected
from irtf_records.db.readers.feedback import FeedbackReader
from irtf_records.db.records import FeedbackRecord
from irtf_records.db.transaction import TransactionManager
from irtf_records.db.writers.base import RecordWriter
from irtf_records.db.writers.feedback import FeedbackWriters, LinkWriter, build_feedback_writers
from irtf_records.observability.logging import DiagnosticSink, get_logger


class FeedbackService:
    def __init__(
        self,
        *,
        transactions: TransactionManager,
        writers: FeedbackWriters,
        log: DiagnosticSink,
    ) -> None:
        self._tx = transactions
        self._writers = writers
        self._log = log
        self._feedback_id: int | None = None

    @property
    def feedback_id(self) -> int | None:
        """Id of the last committed submission, or None if the last call failed."""
        return self._feedback_id

    async def insert_feedback_with_dependencies(
        self,
        feedback: FeedbackRecord,
        instruments: Sequence[str],
        operators: Sequence[str],
        support_astronomers: Sequence[str],
    ) -> bool:
        self._feedback_id = None
        await self._tx.begin()
        try:
            writer = self._writers.feedback
            if writer is None:
                self._log.error("feedback_writer_missing")
                raise StorageError("FeedbackWrite is required for insert operations.")

            self._require_row(await writer.insert_feedback(feedback), writer)
            # The id is fetched separately; the link rows need it as their foreign key.
            feedback_id = await writer.last_insert_id()

            # Fixed order: instruments, then operators, then support astronomers.
            await self._insert_links(self._writers.instrument, "instrument", feedback_id, instruments)
            await self._insert_links(self._writers.operator, "operator", feedback_id, operators)
            await self._insert_links(
                self._writers.support, "support", feedback_id, support_astronomers
            )

            await self._tx.commit()
        except Exception as e:
            message = str(e)
            wrapped = f"Transaction failed: {message}"
            self._log.error("feedback_insert_failed", error=message)
            self._log.error("feedback_transaction_failed", error=wrapped)
            try:
                await self._tx.rollback()
            except StorageError as rollback_error:
                # The caller still gets the original failure.
                self._log.error("feedback_rollback_failed", error=str(rollback_error))
            raise StorageError(wrapped) from e

        self._feedback_id = feedback_id
        self._log.info(
            "feedback_inserted",
            feedback_id=feedback_id,
            instruments=len(instruments),
            operators=len(operators),
            support=len(support_astronomers),
        )
        return True

    async def _insert_links(
        self,
        writer: LinkWriter | None,
        kind: str,
        feedback_id: int,
        entity_ids: Sequence[str],
    ) -> None:
        if writer is None:
            if entity_ids:
                self._log.warning("feedback_link_writer_missing", table=kind, skipped=len(entity_ids))
            return
        for entity_id in entity_ids:
            self._require_row(await writer.insert_link(feedback_id, entity_id), writer)

    @staticmethod
    def _require_row(result: RowsAffected, writer: RecordWriter) -> None:
        # An unknown row count cannot prove the row exists; fail the transaction.
        match result:
            case Anomaly():
                raise StorageError(writer.spec.failure_message)


def build_feedback_service(
    session: AsyncSession, *, log: DiagnosticSink | None = None
) -> FeedbackService:
    log = log or get_logger(__name__, database="feedback")
    driver = SessionDriver(session)
    executor = QueryExecutor(driver, log=log)
    return FeedbackService(
        transactions=TransactionManager(driver),
        writers=build_feedback_writers(executor),
        log=log,
    )


def build_feedback_reader(
    session: AsyncSession, *, log: DiagnosticSink | None = None
) -> FeedbackReader:
    log = log or get_logger(__name__, database="feedback")
    return FeedbackReader(QueryExecutor(SessionDriver(session), log=log))


# --- Module Notes -----------------------------------------------------------
# The service always raises on failure (never returns False); callers that need a
# boolean outcome should catch StorageError at their own boundary.
