"""
irtf_records.services.schedule_ingest

Schedule ingest service: delete-then-load across the five schedule tables.

Responsibilities:
- Delete each table's rows for the upload window, table by table.
- Reload each table from its staged file (file load) or row by row (explicit mode).
- Report one delete message and one insert message per table, in table order.

Each table step is independent and unguarded by a shared transaction: a failing
table is reported as `-1` and the remaining tables are still processed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.db.driver import SessionDriver
from irtf_records.db.errors import StorageError
from irtf_records.db.executor import Anomaly, Ok, QueryDescriptor, QueryExecutor, RowsAffected
from irtf_records.db.records import SCHEDULE_TABLE_ORDER, IngestRequest, LoadFile, ScheduleTable
from irtf_records.db.writers.base import RecordWriter
from irtf_records.db.writers.schedule import build_schedule_writers
from irtf_records.files.stats import FileStats, Filesystem, LocalFilesystem
from irtf_records.observability.logging import DiagnosticSink, get_logger


class ScheduleIngestService:
    def __init__(
        self,
        *,
        writers: Mapping[ScheduleTable, RecordWriter],
        filesystem: Filesystem,
        log: DiagnosticSink,
    ) -> None:
        self._writers = writers
        self._fs = filesystem
        self._log = log
        self.last_file_stats: dict[ScheduleTable, FileStats] = {}

    async def ingest_schedule(self, request: IngestRequest) -> list[str]:
        writers = self._dispatch_table()
        self.last_file_stats = {}
        self._log.info("schedule_ingest_started", file_load=request.file_load)

        deletes = {
            table: await self._delete_rows(writers[table], request.deletes.get(table))
            for table in SCHEDULE_TABLE_ORDER
        }
        if request.file_load:
            inserts = {
                table: await self._load_file(table, writers[table], request.files.get(table))
                for table in SCHEDULE_TABLE_ORDER
            }
        else:
            inserts = {
                table: await self._insert_rows(table, writers[table], request.rows.get(table, ()))
                for table in SCHEDULE_TABLE_ORDER
            }

        results: list[str] = []
        for table in SCHEDULE_TABLE_ORDER:
            results.append(deletes[table])
            results.append(inserts[table])
        self._log.info("schedule_ingest_finished", results=results)
        return results

    def _dispatch_table(self) -> dict[ScheduleTable, RecordWriter]:
        # A missing writer is a wiring fault, not a per-table data fault: it propagates.
        missing = [t.value for t in SCHEDULE_TABLE_ORDER if t not in self._writers]
        if missing:
            raise StorageError(f"No writer registered for schedule tables: {', '.join(missing)}.")
        return {table: self._writers[table] for table in SCHEDULE_TABLE_ORDER}

    async def _delete_rows(self, writer: RecordWriter, query: QueryDescriptor | None) -> str:
        if query is None:
            self._log.warning("schedule_delete_missing", table=writer.table)
            return f"No delete statement supplied for {writer.table} table."
        try:
            result = await writer.delete(query)
        except StorageError as e:
            self._log.error("schedule_delete_failed", table=writer.table, error=str(e))
            result = Anomaly(str(e))
        return self._describe(result, writer.table, "deleted from")

    async def _load_file(
        self, table: ScheduleTable, writer: RecordWriter, load_file: LoadFile | None
    ) -> str:
        if load_file is None or not self._fs.exists(load_file.path):
            path = "" if load_file is None else str(load_file.path)
            self._log.warning("schedule_load_file_missing", table=writer.table, path=path)
            return f"File not found: {path}"

        try:
            stats = self._fs.stat(load_file.path)
        except OSError as e:
            self._log.error("schedule_load_file_unreadable", table=writer.table, error=str(e))
            return self._describe(Anomaly(str(e)), writer.table, "inserted into")
        self.last_file_stats[table] = stats
        self._log.info("schedule_load_file", table=writer.table, **stats.as_dict())

        try:
            result = await writer.load(load_file.statement)
        except StorageError as e:
            self._log.error("schedule_load_failed", table=writer.table, error=str(e))
            result = Anomaly(str(e))
        return self._describe(result, writer.table, "inserted into")

    async def _insert_rows(
        self, table: ScheduleTable, writer: RecordWriter, rows: Sequence[Mapping[str, Any]]
    ) -> str:
        inserted = 0
        for index, row in enumerate(rows):
            try:
                result = await writer.insert(row)
            except StorageError as e:
                # Rows already inserted for this table stay; the table reports -1.
                self._log.error(
                    "schedule_insert_failed",
                    table=writer.table,
                    row_index=index,
                    inserted_before_failure=inserted,
                    error=str(e),
                )
                return self._describe(Anomaly(str(e)), writer.table, "inserted into")
            match result:
                case Ok(count=count):
                    inserted += count
                case Anomaly():
                    return self._describe(result, writer.table, "inserted into")
        return self._describe(Ok(inserted), writer.table, "inserted into")

    def _describe(self, result: RowsAffected, table_name: str, action: str) -> str:
        match result:
            case Ok(count=count):
                pass
            case Anomaly(raw=raw):
                self._log.warning(
                    "schedule_row_count_anomaly", table=table_name, action=action, raw=repr(raw)
                )
                count = -1
        noun = "record was" if count == 1 else "records were"
        return f"{count} {noun} {action} {table_name} table."


def build_schedule_ingest_service(
    session: AsyncSession,
    *,
    filesystem: Filesystem | None = None,
    log: DiagnosticSink | None = None,
) -> ScheduleIngestService:
    log = log or get_logger(__name__, database="troublelog")
    executor = QueryExecutor(SessionDriver(session), log=log)
    return ScheduleIngestService(
        writers=build_schedule_writers(executor),
        filesystem=filesystem or LocalFilesystem(),
        log=log,
    )


# --- Module Notes -----------------------------------------------------------
# Running the same file load twice when the delete matches nothing inserts every
# row again; the upload relies on the delete window, not on idempotent loads.
