"""
irtf_records.schedule.loadfile

Builds the inputs of a schedule ingest from parsed schedule rows.

Responsibilities:
- Delete queries for a full or partial reload of a semester.
- Staged bulk-load files (`infile.<table>.sql.csv`) and their LOAD DATA statements.
- Engineering-program rows derived from the program rows.
"""

from __future__ import annotations

import csv
import enum
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, time
from pathlib import Path
from typing import Any

from irtf_records.db.executor import QueryDescriptor
from irtf_records.db.records import SCHEDULE_TABLE_ORDER, IngestRequest, LoadFile, ScheduleTable
from irtf_records.db.writers.base import TableSpec
from irtf_records.db.writers.schedule import SCHEDULE_SPECS

# Night-by-night tables; a partial reload only replaces tonight and later.
_DAILY_TABLES = frozenset({ScheduleTable.schedule, ScheduleTable.instrument, ScheduleTable.operator})

ENGINEERING_PROGRAMS = range(900, 1000)


class LoadType(enum.StrEnum):
    full = "full"
    partial = "partial"


def today_log_id(now: datetime | None = None) -> int:
    """Unix timestamp of local midnight today: the first logID a partial load replaces."""
    now = now or datetime.now()
    return int(datetime.combine(now.date(), time.min).timestamp())


def build_delete_queries(
    semester_id: str, load_type: LoadType | str, log_id: int
) -> dict[ScheduleTable, QueryDescriptor]:
    kind = LoadType(str(load_type).lower())
    queries: dict[ScheduleTable, QueryDescriptor] = {}
    for table in SCHEDULE_TABLE_ORDER:
        name = SCHEDULE_SPECS[table].table
        if kind is LoadType.partial and table in _DAILY_TABLES:
            queries[table] = QueryDescriptor(
                sql=f"DELETE FROM `{name}` WHERE `semesterID` = ? AND `logID` >= ?",
                params=(semester_id, log_id),
                types="si",
            )
        else:
            queries[table] = QueryDescriptor(
                sql=f"DELETE FROM `{name}` WHERE `semesterID` = ?",
                params=(semester_id,),
                types="s",
            )
    return queries


def load_file_name(table: ScheduleTable) -> str:
    return f"infile.{table.value}.sql.csv"


def build_load_statement(path: Path, spec: TableSpec) -> str:
    # LOAD DATA takes the file name as a literal only, so it is escaped rather than bound.
    literal = str(path).replace("\\", "\\\\").replace("'", "\\'")
    columns = ", ".join(f"`{c}`" for c in spec.columns)
    return (
        f"LOAD DATA INFILE '{literal}' INTO TABLE `{spec.table}`\n"
        "FIELDS TERMINATED BY ';'\n"
        "ENCLOSED BY '\"'\n"
        "LINES TERMINATED BY '\\n'\n"
        "IGNORE 1 LINES\n"
        f"({columns})"
    )


def write_load_file(path: Path, spec: TableSpec, rows: Iterable[Mapping[str, Any]]) -> LoadFile:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(
            fh,
            delimiter=";",
            quotechar='"',
            quoting=csv.QUOTE_ALL,
            doublequote=False,
            escapechar="\\",
            lineterminator="\n",
        )
        writer.writerow(spec.columns)
        for row in rows:
            # Nullable columns are written empty, as the loader expects.
            writer.writerow(["" if row.get(c) is None else row.get(c) for c in spec.columns])
    return LoadFile(path=path, statement=build_load_statement(path, spec))


def derive_engineering_programs(
    program_rows: Sequence[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    seen: dict[int, dict[str, Any]] = {}
    for row in program_rows:
        program_id = int(row["programID"])
        if program_id in ENGINEERING_PROGRAMS and program_id not in seen:
            seen[program_id] = {
                "programID": program_id,
                "semesterID": row["semesterID"],
                "projectPI": row["projectPI"],
            }
    return [seen[k] for k in sorted(seen)]


def stage_load_files(
    directory: Path, rows: Mapping[ScheduleTable, Sequence[Mapping[str, Any]]]
) -> dict[ScheduleTable, LoadFile]:
    return {
        table: write_load_file(
            directory / load_file_name(table), SCHEDULE_SPECS[table], rows.get(table, ())
        )
        for table in SCHEDULE_TABLE_ORDER
    }


def drop_past_nights(
    rows: Mapping[ScheduleTable, Sequence[Mapping[str, Any]]],
    load_type: LoadType | str,
    log_id: int,
) -> dict[ScheduleTable, list[Mapping[str, Any]]]:
    """
    A partial load keeps the daily rows before `log_id`, so they must not be reloaded.

    Program and EngProgram rows are always kept.
    """
    partial = LoadType(str(load_type).lower()) is LoadType.partial
    return {
        table: [
            row
            for row in table_rows
            if not (partial and table in _DAILY_TABLES and int(row["logID"]) < log_id)
        ]
        for table, table_rows in rows.items()
    }


def build_ingest_request(
    *,
    semester_id: str,
    load_type: LoadType | str,
    rows: Mapping[ScheduleTable, Sequence[Mapping[str, Any]]],
    file_load: bool,
    staging_dir: Path | None = None,
    log_id: int | None = None,
) -> IngestRequest:
    log_id = today_log_id() if log_id is None else log_id
    rows = drop_past_nights(rows, load_type, log_id)
    if ScheduleTable.engprogram not in rows:
        rows[ScheduleTable.engprogram] = derive_engineering_programs(
            rows.get(ScheduleTable.program, ())
        )
    deletes = build_delete_queries(semester_id, load_type, log_id)
    if not file_load:
        return IngestRequest(file_load=False, deletes=deletes, rows=rows)
    if staging_dir is None:
        raise ValueError("staging_dir is required for a file load")
    return IngestRequest(
        file_load=True, deletes=deletes, files=stage_load_files(staging_dir, rows)
    )


# --- Module Notes -----------------------------------------------------------
# The staged files are written on the web host and read by the database server, so
# production needs both to see the same path (and the server's secure_file_priv).
