"""
irtf_records.db.writers.schedule

Writers for the five troublelog tables reloaded by a schedule upload.

Column lists double as the header line and column list of the bulk-load files.
"""

from __future__ import annotations

from irtf_records.db.executor import QueryExecutor
from irtf_records.db.records import SCHEDULE_TABLE_ORDER, ScheduleTable
from irtf_records.db.writers.base import RecordWriter, TableSpec

SCHEDULE_SPECS: dict[ScheduleTable, TableSpec] = {
    ScheduleTable.schedule: TableSpec(
        table="ScheduleObs",
        columns=(
            "logID",
            "startTime",
            "semesterID",
            "endTime",
            "remoteObs",
            "daytimeObs",
            "firstTime",
            "facilityOpen",
            "facilityClose",
            "instrumentChange",
            "facilityShutdown",
            "supportAstronomerID",
            "programID",
            "comments",
        ),
        types="iisiiiiiiiisis",
        failure_message="ScheduleObs insert failed.",
    ),
    ScheduleTable.instrument: TableSpec(
        table="DailyInstrument",
        columns=("logID", "startTime", "semesterID", "programID", "hardwareID", "rank"),
        types="iisisi",
        failure_message="DailyInstrument insert failed.",
    ),
    ScheduleTable.operator: TableSpec(
        table="DailyOperator",
        columns=(
            "logID",
            "startTime",
            "semesterID",
            "programID",
            "operatorID",
            "arrive",
            "depart",
            "overlap",
        ),
        types="iisisiii",
        failure_message="DailyOperator insert failed.",
    ),
    ScheduleTable.program: TableSpec(
        table="Program",
        columns=(
            "programID",
            "semesterID",
            "projectPI",
            "projectMembers",
            "otherInfo",
            "PIName",
            "PIEmail",
        ),
        types="issssss",
        failure_message="Program insert failed.",
    ),
    ScheduleTable.engprogram: TableSpec(
        table="EngProgram",
        columns=("programID", "semesterID", "projectPI"),
        types="iss",
        failure_message="EngProgram insert failed.",
    ),
}


def build_schedule_writers(executor: QueryExecutor) -> dict[ScheduleTable, RecordWriter]:
    return {table: RecordWriter(executor, SCHEDULE_SPECS[table]) for table in SCHEDULE_TABLE_ORDER}
