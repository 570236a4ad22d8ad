"""
tests.test_loadfile

Delete queries, staged load files and ingest-request assembly.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from irtf_records.db.records import SCHEDULE_TABLE_ORDER, ScheduleTable
from irtf_records.db.writers.schedule import SCHEDULE_SPECS
from irtf_records.schedule.loadfile import (
    LoadType,
    build_delete_queries,
    build_ingest_request,
    build_load_statement,
    derive_engineering_programs,
    drop_past_nights,
    load_file_name,
    today_log_id,
    write_load_file,
)

PROGRAMS = [
    {"programID": 12, "semesterID": "2024B", "projectPI": "Rayner", "projectMembers": "",
     "otherInfo": "", "PIName": "J. Rayner", "PIEmail": "pi@example.edu"},
    {"programID": 907, "semesterID": "2024B", "projectPI": "Staff", "projectMembers": "",
     "otherInfo": "", "PIName": "Staff", "PIEmail": "staff@example.edu"},
    {"programID": 901, "semesterID": "2024B", "projectPI": "Engineering", "projectMembers": "",
     "otherInfo": "", "PIName": "Eng", "PIEmail": "eng@example.edu"},
]


def test_full_load_deletes_whole_semester() -> None:
    queries = build_delete_queries("2024B", LoadType.full, 1722500000)

    assert list(queries) == list(SCHEDULE_TABLE_ORDER)
    assert queries[ScheduleTable.schedule].sql == (
        "DELETE FROM `ScheduleObs` WHERE `semesterID` = ?"
    )
    assert all(q.params == ("2024B",) for q in queries.values())


def test_partial_load_keeps_past_nights_of_daily_tables() -> None:
    queries = build_delete_queries("2024B", "PARTIAL", 1722500000)

    for table in (ScheduleTable.schedule, ScheduleTable.instrument, ScheduleTable.operator):
        assert queries[table].sql.endswith("AND `logID` >= ?")
        assert queries[table].params == ("2024B", 1722500000)
        assert queries[table].types == "si"
    assert queries[ScheduleTable.program].params == ("2024B",)


def test_unknown_load_type_rejected() -> None:
    with pytest.raises(ValueError):
        build_delete_queries("2024B", "weekly", 0)


def test_today_log_id_is_local_midnight() -> None:
    now = datetime(2024, 8, 1, 15, 30)

    assert today_log_id(now) == int(datetime(2024, 8, 1).timestamp())


def test_load_statement_shape() -> None:
    spec = SCHEDULE_SPECS[ScheduleTable.engprogram]

    statement = build_load_statement(Path("/srv/it's/infile.engprogram.sql.csv"), spec)

    assert statement.startswith("LOAD DATA INFILE '/srv/it\\'s/infile.engprogram.sql.csv'")
    assert "INTO TABLE `EngProgram`" in statement
    assert "FIELDS TERMINATED BY ';'" in statement
    assert "IGNORE 1 LINES" in statement
    assert statement.endswith("(`programID`, `semesterID`, `projectPI`)")


def test_write_load_file_has_header_and_quoted_rows(tmp_path: Path) -> None:
    spec = SCHEDULE_SPECS[ScheduleTable.engprogram]
    path = tmp_path / "nested" / load_file_name(ScheduleTable.engprogram)

    load = write_load_file(
        path, spec, [{"programID": 901, "semesterID": "2024B", "projectPI": 'Said "hi"; left'}]
    )

    assert load.path == path
    assert path.read_text(encoding="utf-8").splitlines() == [
        '"programID";"semesterID";"projectPI"',
        '"901";"2024B";"Said \\"hi\\"; left"',
    ]


def test_write_load_file_blank_for_missing_values(tmp_path: Path) -> None:
    spec = SCHEDULE_SPECS[ScheduleTable.engprogram]
    path = tmp_path / "eng.csv"

    write_load_file(path, spec, [{"programID": 901, "semesterID": "2024B", "projectPI": None}])

    assert path.read_text(encoding="utf-8").splitlines()[1] == '"901";"2024B";""'


def test_derive_engineering_programs_keeps_900_range_once() -> None:
    rows = derive_engineering_programs(PROGRAMS + [PROGRAMS[1]])

    assert rows == [
        {"programID": 901, "semesterID": "2024B", "projectPI": "Engineering"},
        {"programID": 907, "semesterID": "2024B", "projectPI": "Staff"},
    ]


def test_build_ingest_request_file_load_stages_every_table(tmp_path: Path) -> None:
    request = build_ingest_request(
        semester_id="2024B",
        load_type=LoadType.full,
        rows={ScheduleTable.program: PROGRAMS},
        file_load=True,
        staging_dir=tmp_path,
        log_id=0,
    )

    assert request.file_load is True
    assert set(request.files) == set(SCHEDULE_TABLE_ORDER)
    eng = request.files[ScheduleTable.engprogram].path
    assert eng == tmp_path / "infile.engprogram.sql.csv"
    assert len(eng.read_text(encoding="utf-8").splitlines()) == 3
    # Tables without rows still get a header-only file.
    assert len(request.files[ScheduleTable.operator].path.read_text().splitlines()) == 1


def test_build_ingest_request_explicit_mode(tmp_path: Path) -> None:
    request = build_ingest_request(
        semester_id="2024B",
        load_type=LoadType.partial,
        rows={ScheduleTable.program: PROGRAMS},
        file_load=False,
        log_id=1722500000,
    )

    assert request.files == {}
    assert [r["programID"] for r in request.rows[ScheduleTable.engprogram]] == [901, 907]
    assert request.deletes[ScheduleTable.operator].params == ("2024B", 1722500000)
    assert list(tmp_path.iterdir()) == []


def test_build_ingest_request_file_load_needs_staging_dir() -> None:
    with pytest.raises(ValueError):
        build_ingest_request(
            semester_id="2024B", load_type="full", rows={}, file_load=True, log_id=0
        )


def _nights(*log_ids: int) -> list[dict]:
    return [{"logID": log_id, "semesterID": "2024B"} for log_id in log_ids]


def test_partial_load_drops_past_nights_of_daily_tables_only() -> None:
    rows = {
        ScheduleTable.schedule: _nights(100, 200, 300),
        ScheduleTable.instrument: _nights(150),
        ScheduleTable.operator: _nights(250),
        ScheduleTable.program: PROGRAMS,
    }

    kept = drop_past_nights(rows, LoadType.partial, 200)

    assert [r["logID"] for r in kept[ScheduleTable.schedule]] == [200, 300]
    assert kept[ScheduleTable.instrument] == []
    assert [r["logID"] for r in kept[ScheduleTable.operator]] == [250]
    assert kept[ScheduleTable.program] == PROGRAMS


def test_full_load_keeps_every_night() -> None:
    rows = {ScheduleTable.schedule: _nights(100, 300)}

    assert drop_past_nights(rows, "full", 200) == rows


def test_partial_file_load_stages_only_tonight_and_later(tmp_path: Path) -> None:
    request = build_ingest_request(
        semester_id="2024B",
        load_type=LoadType.partial,
        rows={ScheduleTable.engprogram: [], ScheduleTable.instrument: _nights(100, 300)},
        file_load=True,
        staging_dir=tmp_path,
        log_id=200,
    )

    lines = request.files[ScheduleTable.instrument].path.read_text().splitlines()
    assert len(lines) == 2
    assert lines[1].startswith('"300";')
