"""
tests.conftest

Shared fakes for the storage core.

Responsibilities:
- `RecordingSink`: diagnostic sink that keeps every log call.
- `FakeDriver`: scriptable storage driver that records every call in order.
- `ScheduleStoreDriver`: in-memory troublelog tables for ingest scenarios.
- `FakeFilesystem`: existence/stat answers without touching disk.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.db.errors import StorageError
from irtf_records.db.init_db import init_db
from irtf_records.db.records import FeedbackRecord
from irtf_records.db.session import create_engine, create_sessionmaker
from irtf_records.files.stats import FileStats


class RecordingSink:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str, event: str, kw: dict[str, Any]) -> None:
        self.records.append((level, event, kw))

    def debug(self, event: str, **kw: Any) -> None:
        self._record("debug", event, kw)

    def info(self, event: str, **kw: Any) -> None:
        self._record("info", event, kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._record("warning", event, kw)

    def error(self, event: str, **kw: Any) -> None:
        self._record("error", event, kw)

    def events(self, level: str | None = None) -> list[str]:
        return [e for lvl, e, _ in self.records if level is None or lvl == level]

    def find(self, event: str) -> list[dict[str, Any]]:
        return [kw for _, e, kw in self.records if e == event]


class FakeDriver:
    """
    `rowcount(sql, params)` decides what each update returns; returning an
    exception instance makes the update raise it.
    """

    def __init__(
        self,
        *,
        rowcount: Callable[[str, tuple[Any, ...]], Any] | None = None,
        rows: Callable[[str, tuple[Any, ...]], list[dict[str, Any]]] | None = None,
        insert_id: int = 41,
    ) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self._rowcount = rowcount or (lambda sql, params: 1)
        self._rows = rows or (lambda sql, params: [])
        self._insert_id = insert_id
        self.fail_commit = False

    async def select(self, sql: str, params=(), types: str = "") -> list[dict[str, Any]]:
        self.calls.append(("select", sql, tuple(params)))
        result = self._rows(sql, tuple(params))
        if isinstance(result, Exception):
            raise result
        return result

    async def update(self, sql: str, params=(), types: str = "") -> Any:
        self.calls.append(("update", sql, tuple(params)))
        result = self._rowcount(sql, tuple(params))
        if isinstance(result, Exception):
            raise result
        return result

    async def begin(self) -> None:
        self.calls.append(("begin",))

    async def commit(self) -> None:
        self.calls.append(("commit",))
        if self.fail_commit:
            raise StorageError("Commit failed: disk full")

    async def rollback(self) -> None:
        self.calls.append(("rollback",))

    async def last_insert_id(self) -> int:
        self.calls.append(("last_insert_id",))
        return self._insert_id

    @property
    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def updates_into(self, table: str) -> list[tuple[Any, ...]]:
        return [c[2] for c in self.calls if c[0] == "update" and f"INTO `{table}`" in c[1]]


_DELETE = re.compile(r"DELETE FROM `(\w+)` WHERE `semesterID` = \?(?: AND `logID` >= \?)?")
_LOAD = re.compile(r"INTO TABLE `(\w+)`")
_INSERT = re.compile(r"INSERT INTO `(\w+)` \((.*?)\)")


class ScheduleStoreDriver:
    """
    Just enough of the troublelog database for ingest scenarios: deletes filter by
    semester (and logID), LOAD DATA appends the rows registered for that table,
    INSERT appends the bound row.
    """

    def __init__(self, load_rows: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.load_rows = load_rows or {}
        self.failing: dict[str, Exception] = {}
        self.statements: list[str] = []

    def count(self, table: str) -> int:
        return len(self.tables.get(table, []))

    async def select(self, sql: str, params=(), types: str = "") -> list[dict[str, Any]]:
        raise AssertionError("the ingest never reads")

    async def update(self, sql: str, params=(), types: str = "") -> Any:
        self.statements.append(sql)
        for table, exc in self.failing.items():
            if f"`{table}`" in sql:
                raise exc

        if m := _DELETE.match(sql):
            rows = self.tables.get(m.group(1), [])
            keep = [r for r in rows if not self._matches(r, tuple(params))]
            self.tables[m.group(1)] = keep
            return len(rows) - len(keep)
        if m := _LOAD.search(sql):
            loaded = [dict(r) for r in self.load_rows.get(m.group(1), [])]
            self.tables.setdefault(m.group(1), []).extend(loaded)
            return len(loaded)
        if m := _INSERT.match(sql):
            columns = [c.strip("` ") for c in m.group(2).split(",")]
            self.tables.setdefault(m.group(1), []).append(dict(zip(columns, params)))
            return 1
        raise AssertionError(f"unexpected statement: {sql}")

    @staticmethod
    def _matches(row: dict[str, Any], params: tuple[Any, ...]) -> bool:
        if row.get("semesterID") != params[0]:
            return False
        return len(params) == 1 or row.get("logID", 0) >= params[1]

    async def begin(self) -> None:
        raise AssertionError("the ingest never opens a transaction")

    async def commit(self) -> None:
        raise AssertionError("the ingest never opens a transaction")

    async def rollback(self) -> None:
        raise AssertionError("the ingest never opens a transaction")

    async def last_insert_id(self) -> int:
        raise AssertionError("the ingest never reads insert ids")


class FakeFilesystem:
    def __init__(self, present: dict[Path, FileStats] | None = None) -> None:
        self.present = present or {}
        self.stat_calls: list[Path] = []

    def exists(self, path: Path) -> bool:
        return Path(path) in self.present

    def stat(self, path: Path) -> FileStats:
        self.stat_calls.append(Path(path))
        return self.present[Path(path)]


def make_stats(path: Path, lines: int = 3) -> FileStats:
    return FileStats(
        path=str(path),
        size=128,
        modified="2024-08-01 10:00:00",
        created="2024-08-01 10:00:00",
        owner=1000,
        group=1000,
        permissions="0644",
        lines=lines,
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def feedback_record() -> FeedbackRecord:
    return FeedbackRecord(
        start_date=1722506400,
        end_date=1722592800,
        technical_rating=4,
        technical_comments="Guider dropped lock twice.",
        scientific_staff_rating=5,
        to_rating=5,
        daycrew_rating=4,
        personnel_comment="Great support overnight.",
        scientific_results="Spectra of 12 targets.",
        suggestions="",
        name="A. Observer",
        email="observer@example.edu",
        location=1,
        program_id=42,
        semester_id="2024B",
    )


@pytest_asyncio.fixture
async def feedback_db(tmp_path: Path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'feedback.db'}")
    await init_db(engine, database="feedback")
    sessionmaker = create_sessionmaker(engine)
    try:
        yield sessionmaker
    finally:
        await engine.dispose()


async def count_rows(session: AsyncSession, table: str) -> int:
    from sqlalchemy import text

    return (await session.execute(text(f'SELECT COUNT(*) FROM "{table}"'))).scalar_one()
