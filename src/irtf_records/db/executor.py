"""
irtf_records.db.executor

Query execution base shared by every record writer and reader.

Responsibilities:
- Describe one parameterized statement (`QueryDescriptor`).
- Execute reads with an optional "must not be empty" rule.
- Execute writes and report the affected row count as `RowsAffected`.
- Normalize driver faults into `StorageError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from irtf_records.db.driver import StorageDriver
from irtf_records.db.errors import StorageError
from irtf_records.observability.logging import DiagnosticSink, get_logger

# mysqli-style bind tags: integer, string, double, blob.
TYPE_TAGS = frozenset("isdb")

_SORT_DIRECTIONS: dict[bool, Literal["ASC", "DESC"]] = {True: "ASC", False: "DESC"}


@dataclass(frozen=True, slots=True)
class QueryDescriptor:
    sql: str
    params: tuple[Any, ...] = ()
    types: str = ""
    expected_row_count: int | None = None
    # Empty-result message for reads; row-count failure message for writes.
    error_message: str | None = None

    def __post_init__(self) -> None:
        if len(self.params) != len(self.types):
            raise ValueError(
                f"{len(self.params)} parameters but {len(self.types)} type tags: {self.types!r}"
            )
        unknown = set(self.types) - TYPE_TAGS
        if unknown:
            raise ValueError(f"Unknown type tags {sorted(unknown)} in {self.types!r}")


@dataclass(frozen=True, slots=True)
class Ok:
    count: int


@dataclass(frozen=True, slots=True)
class Anomaly:
    # Whatever the driver handed back instead of a usable row count.
    raw: Any = field(default=None)


RowsAffected = Ok | Anomaly


def rows_affected(raw: Any) -> RowsAffected:
    # bool is an int subclass; a driver returning True/False is not a row count.
    if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
        return Ok(raw)
    return Anomaly(raw)


class QueryExecutor:
    def __init__(self, driver: StorageDriver, *, log: DiagnosticSink | None = None) -> None:
        self._driver = driver
        self._log = log or get_logger(__name__)

    @property
    def driver(self) -> StorageDriver:
        return self._driver

    async def fetch_rows(self, query: QueryDescriptor) -> list[dict[str, Any]]:
        self._log.debug("query_select", sql=query.sql, params=list(query.params))
        try:
            rows = await self._driver.select(query.sql, query.params, query.types)
        except StorageError as e:
            self._log.error("query_select_failed", sql=query.sql, error=str(e))
            raise StorageError(f"Error executing SELECT query: {e}") from e

        self._log.debug("query_select_result", row_count=len(rows))
        if not rows and query.error_message is not None:
            self._log.warning("query_select_empty", sql=query.sql, error=query.error_message)
            raise StorageError(query.error_message)
        return rows

    async def modify_rows(self, query: QueryDescriptor) -> RowsAffected:
        self._log.debug("query_modify", sql=query.sql, params=list(query.params))
        try:
            raw = await self._driver.update(query.sql, query.params, query.types)
        except StorageError as e:
            self._log.error("query_modify_failed", sql=query.sql, error=str(e))
            raise StorageError(f"Error executing INSERT/UPDATE/DELETE query: {e}") from e

        result = rows_affected(raw)
        match result:
            case Anomaly(raw=value):
                # Not raised here: the caller decides whether an unknown count is fatal.
                self._log.warning("query_modify_row_count_anomaly", sql=query.sql, raw=repr(value))
            case Ok(count=count) if (
                query.expected_row_count is not None and count != query.expected_row_count
            ):
                self._log.error(
                    "query_modify_unexpected_row_count",
                    sql=query.sql,
                    expected=query.expected_row_count,
                    actual=count,
                )
                raise StorageError(query.error_message or "Unexpected number of affected rows.")
            case Ok(count=count):
                self._log.debug("query_modify_result", row_count=count)
        return result

    @staticmethod
    def sort_direction(ascending: bool = True) -> Literal["ASC", "DESC"]:
        return _SORT_DIRECTIONS[bool(ascending)]


# --- Module Notes -----------------------------------------------------------
# Nothing caller-supplied is ever interpolated into SQL here; ORDER BY direction is
# the one dynamic fragment and it comes from `_SORT_DIRECTIONS`.
