"""
irtf_records.db.writers.base

Per-table insert/delete execution on top of the query executor.

Responsibilities:
- `RecordSpec`: the three things a table must supply (query, params, types).
- `TableSpec`: the column-list implementation every table here uses.
- `RecordWriter`: builds the descriptor from a spec and runs it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from irtf_records.db.errors import StorageError
from irtf_records.db.executor import QueryDescriptor, QueryExecutor, RowsAffected


class RecordSpec(Protocol):
    table: str
    failure_message: str

    def insert_query(self) -> str: ...

    def insert_params(self, data: Mapping[str, Any]) -> tuple[Any, ...]: ...

    def insert_types(self) -> str: ...


@dataclass(frozen=True, slots=True)
class TableSpec:
    table: str
    columns: tuple[str, ...]
    types: str
    failure_message: str

    def __post_init__(self) -> None:
        if len(self.columns) != len(self.types):
            raise ValueError(f"{self.table}: {len(self.columns)} columns, types {self.types!r}")

    def insert_query(self) -> str:
        # Identifiers are quoted: `rank` and `operator` are reserved in some dialects.
        columns = ", ".join(f"`{c}`" for c in self.columns)
        placeholders = ", ".join("?" for _ in self.columns)
        return f"INSERT INTO `{self.table}` ({columns}) VALUES ({placeholders})"

    def insert_params(self, data: Mapping[str, Any]) -> tuple[Any, ...]:
        try:
            return tuple(data[c] for c in self.columns)
        except KeyError as e:
            raise StorageError(f"{self.failure_message} Missing value for {e.args[0]}.") from e

    def insert_types(self) -> str:
        return self.types


class RecordWriter:
    def __init__(self, executor: QueryExecutor, spec: RecordSpec) -> None:
        self._executor = executor
        self._spec = spec

    @property
    def spec(self) -> RecordSpec:
        return self._spec

    @property
    def table(self) -> str:
        return self._spec.table

    def build_insert(self, data: Mapping[str, Any]) -> QueryDescriptor:
        return QueryDescriptor(
            sql=self._spec.insert_query(),
            params=self._spec.insert_params(data),
            types=self._spec.insert_types(),
            expected_row_count=1,
            error_message=self._spec.failure_message,
        )

    async def insert(self, data: Mapping[str, Any]) -> RowsAffected:
        return await self._executor.modify_rows(self.build_insert(data))

    async def delete(self, query: QueryDescriptor) -> RowsAffected:
        # Deletes carry no expected count: zero matching rows is a valid outcome.
        return await self._executor.modify_rows(query)

    async def load(self, statement: str) -> RowsAffected:
        return await self._executor.modify_rows(QueryDescriptor(sql=statement))


# --- Module Notes -----------------------------------------------------------
# New tables need a TableSpec, not a RecordWriter subclass; subclasses below only add
# entity-specific entry points (last insert id, link rows).
