"""
irtf_records.db.driver

Storage driver contract and its SQLAlchemy implementation.

Responsibilities:
- Define the narrow driver surface the query executor depends on.
- Run `?`-placeholder SQL on an `AsyncSession`, committing each statement unless an
  explicit transaction is open.
- Track the id generated by the most recent INSERT.
- Convert SQLAlchemy faults into `StorageError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from sqlalchemy import text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from irtf_records.db.errors import StorageError


class StorageDriver(Protocol):
    async def select(
        self, sql: str, params: Sequence[Any] = (), types: str = ""
    ) -> list[dict[str, Any]]: ...

    async def update(self, sql: str, params: Sequence[Any] = (), types: str = "") -> Any: ...

    async def begin(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def last_insert_id(self) -> int: ...


def bind_positional(sql: str, params: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """
    Rewrite `?` placeholders as `:p0, :p1, ...` for `sqlalchemy.text()`.

    Placeholders inside quoted literals are left alone, and literal colons are
    escaped so `text()` does not read them as binds.
    """

    out: list[str] = []
    binds: dict[str, Any] = {}
    quote: str | None = None
    for ch in sql:
        if ch == ":":
            out.append("\\:")
        elif quote is not None:
            if ch == quote:
                quote = None
            out.append(ch)
        elif ch in "'\"`":
            quote = ch
            out.append(ch)
        elif ch == "?":
            index = len(binds)
            if index >= len(params):
                raise StorageError(
                    f"Statement has more placeholders than the {len(params)} bound parameters."
                )
            name = f"p{index}"
            binds[name] = params[index]
            out.append(f":{name}")
        else:
            out.append(ch)

    if len(binds) != len(params):
        raise StorageError(
            f"Statement has {len(binds)} placeholders but {len(params)} bound parameters."
        )
    return "".join(out), binds


def _is_insert(sql: str) -> bool:
    return sql.lstrip().upper().startswith("INSERT")


class SessionDriver:
    """
    `StorageDriver` over one `AsyncSession`.

    Without `begin()` every statement is committed as it runs; between `begin()` and
    `commit()`/`rollback()` statements share the session's transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._explicit = False
        self._last_insert_id: int | None = None

    async def select(
        self, sql: str, params: Sequence[Any] = (), types: str = ""
    ) -> list[dict[str, Any]]:
        try:
            result = await self._execute(sql, params)
            rows = [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as e:
            await self._discard()
            raise StorageError(str(e)) from e
        await self._autocommit()
        return rows

    async def update(self, sql: str, params: Sequence[Any] = (), types: str = "") -> Any:
        try:
            result = await self._execute(sql, params)
        except SQLAlchemyError as e:
            await self._discard()
            raise StorageError(str(e)) from e

        count = result.rowcount
        if _is_insert(sql):
            self._last_insert_id = result.lastrowid
        await self._autocommit()
        return count

    async def begin(self) -> None:
        if self._explicit:
            raise StorageError("A transaction is already open on this connection.")
        if self._session.in_transaction():
            # Close out any implicit read transaction before the explicit one starts.
            await self._session.commit()
        self._explicit = True

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            # Stay explicit: the caller is expected to roll back.
            raise StorageError(f"Commit failed: {e}") from e
        self._explicit = False

    async def rollback(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            raise StorageError(f"Rollback failed: {e}") from e
        finally:
            self._explicit = False
            # An id from a rolled-back insert was never committed.
            self._last_insert_id = None

    async def last_insert_id(self) -> int:
        if self._last_insert_id is None:
            raise StorageError("No insert has been executed on this connection.")
        return int(self._last_insert_id)

    async def _execute(self, sql: str, params: Sequence[Any]) -> CursorResult[Any]:
        if not params:
            # Raw path: bulk-load and other parameterless statements go to the DBAPI as-is.
            conn = await self._session.connection()
            return await conn.exec_driver_sql(
                sql, execution_options={"no_parameters": True}
            )
        bound_sql, binds = bind_positional(sql, params)
        return await self._session.execute(text(bound_sql), binds)  # type: ignore[return-value]

    async def _autocommit(self) -> None:
        if self._explicit:
            return
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._discard()
            raise StorageError(f"Commit failed: {e}") from e

    async def _discard(self) -> None:
        # A failed implicit statement must not poison the next one; explicit
        # transactions are left for the caller's rollback().
        if not self._explicit:
            await self._session.rollback()


# --- Module Notes -----------------------------------------------------------
# `last_insert_id()` is a second call after the INSERT. That is only safe because
# one driver (one session) is never shared between concurrent writers.
