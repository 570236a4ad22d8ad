"""
irtf_records.db.transaction

Begin/commit/rollback scope around a sequence of writer calls.

Responsibilities:
- Enforce the transaction lifecycle (no nesting, commit/rollback only when open).
- Delegate the actual work to the storage driver.
"""

from __future__ import annotations

import enum

from irtf_records.db.driver import StorageDriver
from irtf_records.db.errors import StorageError


class TxState(enum.StrEnum):
    closed = "CLOSED"
    open = "OPEN"
    committed = "COMMITTED"
    rolled_back = "ROLLED_BACK"


class TransactionManager:
    """
    The manager only checks transitions; the caller decides between commit and rollback.
    """

    def __init__(self, driver: StorageDriver) -> None:
        self._driver = driver
        self._state = TxState.closed
        self._last_outcome: TxState | None = None

    @property
    def state(self) -> TxState:
        return self._state

    @property
    def last_outcome(self) -> TxState | None:
        return self._last_outcome

    @property
    def is_open(self) -> bool:
        return self._state is TxState.open

    async def begin(self) -> None:
        if self.is_open:
            raise StorageError(
                "A transaction is already open; nested transactions are not supported."
            )
        await self._driver.begin()
        self._state = TxState.open

    async def commit(self) -> None:
        self._require_open("commit")
        # A failed commit leaves the state OPEN so rollback() is still allowed.
        await self._driver.commit()
        self._finish(TxState.committed)

    async def rollback(self) -> None:
        self._require_open("rollback")
        try:
            await self._driver.rollback()
        finally:
            self._finish(TxState.rolled_back)

    def _require_open(self, action: str) -> None:
        if not self.is_open:
            raise StorageError(f"Cannot {action}: no transaction is open.")

    def _finish(self, outcome: TxState) -> None:
        self._last_outcome = outcome
        self._state = TxState.closed
