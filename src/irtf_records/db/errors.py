"""
irtf_records.db.errors

The single error kind raised by the storage core.
"""

from __future__ import annotations


class StorageError(Exception):
    """
    Query, transaction, or driver fault, or a write-path business rule
    (e.g. a required writer is missing). `str(error)` is the user-facing message.
    """
