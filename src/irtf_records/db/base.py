"""
irtf_records.db.base

SQLAlchemy declarative bases.

Responsibilities:
- One DeclarativeBase per physical database so each metadata can be created or
  migrated on its own engine.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class FeedbackBase(DeclarativeBase):
    pass


class TroublelogBase(DeclarativeBase):
    pass


BASES: dict[str, type[DeclarativeBase]] = {
    "feedback": FeedbackBase,
    "troublelog": TroublelogBase,
}
