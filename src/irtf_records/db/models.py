"""
irtf_records.db.models

Persistence schema for both databases.

Responsibilities:
- feedback database: one `feedback` row per submitted form plus the
  `instrument`, `operator` and `support` link rows that reference it.
- troublelog database: the five schedule tables reloaded by the schedule upload
  (`ScheduleObs`, `DailyInstrument`, `DailyOperator`, `Program`, `EngProgram`).

Column names follow the legacy schema (mixed case) because the writers issue raw
SQL against them; Python attribute names are snake_case.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from irtf_records.db.base import FeedbackBase, TroublelogBase


class Feedback(FeedbackBase):
    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column("feedback_id", Integer, primary_key=True, autoincrement=True)

    # Observing run dates are unix timestamps, as submitted by the form.
    start_date: Mapped[int] = mapped_column(Integer, nullable=False)
    end_date: Mapped[int] = mapped_column(Integer, nullable=False)

    technical_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    technical_comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scientific_staff_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    to_rating: Mapped[int] = mapped_column("TO_rating", Integer, nullable=False)
    daycrew_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    personnel_comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scientific_results: Mapped[str] = mapped_column(Text, nullable=False, default="")
    suggestions: Mapped[str] = mapped_column(Text, nullable=False, default="")

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    location: Mapped[int] = mapped_column(Integer, nullable=False)
    program_id: Mapped[int] = mapped_column("programID", Integer, nullable=False)
    semester_id: Mapped[str] = mapped_column("semesterID", String(8), nullable=False)

    instruments: Mapped[list[FeedbackInstrument]] = relationship(back_populates="feedback")
    operators: Mapped[list[FeedbackOperator]] = relationship(back_populates="feedback")
    support: Mapped[list[FeedbackSupport]] = relationship(back_populates="feedback")

    __table_args__ = (Index("ix_feedback_program_semester", "programID", "semesterID"),)


class FeedbackInstrument(FeedbackBase):
    __tablename__ = "instrument"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feedback_id: Mapped[int] = mapped_column(
        ForeignKey("feedback.feedback_id"), nullable=False, index=True
    )
    hardware_id: Mapped[str] = mapped_column("hardwareID", String(32), nullable=False)

    feedback: Mapped[Feedback] = relationship(back_populates="instruments")


class FeedbackOperator(FeedbackBase):
    __tablename__ = "operator"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feedback_id: Mapped[int] = mapped_column(
        ForeignKey("feedback.feedback_id"), nullable=False, index=True
    )
    operator_id: Mapped[str] = mapped_column("operatorID", String(32), nullable=False)

    feedback: Mapped[Feedback] = relationship(back_populates="operators")


class FeedbackSupport(FeedbackBase):
    __tablename__ = "support"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feedback_id: Mapped[int] = mapped_column(
        ForeignKey("feedback.feedback_id"), nullable=False, index=True
    )
    support_id: Mapped[str] = mapped_column("supportID", String(32), nullable=False)

    feedback: Mapped[Feedback] = relationship(back_populates="support")


class ScheduleObs(TroublelogBase):
    __tablename__ = "ScheduleObs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # logID is the unix timestamp of the observing night (06:00 local cutoff).
    log_id: Mapped[int] = mapped_column("logID", Integer, nullable=False)
    start_time: Mapped[int] = mapped_column("startTime", Integer, nullable=False)
    semester_id: Mapped[str] = mapped_column("semesterID", String(8), nullable=False)
    end_time: Mapped[int] = mapped_column("endTime", Integer, nullable=False)
    remote_obs: Mapped[int] = mapped_column("remoteObs", Integer, nullable=False, default=0)
    daytime_obs: Mapped[int] = mapped_column("daytimeObs", Integer, nullable=False, default=0)
    first_time: Mapped[int] = mapped_column("firstTime", Integer, nullable=False, default=0)
    facility_open: Mapped[int] = mapped_column("facilityOpen", Integer, nullable=False, default=0)
    facility_close: Mapped[int] = mapped_column(
        "facilityClose", Integer, nullable=False, default=0
    )
    instrument_change: Mapped[int] = mapped_column(
        "instrumentChange", Integer, nullable=False, default=0
    )
    facility_shutdown: Mapped[int] = mapped_column(
        "facilityShutdown", Integer, nullable=False, default=0
    )
    support_astronomer_id: Mapped[str] = mapped_column(
        "supportAstronomerID", String(32), nullable=False, default=""
    )
    program_id: Mapped[int] = mapped_column("programID", Integer, nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_scheduleobs_semester_log", "semesterID", "logID"),)


class DailyInstrument(TroublelogBase):
    __tablename__ = "DailyInstrument"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    log_id: Mapped[int] = mapped_column("logID", Integer, nullable=False)
    start_time: Mapped[int] = mapped_column("startTime", Integer, nullable=False)
    semester_id: Mapped[str] = mapped_column("semesterID", String(8), nullable=False)
    program_id: Mapped[int] = mapped_column("programID", Integer, nullable=False)
    hardware_id: Mapped[str] = mapped_column("hardwareID", String(32), nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("ix_dailyinstrument_semester_log", "semesterID", "logID"),)


class DailyOperator(TroublelogBase):
    __tablename__ = "DailyOperator"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    log_id: Mapped[int] = mapped_column("logID", Integer, nullable=False)
    start_time: Mapped[int] = mapped_column("startTime", Integer, nullable=False)
    semester_id: Mapped[str] = mapped_column("semesterID", String(8), nullable=False)
    program_id: Mapped[int] = mapped_column("programID", Integer, nullable=False)
    operator_id: Mapped[str] = mapped_column("operatorID", String(32), nullable=False)
    arrive: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    depart: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    overlap: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("ix_dailyoperator_semester_log", "semesterID", "logID"),)


class Program(TroublelogBase):
    __tablename__ = "Program"

    program_id: Mapped[int] = mapped_column("programID", Integer, primary_key=True)
    semester_id: Mapped[str] = mapped_column("semesterID", String(8), primary_key=True)
    project_pi: Mapped[str] = mapped_column("projectPI", String(128), nullable=False)
    project_members: Mapped[str | None] = mapped_column("projectMembers", Text, nullable=True)
    other_info: Mapped[str | None] = mapped_column("otherInfo", Text, nullable=True)
    pi_name: Mapped[str | None] = mapped_column("PIName", String(128), nullable=True)
    pi_email: Mapped[str | None] = mapped_column("PIEmail", String(256), nullable=True)


class EngProgram(TroublelogBase):
    __tablename__ = "EngProgram"

    # Engineering programs are the 900-999 range of Program.
    program_id: Mapped[int] = mapped_column("programID", Integer, primary_key=True)
    semester_id: Mapped[str] = mapped_column("semesterID", String(8), primary_key=True)
    project_pi: Mapped[str] = mapped_column("projectPI", String(128), nullable=False)


# --- Module Notes -----------------------------------------------------------
# The ORM classes define the schema (init_db / Alembic) and back read-side tests;
# the write path deliberately goes through RecordWriter SQL, not ORM sessions.add().
