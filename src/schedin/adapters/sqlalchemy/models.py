"""SQLAlchemy ORM tables – ``jobs`` and its payload tables ``tasks``, ``codes``, ``bins``."""
from __future__ import annotations

import datetime
import uuid
from typing import Any

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from schedin.application.scheduler.job import JobStatus, JobType


class UtcDateTime(TypeDecorator[datetime.datetime]):
    """Timezone-aware UTC timestamps on every backend.

    SQLite drops tzinfo on write; values are normalised to UTC on bind and
    re-tagged as UTC on load so comparisons stay aware.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("naive datetime; UTC-aware values required")
        value = value.astimezone(datetime.UTC)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Any, dialect: Any) -> Any:  # noqa: ARG002
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.UTC)
        return value.astimezone(datetime.UTC)


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]  # type: ignore[attr-defined]


class Base(DeclarativeBase):
    pass


class JobRecord(Base):
    """Row of ``jobs``; owns exactly one payload row matching ``job_type``."""

    __tablename__ = "jobs"
    __table_args__ = (UniqueConstraint("user_id", "job_name", name="uq_jobs_user_job_name"),)

    job_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    job_name: Mapped[str] = mapped_column(String(255), nullable=False)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    job_type: Mapped[JobType] = mapped_column(
        Enum(JobType, name="job_types", values_callable=_enum_values),
        nullable=False,
    )
    schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_interval: Mapped[int | None] = mapped_column(Integer, nullable=True)
    next_run_at: Mapped[datetime.datetime | None] = mapped_column(UtcDateTime, nullable=True, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        UtcDateTime,
        server_default=func.now(),
        nullable=False,
    )
    runs: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    job_status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, name="job_status", values_callable=_enum_values),
        nullable=False,
        default=JobStatus.SCHEDULED,
    )

    task: Mapped["TaskRecord | None"] = relationship(
        back_populates="job", cascade="all, delete-orphan", passive_deletes=True, uselist=False
    )
    code: Mapped["CodeRecord | None"] = relationship(
        back_populates="job", cascade="all, delete-orphan", passive_deletes=True, uselist=False
    )
    bin: Mapped["BinRecord | None"] = relationship(
        back_populates="job", cascade="all, delete-orphan", passive_deletes=True, uselist=False
    )


class TaskRecord(Base):
    __tablename__ = "tasks"

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.job_id", ondelete="CASCADE"), primary_key=True
    )
    task_name: Mapped[str] = mapped_column(String(255), nullable=False)

    job: Mapped[JobRecord] = relationship(back_populates="task")


class CodeRecord(Base):
    __tablename__ = "codes"

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.job_id", ondelete="CASCADE"), primary_key=True
    )
    src: Mapped[str] = mapped_column(Text, nullable=False)
    lang: Mapped[str] = mapped_column(String(64), nullable=False)
    cmd: Mapped[str] = mapped_column(Text, nullable=False)

    job: Mapped[JobRecord] = relationship(back_populates="code")


class BinRecord(Base):
    __tablename__ = "bins"

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.job_id", ondelete="CASCADE"), primary_key=True
    )
    path: Mapped[str] = mapped_column(Text, nullable=False)
    cmd: Mapped[str | None] = mapped_column(Text, nullable=True)

    job: Mapped[JobRecord] = relationship(back_populates="bin")


__all__ = ["Base", "BinRecord", "CodeRecord", "JobRecord", "TaskRecord", "UtcDateTime"]
