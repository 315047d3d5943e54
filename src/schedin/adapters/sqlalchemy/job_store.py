"""SQLAlchemy adapter – SqlAlchemyJobStore.

Atomic job create/delete and due-job selection over the ``jobs`` table and
its payload tables.  Every call runs in its own
:class:`~schedin.adapters.sqlalchemy.uow.SqlAlchemyUnitOfWork`; a failure at
any step rolls the whole transaction back before the error propagates, so
a job is never visible without its payload (or vice versa).
"""
from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Callable, assert_never

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schedin.adapters.sqlalchemy.models import BinRecord, CodeRecord, JobRecord, TaskRecord
from schedin.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from schedin.application.scheduler.job import (
    BinPayload,
    CodePayload,
    Job,
    JobDescription,
    JobStatus,
    Payload,
    TaskPayload,
    payload_job_type,
    require_optional_text,
    validate_payload,
)
from schedin.application.scheduler.schedule import next_run, parse_schedule
from schedin.kernel.errors import (
    CrudValidationError,
    InsertionError,
    JobConflictError,
    ReadError,
    ScheduleError,
)
from schedin.kernel.time import DEFAULT_CLOCK, Clock
from schedin.observability.logging import get_logger

logger = get_logger(__name__)

PayloadRecord = TaskRecord | CodeRecord | BinRecord


def payload_record(job_id: uuid.UUID, payload: Payload) -> PayloadRecord:
    """Build the single payload row for *payload*."""
    match payload:
        case TaskPayload(name=name):
            return TaskRecord(job_id=job_id, task_name=name)
        case CodePayload(source=source, language=language, command=command):
            return CodeRecord(job_id=job_id, src=source, lang=language, cmd=command)
        case BinPayload(path=path, command=command):
            return BinRecord(job_id=job_id, path=path, cmd=command)
        case _:
            assert_never(payload)


def _payload_from_record(record: JobRecord) -> Payload:
    if record.task is not None:
        return TaskPayload(name=record.task.task_name)
    if record.code is not None:
        return CodePayload(source=record.code.src, language=record.code.lang, command=record.code.cmd)
    if record.bin is not None:
        return BinPayload(path=record.bin.path, command=record.bin.cmd)
    raise ReadError(f"Job '{record.job_id}' has no payload row", detail={"job_id": str(record.job_id)})


def _to_job(record: JobRecord) -> Job:
    return Job(
        job_id=record.job_id,
        user_id=record.user_id,
        name=record.job_name,
        job_type=record.job_type,
        status=record.job_status,
        payload=_payload_from_record(record),
        description=record.job_description,
        schedule=record.schedule,
        interval_seconds=record.job_interval,
        next_run_at=record.next_run_at,
        created_at=record.created_at,
        runs=record.runs,
        error_count=record.error_count,
    )


def _with_payloads(stmt: Any) -> Any:
    return stmt.options(
        selectinload(JobRecord.task),
        selectinload(JobRecord.code),
        selectinload(JobRecord.bin),
    )


class SqlAlchemyJobStore:
    """Job persistence workflow and due-job selector.

    Parameters
    ----------
    session_factory:
        Zero-arg callable returning an :class:`AsyncSession`, e.g. a
        :class:`~schedin.adapters.sqlalchemy.session.SqlAlchemySessionFactory`.
    clock:
        Source of "now" for schedule parsing, next-run computation and the
        due window.  Defaults to the system UTC clock.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession], *, clock: Clock | None = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or DEFAULT_CLOCK

    def _unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self._session_factory)

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    async def insert(self, description: JobDescription, owner_id: uuid.UUID) -> uuid.UUID:
        """Persist *description* for *owner_id* and return the new job id.

        Raises
        ------
        CrudValidationError
            Payload shape or schedule rejected; nothing was written.
        InsertionError
            The job or payload row could not be written (``JobConflictError``
            for a duplicate name); the transaction was rolled back.
        TransactionError
            Begin or commit failed; the job is not visible.
        """
        payload = validate_payload(description.payload)
        if not isinstance(description.name, str) or not description.name.strip():
            raise CrudValidationError("'name' must be a non-empty string", detail={"field": "name"})
        require_optional_text("description", description.description)
        require_optional_text("schedule", description.schedule)
        job_id = uuid.uuid4()

        job_interval: int | None = None
        next_run_at = None
        status = JobStatus.DISABLED
        if description.schedule is not None:
            try:
                schedule = parse_schedule(description.schedule, clock=self._clock)
            except ScheduleError as exc:
                logger.info("job.rejected", job_name=description.name, **exc.log_fields())
                raise CrudValidationError(
                    exc.reason,
                    detail={"field": "schedule", "code": exc.code},
                    cause=exc,
                ) from exc
            job_interval = schedule.interval_seconds
            next_run_at = next_run(schedule, clock=self._clock)
            status = JobStatus.SCHEDULED

        record = JobRecord(
            job_id=job_id,
            user_id=owner_id,
            job_name=description.name,
            job_description=description.description,
            job_type=payload_job_type(payload),
            schedule=description.schedule,
            job_interval=job_interval,
            next_run_at=next_run_at,
            created_at=self._clock.now(),
            runs=0,
            error_count=0,
            job_status=status,
        )

        log = logger.bind(job_id=str(job_id), job_name=description.name, owner_id=str(owner_id))
        async with self._unit_of_work() as uow:
            await self._add_job_row(uow.session, record)
            await self._add_payload_row(uow.session, payload_record(job_id, payload))

        log.info("job.inserted", job_type=record.job_type.value, next_run_at=_iso(next_run_at))
        return job_id

    async def _add_job_row(self, session: AsyncSession, record: JobRecord) -> None:
        owner_id, job_name = record.user_id, record.job_name
        session.add(record)
        try:
            await session.flush()
        except IntegrityError as exc:
            logger.warning("job.insert_failed", step="job", error=str(exc.orig))
            try:
                taken = await self._name_taken(session, owner_id, job_name)
            except SQLAlchemyError as lookup_exc:
                logger.error("job.insert_failed", step="conflict_check", error=str(lookup_exc))
                raise InsertionError(cause=lookup_exc) from lookup_exc
            if taken:
                raise JobConflictError(owner_id, job_name, cause=exc) from exc
            raise InsertionError(cause=exc) from exc
        except SQLAlchemyError as exc:
            logger.error("job.insert_failed", step="job", error=str(exc))
            raise InsertionError(cause=exc) from exc

    async def _name_taken(self, session: AsyncSession, owner_id: uuid.UUID, job_name: str) -> bool:
        await session.rollback()
        result = await session.execute(
            select(JobRecord.job_id).where(
                and_(JobRecord.user_id == owner_id, JobRecord.job_name == job_name)
            )
        )
        return result.first() is not None

    async def _add_payload_row(self, session: AsyncSession, row: PayloadRecord) -> None:
        session.add(row)
        try:
            await session.flush()
        except SQLAlchemyError as exc:
            logger.error("job.insert_failed", step="payload", error=str(exc))
            raise InsertionError(cause=exc) from exc

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, owner_id: uuid.UUID, job_name: str) -> None:
        """Delete *owner_id*'s job named *job_name* together with its payload.

        Deleting a job that does not exist is a no-op.
        """
        async with self._unit_of_work() as uow:
            try:
                result = await uow.session.execute(
                    _with_payloads(
                        select(JobRecord).where(
                            and_(JobRecord.user_id == owner_id, JobRecord.job_name == job_name)
                        )
                    )
                )
                record = result.scalar_one_or_none()
                if record is None:
                    logger.info("job.delete_missing", owner_id=str(owner_id), job_name=job_name)
                    return
                await uow.session.delete(record)
                await uow.session.flush()
            except SQLAlchemyError as exc:
                logger.error("job.delete_failed", owner_id=str(owner_id), job_name=job_name, error=str(exc))
                raise InsertionError("Cannot Delete from Database", cause=exc) from exc

        logger.info("job.deleted", owner_id=str(owner_id), job_name=job_name, job_id=str(record.job_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def select_due(self, lookahead: timedelta) -> list[Job]:
        """Return scheduled jobs with ``now <= next_run_at <= now + lookahead``."""
        if lookahead < timedelta(0):
            raise ValueError("lookahead must not be negative")
        now = self._clock.now()
        stmt = _with_payloads(
            select(JobRecord).where(
                and_(
                    JobRecord.job_status == JobStatus.SCHEDULED,
                    JobRecord.next_run_at.is_not(None),
                    JobRecord.next_run_at >= now,
                    JobRecord.next_run_at <= now + lookahead,
                )
            )
        )
        jobs = await self._read(stmt)
        logger.debug("jobs.due_selected", count=len(jobs), window_start=now.isoformat(), lookahead=str(lookahead))
        return jobs

    async def read_all(self) -> list[Job]:
        """Return every persisted job, whatever its status."""
        return await self._read(_with_payloads(select(JobRecord)))

    async def _read(self, stmt: Any) -> list[Job]:
        async with self._unit_of_work() as uow:
            try:
                result = await uow.session.execute(stmt)
                records = list(result.scalars().all())
            except SQLAlchemyError as exc:
                logger.error("jobs.read_failed", error=str(exc))
                raise ReadError(cause=exc) from exc
            return [_to_job(record) for record in records]


def _iso(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


__all__ = ["SqlAlchemyJobStore", "payload_record"]
