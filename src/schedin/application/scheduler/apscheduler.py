"""Application scheduler – APSchedulerPoller.

Drives :meth:`JobStore.select_due` on a fixed cadence (60 s by default,
600 s lookahead).  Nothing is executed here: due jobs are handed to the
configured handler, which belongs to the external runner.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Any, Sequence

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from schedin.application.scheduler.job import Job
from schedin.application.scheduler.scheduler import DueJobHandler, JobStore
from schedin.kernel.errors import ReadError, TransactionError
from schedin.observability.logging import get_logger

__all__ = ["APSchedulerPoller", "log_due_jobs"]

POLL_JOB_ID = "schedin.select_due"

logger = get_logger(__name__)


async def log_due_jobs(jobs: Sequence[Job]) -> None:
    """Default handler: log each due job."""
    for job in jobs:
        logger.info(
            "job.due",
            job_id=str(job.job_id),
            job_name=job.name,
            job_type=job.job_type.value,
            next_run_at=job.next_run_at.isoformat() if job.next_run_at else None,
        )


class APSchedulerPoller:
    """Poll a :class:`JobStore` for due jobs with APScheduler's asyncio scheduler."""

    def __init__(
        self,
        store: JobStore,
        handler: DueJobHandler = log_due_jobs,
        *,
        interval: timedelta = timedelta(seconds=60),
        lookahead: timedelta = timedelta(seconds=600),
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        if lookahead < timedelta(0):
            raise ValueError("lookahead must not be negative")
        self._store = store
        self._handler = handler
        self._interval = interval
        self._lookahead = lookahead
        self._scheduler: Any | None = None

    async def poll_once(self) -> list[Job]:
        """Run one selection and hand the result to the handler.

        Storage failures are logged and yield an empty batch; the next tick
        simply selects again.
        """
        try:
            jobs = await self._store.select_due(self._lookahead)
        except (ReadError, TransactionError) as exc:
            logger.error("poller.read_failed", **exc.log_fields())
            return []
        logger.debug("poller.tick", due=len(jobs), lookahead_seconds=self._lookahead.total_seconds())
        if jobs:
            await self._handler(jobs)
        return jobs

    async def start(self) -> None:
        """Schedule :meth:`poll_once` on the running event loop."""
        if self._scheduler is not None:
            return
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.add_job(
            self.poll_once,
            trigger=IntervalTrigger(seconds=self._interval.total_seconds(), timezone="UTC"),
            id=POLL_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            "poller.started",
            interval_seconds=self._interval.total_seconds(),
            lookahead_seconds=self._lookahead.total_seconds(),
        )

    async def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("poller.stopped")

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None
