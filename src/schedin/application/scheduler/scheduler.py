"""Application scheduler – JobStore port and DuePoller protocol."""
from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Awaitable, Callable, Protocol, Sequence, runtime_checkable

from schedin.application.scheduler.job import Job, JobDescription

__all__ = ["DueJobHandler", "DuePoller", "JobStore"]

DueJobHandler = Callable[[Sequence[Job]], Awaitable[None]]


@runtime_checkable
class JobStore(Protocol):
    """Port: atomic job persistence and due-job selection."""

    async def insert(self, description: JobDescription, owner_id: uuid.UUID) -> uuid.UUID: ...
    async def delete(self, owner_id: uuid.UUID, job_name: str) -> None: ...
    async def select_due(self, lookahead: timedelta) -> list[Job]: ...
    async def read_all(self) -> list[Job]: ...


@runtime_checkable
class DuePoller(Protocol):
    """Port: periodically hand due jobs to an external runner."""

    async def poll_once(self) -> list[Job]: ...
    async def start(self) -> None: ...
    async def stop(self) -> None: ...

    @property
    def is_running(self) -> bool: ...
