"""Kernel time – Clock protocol + implementations.

Every wall-clock read in schedin (the ``@once`` elapsed check, next-run
computation and the due-job window) goes through a :class:`Clock` so tests
can pin time with :class:`FrozenClock`.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract UTC clock."""

    def now(self) -> datetime: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """Test clock pinned to a fixed point in time.

    Naive datetimes are taken to be UTC.
    """

    def __init__(self, fixed: datetime) -> None:
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=UTC)
        self._fixed = fixed.astimezone(UTC)

    def now(self) -> datetime:
        return self._fixed

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        self._fixed += timedelta(**kwargs)


DEFAULT_CLOCK: Clock = SystemClock()

__all__ = ["DEFAULT_CLOCK", "Clock", "FrozenClock", "SystemClock"]
