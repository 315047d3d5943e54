"""Application scheduler – schedule grammar parser and next-run calculator.

Grammar (whitespace-separated, case-sensitive)::

    expression    := routine_token timing
    routine_token := "@once" | "@every" | "@daily"
    timing(once)  := date_token time_token      ; 2024-01-01 09:00:00 (UTC)
    timing(every) := integer unit               ; unit in sec/min/hr/day
    timing(daily) := <empty>

Examples::

    >>> parse_schedule("@every 10 min").timing
    IntegerInterval(seconds=600)
    >>> parse_schedule("@daily").timing
    IntegerInterval(seconds=86400)
"""
from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from schedin.kernel.errors import (
    AlreadyElapsedError,
    InvalidDateTimeFormatError,
    InvalidRoutineError,
    InvalidSyntaxError,
    InvalidTimeError,
    InvalidTimeframeError,
)
from schedin.kernel.time import DEFAULT_CLOCK, Clock

__all__ = [
    "AbsoluteTimestamp",
    "DATETIME_FORMAT",
    "IntegerInterval",
    "MAX_INTERVAL_SECONDS",
    "ParsedSchedule",
    "Routine",
    "TIMEFRAME_SECONDS",
    "Timing",
    "next_run",
    "parse_schedule",
]

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_DATETIME_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)
_INTEGER_RE = re.compile(r"[+-]?\d{1,19}", re.ASCII)

TIMEFRAME_SECONDS: dict[str, int] = {
    "sec": 1,
    "min": 60,
    "hr": 60 * 60,
    "day": 60 * 60 * 24,
}
DAILY_SECONDS = TIMEFRAME_SECONDS["day"]

# Largest interval the ``jobs.job_interval`` column holds (signed 32-bit).
MAX_INTERVAL_SECONDS = 2**31 - 1


class Routine(enum.Enum):
    """Recurrence class of a schedule expression."""

    ONCE = "@once"
    EVERY = "@every"
    DAILY = "@daily"
    INVALID = "invalid"


@dataclass(frozen=True)
class IntegerInterval:
    """Recurring interval, always normalized to seconds."""

    seconds: int

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)


@dataclass(frozen=True)
class AbsoluteTimestamp:
    """One-shot UTC instant."""

    at: datetime


Timing = IntegerInterval | AbsoluteTimestamp


@dataclass(frozen=True)
class ParsedSchedule:
    """Structured form of a schedule expression; never persisted as-is."""

    routine: Routine
    timing: Timing

    @property
    def interval_seconds(self) -> int | None:
        """Normalized interval for recurring routines, ``None`` for ``@once``."""
        if isinstance(self.timing, IntegerInterval):
            return self.timing.seconds
        return None


def parse_schedule(expression: str, *, clock: Clock | None = None) -> ParsedSchedule:
    """Parse *expression* into a :class:`ParsedSchedule`.

    Raises a :class:`~schedin.kernel.errors.ScheduleError` subclass for every
    malformed input; the only side effect is reading *clock* for the
    ``@once`` elapsed check.
    """
    return _ScheduleParser(expression, clock or DEFAULT_CLOCK).parse()


def next_run(schedule: ParsedSchedule, *, clock: Clock | None = None) -> datetime:
    """Return the next execution instant (UTC) for *schedule*.

    ``@once`` yields its carried timestamp; recurring routines yield
    ``now + interval``.
    """
    match schedule.routine, schedule.timing:
        case Routine.ONCE, AbsoluteTimestamp(at=at):
            return at
        case (Routine.EVERY | Routine.DAILY), IntegerInterval() as interval:
            return (clock or DEFAULT_CLOCK).now() + interval.as_timedelta()
        case _:
            raise InvalidRoutineError(schedule.routine.value, "Cannot compute next run for this routine")


class _ScheduleParser:
    """Single-use token walker over one expression."""

    def __init__(self, expression: str, clock: Clock) -> None:
        self._expression = expression
        self._tokens: Iterator[str] = iter(expression.split())
        self._clock = clock

    def parse(self) -> ParsedSchedule:
        routine = self._routine()
        match routine:
            case Routine.ONCE:
                timing: Timing = self._datetime()
            case Routine.EVERY:
                timing = self._interval()
            case Routine.DAILY:
                timing = IntegerInterval(DAILY_SECONDS)
            case _:
                raise InvalidRoutineError(self._expression)
        self._expect_end()
        return ParsedSchedule(routine=routine, timing=timing)

    def _routine(self) -> Routine:
        token = next(self._tokens, None)
        if token is None:
            raise InvalidSyntaxError(self._expression, "Missing 'routine' parameter")
        if not token.startswith("@"):
            raise InvalidSyntaxError(self._expression, "Invalid syntax for 'routine' parameter")
        try:
            return Routine(token)
        except ValueError:
            return Routine.INVALID

    def _datetime(self) -> AbsoluteTimestamp:
        date_token = next(self._tokens, None)
        if date_token is None:
            raise InvalidDateTimeFormatError(self._expression, "Missing 'date' field")
        time_token = next(self._tokens, None)
        if time_token is None:
            raise InvalidDateTimeFormatError(self._expression, "Missing 'time' field")

        raw = f"{date_token} {time_token}"
        if not _DATETIME_RE.fullmatch(raw):
            raise InvalidDateTimeFormatError(self._expression)
        try:
            at = datetime.strptime(raw, DATETIME_FORMAT).replace(tzinfo=UTC)
        except ValueError as exc:
            raise InvalidDateTimeFormatError(self._expression, cause=exc) from exc

        if at <= self._clock.now():
            raise AlreadyElapsedError(self._expression)
        return AbsoluteTimestamp(at)

    def _interval(self) -> IntegerInterval:
        time_token = next(self._tokens, None)
        if time_token is None:
            raise InvalidTimeError(self._expression, "Missing 'time'")
        if not _INTEGER_RE.fullmatch(time_token):
            raise InvalidTimeError(self._expression, "Invalid 'time'. It must be an integer")
        amount = int(time_token)
        if amount < 0:
            raise InvalidTimeError(self._expression, "Invalid 'time'. It must not be negative")

        unit = next(self._tokens, None)
        if unit not in TIMEFRAME_SECONDS:
            raise InvalidTimeframeError(self._expression)

        seconds = amount * TIMEFRAME_SECONDS[unit]
        if seconds > MAX_INTERVAL_SECONDS:
            raise InvalidTimeError(
                self._expression,
                f"Invalid 'time'. Interval exceeds {MAX_INTERVAL_SECONDS} seconds",
            )
        return IntegerInterval(seconds)

    def _expect_end(self) -> None:
        extra = next(self._tokens, None)
        if extra is not None:
            raise InvalidSyntaxError(self._expression, f"Unexpected token {extra!r} after schedule")
