"""Unit tests for the schedule grammar parser and next-run calculator."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from schedin.application.scheduler import (
    AbsoluteTimestamp,
    IntegerInterval,
    ParsedSchedule,
    Routine,
    next_run,
    parse_schedule,
)
from schedin.kernel.errors import (
    AlreadyElapsedError,
    InvalidDateTimeFormatError,
    InvalidRoutineError,
    InvalidSyntaxError,
    InvalidTimeError,
    InvalidTimeframeError,
    ScheduleError,
)
from schedin.kernel.time import FrozenClock

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


def _clock() -> FrozenClock:
    return FrozenClock(NOW)


# ---------------------------------------------------------------------------
# @every
# ---------------------------------------------------------------------------


class TestEvery:
    @pytest.mark.parametrize(
        ("expression", "seconds"),
        [
            ("@every 10 sec", 10),
            ("@every 10 min", 600),
            ("@every 2 hr", 7200),
            ("@every 3 day", 259200),
            ("@every 0 sec", 0),
        ],
    )
    def test_normalizes_to_seconds(self, expression: str, seconds: int) -> None:
        schedule = parse_schedule(expression, clock=_clock())
        assert schedule.routine is Routine.EVERY
        assert schedule.timing == IntegerInterval(seconds)
        assert schedule.interval_seconds == seconds

    def test_one_hour_equals_sixty_minutes(self) -> None:
        assert parse_schedule("@every 1 hr").timing == parse_schedule("@every 60 min").timing

    def test_extra_whitespace_is_ignored(self) -> None:
        assert parse_schedule("  @every   5\tmin ").timing == IntegerInterval(300)

    def test_missing_integer(self) -> None:
        with pytest.raises(InvalidTimeError):
            parse_schedule("@every")

    def test_non_integer(self) -> None:
        with pytest.raises(InvalidTimeError):
            parse_schedule("@every ten min")

    def test_decimal_is_not_an_integer(self) -> None:
        with pytest.raises(InvalidTimeError):
            parse_schedule("@every 1.5 min")

    def test_negative_integer(self) -> None:
        with pytest.raises(InvalidTimeError):
            parse_schedule("@every -5 min")

    def test_interval_too_large(self) -> None:
        with pytest.raises(InvalidTimeError):
            parse_schedule("@every 100000 day")

    def test_missing_unit(self) -> None:
        with pytest.raises(InvalidTimeframeError):
            parse_schedule("@every 10")

    def test_unknown_unit(self) -> None:
        with pytest.raises(InvalidTimeframeError):
            parse_schedule("@every 10 hrs")

    def test_units_are_case_sensitive(self) -> None:
        with pytest.raises(InvalidTimeframeError):
            parse_schedule("@every 10 MIN")


# ---------------------------------------------------------------------------
# @daily
# ---------------------------------------------------------------------------


class TestDaily:
    def test_daily_is_a_day_interval(self) -> None:
        schedule = parse_schedule("@daily")
        assert schedule.routine is Routine.DAILY
        assert schedule.timing == IntegerInterval(86400)

    def test_daily_takes_no_timing(self) -> None:
        with pytest.raises(InvalidSyntaxError):
            parse_schedule("@daily 09:00:00")


# ---------------------------------------------------------------------------
# @once
# ---------------------------------------------------------------------------


class TestOnce:
    def test_future_datetime(self) -> None:
        schedule = parse_schedule("@once 2024-06-16 09:30:00", clock=_clock())
        assert schedule.routine is Routine.ONCE
        assert schedule.timing == AbsoluteTimestamp(datetime(2024, 6, 16, 9, 30, tzinfo=UTC))
        assert schedule.interval_seconds is None

    def test_past_datetime_has_elapsed(self) -> None:
        with pytest.raises(AlreadyElapsedError):
            parse_schedule("@once 2024-01-01 09:00:00", clock=_clock())

    def test_exactly_now_has_elapsed(self) -> None:
        with pytest.raises(AlreadyElapsedError):
            parse_schedule("@once 2024-06-15 12:00:00", clock=_clock())

    def test_one_second_ahead_is_accepted(self) -> None:
        schedule = parse_schedule("@once 2024-06-15 12:00:01", clock=_clock())
        assert schedule.timing == AbsoluteTimestamp(NOW + timedelta(seconds=1))

    @pytest.mark.parametrize(
        "expression",
        [
            "@once",
            "@once 2024-06-16",
            "@once 2024/06/16 09:00:00",
            "@once 2024-6-16 09:00:00",
            "@once 2024-06-16 9:00",
            "@once 2024-13-01 09:00:00",
            "@once 2024-02-30 09:00:00",
            "@once 2024-06-16 25:00:00",
        ],
    )
    def test_bad_format(self, expression: str) -> None:
        with pytest.raises(InvalidDateTimeFormatError):
            parse_schedule(expression, clock=_clock())

    def test_trailing_token_is_rejected(self) -> None:
        with pytest.raises(InvalidSyntaxError):
            parse_schedule("@once 2024-06-16 09:00:00 UTC", clock=_clock())


# ---------------------------------------------------------------------------
# Routine / syntax
# ---------------------------------------------------------------------------


class TestSyntax:
    @pytest.mark.parametrize("expression", ["", "   ", "every 10 min", "10 min"])
    def test_missing_at_sign(self, expression: str) -> None:
        with pytest.raises(InvalidSyntaxError):
            parse_schedule(expression)

    @pytest.mark.parametrize("expression", ["@hourly", "@Every 10 min", "@", "@weekly 1"])
    def test_unknown_routine(self, expression: str) -> None:
        with pytest.raises(InvalidRoutineError):
            parse_schedule(expression)

    def test_error_carries_expression_and_reason(self) -> None:
        with pytest.raises(ScheduleError) as info:
            parse_schedule("@every 10 weeks")
        assert info.value.expression == "@every 10 weeks"
        assert "timeframe" in info.value.reason
        assert info.value.to_dict()["errors"][0]["field"] == "schedule"

    @given(st.text())
    def test_parse_is_total(self, expression: str) -> None:
        try:
            schedule = parse_schedule(expression, clock=_clock())
        except ScheduleError:
            return
        assert isinstance(schedule, ParsedSchedule)
        assert schedule.routine is not Routine.INVALID

    @given(st.integers(min_value=0, max_value=10_000), st.sampled_from(["sec", "min", "hr", "day"]))
    def test_every_next_run_is_now_plus_interval(self, amount: int, unit: str) -> None:
        multiplier = {"sec": 1, "min": 60, "hr": 3600, "day": 86400}[unit]
        clock = _clock()
        schedule = parse_schedule(f"@every {amount} {unit}", clock=clock)
        assert next_run(schedule, clock=clock) == NOW + timedelta(seconds=amount * multiplier)


# ---------------------------------------------------------------------------
# next_run
# ---------------------------------------------------------------------------


class TestNextRun:
    def test_once_returns_carried_timestamp(self) -> None:
        clock = _clock()
        schedule = parse_schedule("@once 2025-01-01 00:00:00", clock=clock)
        clock.advance(days=30)
        assert next_run(schedule, clock=clock) == datetime(2025, 1, 1, tzinfo=UTC)

    def test_every_uses_current_clock(self) -> None:
        clock = _clock()
        schedule = parse_schedule("@every 10 sec", clock=clock)
        assert next_run(schedule, clock=clock) == NOW + timedelta(seconds=10)
        clock.advance(seconds=5)
        assert next_run(schedule, clock=clock) == NOW + timedelta(seconds=15)

    def test_daily(self) -> None:
        assert next_run(parse_schedule("@daily"), clock=_clock()) == NOW + timedelta(days=1)

    def test_system_clock_within_tolerance(self) -> None:
        before = datetime.now(UTC)
        result = next_run(parse_schedule("@every 1 min"))
        after = datetime.now(UTC)
        assert before + timedelta(minutes=1) <= result <= after + timedelta(minutes=1)

    def test_invalid_routine_cannot_be_scheduled(self) -> None:
        with pytest.raises(InvalidRoutineError):
            next_run(ParsedSchedule(Routine.INVALID, IntegerInterval(0)), clock=_clock())
