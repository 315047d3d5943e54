"""Unit tests for kernel time utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from schedin.kernel.time import DEFAULT_CLOCK, Clock, FrozenClock, SystemClock


class TestSystemClock:
    def test_now_returns_utc_aware_datetime(self) -> None:
        result = SystemClock().now()
        assert result.tzinfo is not None
        assert result.utcoffset() == timedelta(0)

    def test_close_to_wall_clock(self) -> None:
        assert abs((SystemClock().now() - datetime.now(UTC)).total_seconds()) < 1.0

    def test_default_clock_is_the_system_clock(self) -> None:
        assert isinstance(DEFAULT_CLOCK, SystemClock)


class TestFrozenClock:
    def test_now_returns_fixed_time(self) -> None:
        fixed = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
        assert FrozenClock(fixed).now() == fixed

    def test_naive_is_taken_as_utc(self) -> None:
        assert FrozenClock(datetime(2024, 6, 15, 12, 0)).now() == datetime(2024, 6, 15, 12, 0, tzinfo=UTC)

    def test_other_offsets_are_normalised(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        clk = FrozenClock(datetime(2024, 6, 15, 14, 0, tzinfo=plus_two))
        assert clk.now() == datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
        assert clk.now().tzinfo == UTC

    def test_advance(self) -> None:
        clk = FrozenClock(datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC))
        clk.advance(seconds=30)
        assert clk.now() == datetime(2024, 6, 15, 12, 0, 30, tzinfo=UTC)

    def test_satisfies_protocol(self) -> None:
        clock: Clock = FrozenClock(datetime(2024, 1, 1, tzinfo=UTC))
        assert clock.now().year == 2024
