"""Domain errors: caller-input problems with schedules and job descriptions."""

from __future__ import annotations

from typing import Any

from schedin.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule / invariant is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class ScheduleError(ValidationError):
    """A scheduling expression could not be accepted.

    Never retried; ``reason`` is meant to be shown to the caller as-is.
    """

    default_code = "invalid_schedule"
    default_reason = "Invalid schedule"

    def __init__(self, expression: str, reason: str | None = None, **kwargs: Any) -> None:
        self.expression = expression
        self.reason = reason or self.default_reason
        kwargs.setdefault("detail", {"expression": expression})
        kwargs.setdefault("errors", [{"field": "schedule", "message": self.reason}])
        super().__init__(self.reason, **kwargs)


class InvalidSyntaxError(ScheduleError):
    """Missing routine, routine token without ``@``, or trailing tokens."""

    default_code = "invalid_syntax"
    default_reason = "Invalid syntax for 'schedule' field"


class InvalidRoutineError(ScheduleError):
    default_code = "invalid_routine"
    default_reason = "Invalid 'routine'. Valid routines: @once/@every/@daily"


class InvalidTimeError(ScheduleError):
    default_code = "invalid_time"
    default_reason = "Invalid 'time'. It must be a non-negative integer"


class InvalidTimeframeError(ScheduleError):
    default_code = "invalid_timeframe"
    default_reason = "Invalid 'timeframe'. Valid time frames: sec/min/hr/day"


class InvalidDateTimeFormatError(ScheduleError):
    default_code = "invalid_datetime_format"
    default_reason = "Invalid DateTime format. Expected YYYY-MM-DD HH:MM:SS"


class AlreadyElapsedError(ScheduleError):
    default_code = "already_elapsed"
    default_reason = "Invalid DateTime: It has already elapsed"


__all__ = [
    "AlreadyElapsedError",
    "DomainError",
    "InvalidDateTimeFormatError",
    "InvalidRoutineError",
    "InvalidSyntaxError",
    "InvalidTimeError",
    "InvalidTimeframeError",
    "ScheduleError",
    "ValidationError",
]
