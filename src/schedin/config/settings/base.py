"""Config settings – Settings base class and SchedinSettings."""
from __future__ import annotations

import dataclasses
from datetime import timedelta
from typing import ClassVar

from schedin.config.validation import InvalidSettingValueError

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class SchedinSettings(Settings):
    """Runtime settings, read from ``SCHEDIN_*`` environment variables.

    ``poll_interval_seconds`` and ``lookahead_seconds`` default to the
    reference cadence: poll every minute, select ten minutes ahead.
    """

    _prefix: ClassVar[str] = "SCHEDIN"

    database_url: str
    poll_interval_seconds: int = 60
    lookahead_seconds: int = 600
    log_level: str = "INFO"
    log_json: bool = True
    sql_echo: bool = False

    def _validate(self) -> None:
        if not self.database_url:
            raise InvalidSettingValueError("database_url", self.database_url, "must not be empty")
        if self.poll_interval_seconds <= 0:
            raise InvalidSettingValueError("poll_interval_seconds", self.poll_interval_seconds, "must be positive")
        if self.lookahead_seconds < 0:
            raise InvalidSettingValueError("lookahead_seconds", self.lookahead_seconds, "must not be negative")
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise InvalidSettingValueError("log_level", self.log_level, f"must be one of {sorted(_LOG_LEVELS)}")

    @property
    def poll_interval(self) -> timedelta:
        return timedelta(seconds=self.poll_interval_seconds)

    @property
    def lookahead(self) -> timedelta:
        return timedelta(seconds=self.lookahead_seconds)


__all__ = ["SchedinSettings", "Settings"]
