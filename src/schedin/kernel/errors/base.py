"""Root error class shared by schedule, persistence and config failures."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Root of the schedin error hierarchy.

    Every error carries a machine-readable ``code`` (``default_code`` unless
    overridden per instance), a caller-facing ``message`` and an optional
    ``detail`` mapping. ``cause`` is also linked as ``__cause__``.

    ``str(err)`` is the single-line JSON form of :meth:`to_dict`, so an error
    can be written to a log line or an API response body unchanged.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.detail: dict[str, Any] = dict(detail) if detail else {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message, "detail": self.detail}
        if self.cause is not None:
            body["cause"] = repr(self.cause)
        return body

    def log_fields(self) -> dict[str, Any]:
        """Key/value pairs for a structlog event describing this error."""
        fields: dict[str, Any] = {"error_code": self.code, "error": self.message}
        if self.detail:
            fields["error_detail"] = self.detail
        if self.cause is not None:
            fields["cause"] = repr(self.cause)
        return fields

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.code}: {self.message}>"


__all__ = ["BaseError"]
