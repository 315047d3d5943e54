"""Application scheduler – job descriptions, payload variants and the Job read model."""
from __future__ import annotations

import base64
import binascii
import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, assert_never

from schedin.kernel.errors import CrudValidationError

__all__ = [
    "BinPayload",
    "CodePayload",
    "Job",
    "JobDescription",
    "JobStatus",
    "JobType",
    "Payload",
    "TaskPayload",
    "payload_job_type",
    "require_optional_text",
    "validate_payload",
]


class JobType(str, enum.Enum):
    """Discriminator stored in ``jobs.job_type``."""

    TASK = "task"
    CODE = "code"
    BIN = "bin"


class JobStatus(str, enum.Enum):
    """Lifecycle state stored in ``jobs.job_status``."""

    SCHEDULED = "scheduled"
    RUNNING = "running"
    DISABLED = "disabled"


@dataclass(frozen=True)
class TaskPayload:
    """Reference to a named, pre-registered unit of work."""

    name: str


@dataclass(frozen=True)
class CodePayload:
    """Inline source (base64-encoded) plus the command that runs it."""

    source: str
    language: str
    command: str

    def decoded(self) -> bytes:
        return base64.b64decode(self.source, validate=True)


@dataclass(frozen=True)
class BinPayload:
    """Reference to an external binary artifact."""

    path: str
    command: str | None = None


Payload = TaskPayload | CodePayload | BinPayload


def payload_job_type(payload: Payload) -> JobType:
    """Return the ``job_type`` discriminator matching *payload*."""
    match payload:
        case TaskPayload():
            return JobType.TASK
        case CodePayload():
            return JobType.CODE
        case BinPayload():
            return JobType.BIN
        case _:
            assert_never(payload)


def validate_payload(payload: Any) -> Payload:
    """Check *payload* is exactly one well-formed variant.

    Raises :class:`CrudValidationError` otherwise.
    """
    match payload:
        case TaskPayload(name=name):
            _require_text("task.name", name)
        case CodePayload(source=source, language=language, command=command):
            _require_text("code.src", source)
            _require_text("code.lang", language)
            _require_text("code.cmd", command)
            try:
                base64.b64decode(source, validate=True)
            except (binascii.Error, ValueError, TypeError) as exc:
                raise CrudValidationError(
                    "Source Code must be base64-encoded",
                    detail={"field": "code.src"},
                    cause=exc,
                ) from exc
        case BinPayload(path=path, command=command):
            _require_text("bin.path", path)
            if command is not None and not isinstance(command, str):
                raise CrudValidationError("'bin.cmd' must be a string", detail={"field": "bin.cmd"})
        case None:
            raise CrudValidationError("Job requires one of 'task', 'code' or 'bin'")
        case _:
            raise CrudValidationError(
                f"Unsupported payload type {type(payload).__name__}",
                detail={"field": "payload"},
            )
    return payload


def _require_text(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise CrudValidationError(f"'{field}' must be a non-empty string", detail={"field": field})


def require_optional_text(field: str, value: Any) -> str | None:
    """Return *value* unchanged when it is ``None`` or a string."""
    if value is not None and not isinstance(value, str):
        raise CrudValidationError(f"'{field}' must be a string", detail={"field": field})
    return value


@dataclass(frozen=True)
class JobDescription:
    """What a caller submits to create a job.

    ``schedule`` is optional; a job without one is stored disabled.
    """

    name: str
    payload: Payload
    description: str | None = None
    schedule: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JobDescription":
        """Build from the API-shaped mapping.

        Exactly one of ``task``, ``code`` or ``bin`` must be present::

            {"name": "job-X", "schedule": "@every 10 sec", "task": {"name": "t1"}}
        """
        present = [key for key in ("task", "code", "bin") if data.get(key) is not None]
        if len(present) != 1:
            raise CrudValidationError(
                "Job requires exactly one of 'task', 'code' or 'bin'",
                detail={"present": present},
            )
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CrudValidationError("'name' must be a non-empty string", detail={"field": "name"})

        raw = data[present[0]]
        if not isinstance(raw, Mapping):
            raise CrudValidationError(f"'{present[0]}' must be an object", detail={"field": present[0]})
        try:
            payload: Payload
            match present[0]:
                case "task":
                    payload = TaskPayload(name=raw["name"])
                case "code":
                    payload = CodePayload(source=raw["src"], language=raw["lang"], command=raw["cmd"])
                case _:
                    payload = BinPayload(path=raw["path"], command=raw.get("cmd"))
        except KeyError as exc:
            raise CrudValidationError(
                f"Missing field '{present[0]}.{exc.args[0]}'",
                detail={"field": f"{present[0]}.{exc.args[0]}"},
            ) from exc

        return cls(
            name=name,
            payload=payload,
            description=require_optional_text("description", data.get("description")),
            schedule=require_optional_text("schedule", data.get("schedule")),
        )

    @property
    def job_type(self) -> JobType:
        return payload_job_type(self.payload)


@dataclass(frozen=True)
class Job:
    """A persisted job as returned by the due-job selector."""

    job_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    job_type: JobType
    status: JobStatus
    payload: Payload
    description: str | None = None
    schedule: str | None = None
    interval_seconds: int | None = None
    next_run_at: datetime | None = None
    created_at: datetime | None = None
    runs: int = 0
    error_count: int = 0
