"""Persistence errors: failures of the job CRUD workflow."""

from __future__ import annotations

from typing import Any

from schedin.kernel.errors.base import BaseError


class CrudError(BaseError):
    """Base class for job persistence failures.

    ``reason`` is the short, stable text surfaced to API callers; the
    driver-level message, when there is one, travels in ``cause``.
    """

    default_code = "crud_error"
    reason = "Database operation failed"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or self.reason, **kwargs)


class CrudValidationError(CrudError):
    """Schedule or payload shape rejected before anything was written."""

    default_code = "validation"
    reason = "Invalid JSON Parameters"


class InsertionError(CrudError):
    """A write statement failed; the transaction was rolled back."""

    default_code = "insertion"
    reason = "Cannot Insert into Database"


class JobConflictError(InsertionError):
    """The owner already has a job with the same name."""

    default_code = "job_conflict"
    reason = "Job name already exists"

    def __init__(self, owner_id: Any, job_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Job '{job_name}' already exists for owner '{owner_id}'",
            detail={"owner_id": str(owner_id), "job_name": job_name},
            **kwargs,
        )
        self.owner_id = owner_id
        self.job_name = job_name


class ReadError(CrudError):
    default_code = "read"
    reason = "Unable to Read from Database"


class TransactionError(CrudError):
    """Begin or commit failed; callers must treat the operation as not done."""

    default_code = "transaction"
    reason = "Unable to create Transaction"


class PoolingError(CrudError):
    default_code = "pooling"
    reason = "Unable to Pool Database"


__all__ = [
    "CrudError",
    "CrudValidationError",
    "InsertionError",
    "JobConflictError",
    "PoolingError",
    "ReadError",
    "TransactionError",
]
