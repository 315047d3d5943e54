"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError                    (domain.py)
    │   └── ValidationError
    │       └── ScheduleError
    │           ├── InvalidSyntaxError
    │           ├── InvalidRoutineError
    │           ├── InvalidTimeError
    │           ├── InvalidTimeframeError
    │           ├── InvalidDateTimeFormatError
    │           └── AlreadyElapsedError
    └── CrudError                      (infrastructure.py)
        ├── CrudValidationError
        ├── InsertionError
        │   └── JobConflictError
        ├── ReadError
        ├── TransactionError
        └── PoolingError
"""

from schedin.kernel.errors.base import BaseError
from schedin.kernel.errors.domain import (
    AlreadyElapsedError,
    DomainError,
    InvalidDateTimeFormatError,
    InvalidRoutineError,
    InvalidSyntaxError,
    InvalidTimeError,
    InvalidTimeframeError,
    ScheduleError,
    ValidationError,
)
from schedin.kernel.errors.infrastructure import (
    CrudError,
    CrudValidationError,
    InsertionError,
    JobConflictError,
    PoolingError,
    ReadError,
    TransactionError,
)

__all__ = [
    "AlreadyElapsedError",
    "BaseError",
    "CrudError",
    "CrudValidationError",
    "DomainError",
    "InsertionError",
    "InvalidDateTimeFormatError",
    "InvalidRoutineError",
    "InvalidSyntaxError",
    "InvalidTimeError",
    "InvalidTimeframeError",
    "JobConflictError",
    "PoolingError",
    "ReadError",
    "ScheduleError",
    "TransactionError",
    "ValidationError",
]
