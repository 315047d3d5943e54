"""Application scheduler – schedule grammar, job models, and due-job polling."""
from schedin.application.scheduler.job import (
    BinPayload,
    CodePayload,
    Job,
    JobDescription,
    JobStatus,
    JobType,
    Payload,
    TaskPayload,
    payload_job_type,
    require_optional_text,
    validate_payload,
)
from schedin.application.scheduler.schedule import (
    AbsoluteTimestamp,
    IntegerInterval,
    ParsedSchedule,
    Routine,
    next_run,
    parse_schedule,
)
from schedin.application.scheduler.scheduler import DueJobHandler, DuePoller, JobStore
from schedin.application.scheduler.apscheduler import APSchedulerPoller, log_due_jobs

__all__ = [
    "APSchedulerPoller",
    "AbsoluteTimestamp",
    "BinPayload",
    "CodePayload",
    "DueJobHandler",
    "DuePoller",
    "IntegerInterval",
    "Job",
    "JobDescription",
    "JobStatus",
    "JobStore",
    "JobType",
    "ParsedSchedule",
    "Payload",
    "Routine",
    "TaskPayload",
    "log_due_jobs",
    "next_run",
    "parse_schedule",
    "payload_job_type",
    "require_optional_text",
    "validate_payload",
]
