"""SQLAlchemy adapter – session factory, UoW, job tables and the job store."""
from schedin.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from schedin.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from schedin.adapters.sqlalchemy.models import Base, BinRecord, CodeRecord, JobRecord, TaskRecord, UtcDateTime
from schedin.adapters.sqlalchemy.job_store import SqlAlchemyJobStore

__all__ = [
    "Base",
    "BinRecord",
    "CodeRecord",
    "JobRecord",
    "SqlAlchemyJobStore",
    "SqlAlchemySessionFactory",
    "SqlAlchemyUnitOfWork",
    "TaskRecord",
    "UtcDateTime",
]
