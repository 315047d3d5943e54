"""
schedin – job scheduling core.

Import path convention::

    from schedin.application.scheduler import parse_schedule, next_run
    from schedin.adapters.sqlalchemy import SqlAlchemyJobStore
    from schedin.kernel.errors import ScheduleError, CrudError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
