"""SQLAlchemy adapter – SqlAlchemyUnitOfWork."""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schedin.kernel.errors import TransactionError
from schedin.observability.logging import get_logger

logger = get_logger(__name__)


class SqlAlchemyUnitOfWork:
    """SQLAlchemy async unit of work: one session, one transaction.

    Entering begins the transaction; leaving commits it, or rolls back when
    the block raised.  Begin and commit failures surface as
    :class:`TransactionError`.  A failing rollback is logged and the error
    that caused it keeps propagating.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._factory = session_factory
        self.session: Any = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self._factory()
        try:
            await self.session.begin()
        except SQLAlchemyError as exc:
            logger.error("db.begin_failed", error=str(exc))
            await self.session.close()
            raise TransactionError(cause=exc) from exc
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.session.close()

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.error("db.commit_failed", error=str(exc))
            await self.rollback()
            raise TransactionError("Failed to commit transaction", cause=exc) from exc

    async def rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            logger.error("db.rollback_failed", error=str(exc))


__all__ = ["SqlAlchemyUnitOfWork"]
