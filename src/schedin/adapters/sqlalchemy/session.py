"""SQLAlchemy adapter – SqlAlchemySessionFactory."""
from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from schedin.kernel.errors import PoolingError
from schedin.observability.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SqlAlchemySessionFactory:
    """Creates async SQLAlchemy sessions from an engine URL.

    SQLite connections get ``PRAGMA foreign_keys=ON`` so the payload tables'
    ``ON DELETE CASCADE`` behaves as it does on Postgres.
    """

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        try:
            self._engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        except (ArgumentError, SQLAlchemyError, ImportError) as exc:
            logger.error("db.pool_failed", error=str(exc))
            raise PoolingError(cause=exc) from exc
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(self._engine, class_=AsyncSession, expire_on_commit=False)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def __call__(self) -> AsyncSession:
        return self._session_factory()

    async def create_schema(self) -> None:
        """Create the job tables if missing (tests and local runs; production uses migrations)."""
        from schedin.adapters.sqlalchemy.models import Base

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["SqlAlchemySessionFactory"]
