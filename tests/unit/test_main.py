"""Unit tests for the poller entry point."""
from __future__ import annotations

import asyncio
from pathlib import Path

from schedin.__main__ import run_poller
from schedin.adapters.sqlalchemy import SqlAlchemySessionFactory
from schedin.config import SchedinSettings


class TestRunPoller:
    def test_polls_once_and_shuts_down(self, tmp_path: Path) -> None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'jobs.db'}"

        async def run() -> None:
            sessions = SqlAlchemySessionFactory(url)
            await sessions.create_schema()
            await sessions.dispose()

            stop = asyncio.Event()
            stop.set()
            await run_poller(SchedinSettings(database_url=url), stop)

        asyncio.run(run())
