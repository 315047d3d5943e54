"""Run the due-job poller: ``python -m schedin`` or ``schedin-poller``.

Configuration comes from ``SCHEDIN_*`` environment variables (a ``.env``
file in the working directory is honoured).
"""
from __future__ import annotations

import asyncio
import signal

from schedin.adapters.sqlalchemy import SqlAlchemyJobStore, SqlAlchemySessionFactory
from schedin.application.scheduler import APSchedulerPoller
from schedin.config import DotenvSettingsLoader, SchedinSettings
from schedin.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def run_poller(settings: SchedinSettings, stop: asyncio.Event | None = None) -> None:
    """Poll until *stop* is set, then shut the scheduler and engine down."""
    stop = stop or asyncio.Event()
    sessions = SqlAlchemySessionFactory(settings.database_url, echo=settings.sql_echo)
    poller = APSchedulerPoller(
        SqlAlchemyJobStore(sessions),
        interval=settings.poll_interval,
        lookahead=settings.lookahead,
    )
    await poller.start()
    try:
        await poller.poll_once()
        await stop.wait()
    finally:
        await poller.stop()
        await sessions.dispose()


def main() -> None:
    settings = DotenvSettingsLoader().load(SchedinSettings)
    configure_logging(settings.log_level, json=settings.log_json)

    async def _serve() -> None:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)
        await run_poller(settings, stop)

    asyncio.run(_serve())


if __name__ == "__main__":
    main()
