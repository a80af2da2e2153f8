"""Periodic jobs started with the application."""

import asyncio
import logging
from typing import Awaitable, Callable

from eventhub.config import get_settings
from eventhub.database import get_db_context
from eventhub.services.event_service import EventService

logger = logging.getLogger(__name__)

settings = get_settings()


async def refresh_event_statuses() -> None:
    """Mark started events ongoing and ended events completed."""
    async with get_db_context() as db:
        changed = await EventService(db).refresh_statuses()

    if any(changed.values()):
        logger.info(
            f"Event statuses refreshed: {changed['ongoing']} ongoing, "
            f"{changed['completed']} completed"
        )


async def run_periodically(job: Callable[[], Awaitable[None]], interval: float) -> None:
    """Run job every interval seconds until cancelled. Failures are logged and retried."""
    logger.info(f"Periodic job {job.__name__} started, every {interval}s")
    while True:
        try:
            await job()
        except Exception as e:
            logger.error(f"Periodic job {job.__name__} failed: {e}")
        await asyncio.sleep(interval)


class BackgroundTaskManager:
    """Owns the asyncio tasks of the periodic jobs."""

    def __init__(self):
        self.tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        self.tasks.append(
            asyncio.create_task(
                run_periodically(
                    refresh_event_statuses,
                    settings.STATUS_REFRESH_INTERVAL_SECONDS,
                )
            )
        )

    async def stop(self) -> None:
        for task in self.tasks:
            task.cancel()
        await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
        logger.info("Background tasks stopped")


background_tasks = BackgroundTaskManager()
