"""
Expired task purge.

A polling loop that permanently removes tasks whose soft-delete is older
than the retention window. Purging happens only here, never as a side
effect of reads, so its timing is explicit and testable.
"""

import asyncio
import logging
from typing import Callable, Optional

from app.services.task_service import TaskService

logger = logging.getLogger(__name__)


def run_cleanup_once(service: TaskService) -> int:
    """Run one purge sweep and return the number of tasks removed."""
    return service.cleanup_expired_tasks()


async def run_cleanup_scheduler(service_factory: Callable[[], TaskService], *, interval_seconds: float = 3600.0) -> None:
    """
    Purge expired tasks every ``interval_seconds``.

    The store calls are blocking, so each sweep runs in a worker thread.
    A failed sweep is logged and retried on the next tick.

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(1.0, float(interval_seconds))

    while True:
        try:
            purged = await asyncio.to_thread(run_cleanup_once, service_factory())
            logger.debug("Cleanup sweep finished, %d tasks purged", purged)
        except Exception:
            logger.exception("Cleanup sweep failed")
        await asyncio.sleep(sleep_s)


class TaskCleanupScheduler:
    """Owns the background purge task for the application lifespan."""

    def __init__(self, service_factory: Callable[[], TaskService], interval_seconds: float):
        self.service_factory = service_factory
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(run_cleanup_scheduler(self.service_factory,
                                                               interval_seconds=self.interval_seconds))
        logger.info("Task cleanup scheduled every %ss", self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Task cleanup stopped")
