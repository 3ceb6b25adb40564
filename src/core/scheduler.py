"""Scheduler for delayed reconciliation jobs (post-mutation resyncs)."""

import itertools
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from src.core.config import settings


logger = logging.getLogger(__name__)


class SchedulesResync(Protocol):
    """Anything that can run a job once after a delay."""

    def schedule(self, job: Callable[[], Awaitable[None]], *, delay_seconds: float | None = None) -> str: ...


class ResyncScheduler:
    """One-shot delayed jobs on an APScheduler AsyncIOScheduler.

    Jobs are never cancelled and overlapping jobs are allowed; each gets a
    unique id, so a new resync never replaces a pending one.
    """

    def __init__(
        self,
        *,
        delay_seconds: float | None = None,
        scheduler: AsyncIOScheduler | None = None,
    ) -> None:
        self.delay_seconds = settings.resync_delay_seconds if delay_seconds is None else delay_seconds
        self._scheduler = scheduler or AsyncIOScheduler()
        self._ids = itertools.count(1)

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        """Start the underlying scheduler (requires a running event loop)."""
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Resync scheduler started", extra={"delay_seconds": self.delay_seconds})

    def stop(self) -> None:
        """Shut the scheduler down without waiting for pending jobs."""
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Resync scheduler stopped")

    def schedule(self, job: Callable[[], Awaitable[None]], *, delay_seconds: float | None = None) -> str:
        """Run job once, delay_seconds from now. Returns the job id."""
        delay = self.delay_seconds if delay_seconds is None else delay_seconds
        run_date = datetime.now(UTC) + timedelta(seconds=delay)
        job_id = f"resync-{next(self._ids)}"
        self._scheduler.add_job(
            job,
            trigger=DateTrigger(run_date=run_date),
            id=job_id,
            name="resync",
            misfire_grace_time=None,
        )
        logger.debug("resync_scheduled", extra={"job_id": job_id, "run_date": run_date.isoformat()})
        return job_id
