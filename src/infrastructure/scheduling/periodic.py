"""Cancellable periodic jobs on the asyncio event loop."""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from core.config import Settings
from domain.services.task_jobs import TaskJobs

logger = structlog.get_logger()

SleepFunc = Callable[[float], Awaitable[Any]]


class PeriodicJob:
    """Run a synchronous action every `interval_seconds`.

    The first run happens one interval after start(). A failing run is
    logged and the job keeps its schedule. `sleep` is injectable so tests
    can drive the loop without real time passing.
    """

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        action: Callable[[], Any],
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self._action = action
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self.runs = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> bool:
        """Invoke the action now. Returns False if it raised."""
        self.runs += 1
        try:
            self._action()
        except Exception:
            self.failures += 1
            logger.exception("scheduled_job_failed", job=self.name, run=self.runs)
            return False
        return True

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"periodic:{self.name}")
        logger.info("scheduled_job_started", job=self.name, interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("scheduled_job_stopped", job=self.name, runs=self.runs)

    async def _loop(self) -> None:
        while True:
            await self._sleep(self.interval_seconds)
            self.run_once()


class Scheduler:
    """A named set of periodic jobs started and stopped together."""

    def __init__(self) -> None:
        self._jobs: dict[str, PeriodicJob] = {}

    @property
    def jobs(self) -> dict[str, PeriodicJob]:
        return dict(self._jobs)

    @property
    def running(self) -> bool:
        return any(job.running for job in self._jobs.values())

    def add(self, job: PeriodicJob) -> PeriodicJob:
        if job.name in self._jobs:
            raise ValueError(f"Job already registered: {job.name}")
        self._jobs[job.name] = job
        return job

    def start(self) -> None:
        for job in self._jobs.values():
            job.start()

    async def stop(self) -> None:
        for job in self._jobs.values():
            await job.stop()


def build_scheduler(
    jobs: TaskJobs,
    settings: Settings,
    sleep: SleepFunc = asyncio.sleep,
) -> Scheduler:
    """Register the hourly due-soon scan and the daily recurrence job."""
    scheduler = Scheduler()
    scheduler.add(
        PeriodicJob(
            "due_soon_scan",
            settings.due_soon_interval_seconds,
            jobs.scan_due_soon,
            sleep=sleep,
        )
    )
    scheduler.add(
        PeriodicJob(
            "recurring_tasks",
            settings.recurrence_interval_seconds,
            jobs.regenerate_recurring,
            sleep=sleep,
        )
    )
    return scheduler
