"""Periodic jobs over the task collection."""

import calendar
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import assert_never

import structlog

from core.exceptions import ValidationError
from domain.entities.task import Recurrence, Task, utc_now
from domain.services.task_service import TaskCreateData, TaskFilters, TaskService

logger = structlog.get_logger()


def add_months(value: datetime, months: int) -> datetime:
    """Same day N months later, clamped to the last day of a shorter month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_due_date(recurrence: Recurrence, now: datetime) -> datetime:
    """Due date of the next instance of a recurring task."""
    match recurrence:
        case Recurrence.DAILY:
            return now + timedelta(days=1)
        case Recurrence.WEEKLY:
            return now + timedelta(days=7)
        case Recurrence.MONTHLY:
            return add_months(now, 1)
        case Recurrence.NONE:
            raise ValueError("A non-recurring task has no next due date")
        case _:
            assert_never(recurrence)


class TaskJobs:
    """The due-soon scan and recurrence regeneration jobs.

    Both read the full collection through TaskService; only the recurrence
    job writes (via TaskService.create).
    """

    def __init__(
        self,
        task_service: TaskService,
        clock: Callable[[], datetime] = utc_now,
        due_soon_window: timedelta = timedelta(hours=24),
        skip_regenerated: bool = False,
    ) -> None:
        self._tasks = task_service
        self._clock = clock
        self._due_soon_window = due_soon_window
        self._skip_regenerated = skip_regenerated

    def scan_due_soon(self) -> list[Task]:
        """Find open tasks due within the look-ahead window. Read-only."""
        now = self._clock()
        due_soon = [
            task
            for task in self._tasks.list_tasks(TaskFilters(completed=False))
            if task.due_date is not None
            and timedelta(0) < task.due_date - now <= self._due_soon_window
        ]

        for task in due_soon:
            logger.debug("task_due_soon", task_id=task.id, due_date=task.due_date.isoformat())
        logger.info("due_soon_scan_completed", count=len(due_soon))
        return due_soon

    def regenerate_recurring(self) -> list[Task]:
        """Create the next instance of every completed recurring task.

        The completed source task is not modified, so it is picked up again
        on every run unless skip_regenerated is enabled.
        """
        now = self._clock()
        all_tasks = self._tasks.list_tasks()
        sources = [
            task
            for task in all_tasks
            if task.recurrence is not Recurrence.NONE and task.completed
        ]

        if self._skip_regenerated:
            open_keys = {
                (task.title, task.recurrence) for task in all_tasks if not task.completed
            }
            skipped = [t for t in sources if (t.title, t.recurrence) in open_keys]
            if skipped:
                logger.info(
                    "recurring_tasks_skipped",
                    count=len(skipped),
                    task_ids=[t.id for t in skipped],
                )
            sources = [t for t in sources if (t.title, t.recurrence) not in open_keys]

        created: list[Task] = []
        for source in sources:
            try:
                successor = self._tasks.create(
                    TaskCreateData(
                        title=source.title,
                        description=source.description,
                        due_date=next_due_date(source.recurrence, now),
                        priority=source.priority,
                        recurrence=source.recurrence,
                    )
                )
            except ValidationError as e:
                logger.warning(
                    "recurring_task_invalid",
                    source_task_id=source.id,
                    errors=e.errors,
                )
                continue
            logger.debug(
                "recurring_task_regenerated",
                source_task_id=source.id,
                task_id=successor.id,
                recurrence=source.recurrence.value,
            )
            created.append(successor)

        if created and not self._skip_regenerated:
            logger.warning(
                "recurrence_duplicates_possible",
                message=(
                    "Completed recurring tasks are not marked as regenerated; "
                    "the next run will create another instance for each"
                ),
                source_count=len(sources),
            )
        logger.info("recurring_tasks_created", count=len(created))
        return created
