"""Task service layer: the in-memory task store."""

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import structlog

from core.exceptions import PersistenceError, ValidationError
from domain.entities.task import (
    Priority,
    Recurrence,
    Task,
    as_utc,
    new_task_id,
    utc_now,
    validate_task_fields,
)
from domain.repositories.task_repository import ITaskRepository

logger = structlog.get_logger()

# Fields a caller may change through update(); identity and audit fields are not.
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "due_date",
        "completed",
        "completed_at",
        "priority",
        "recurrence",
    }
)
# An explicit null for these leaves the stored value unchanged.
NON_NULLABLE_FIELDS = frozenset({"title", "completed", "priority", "recurrence"})


@dataclass(frozen=True)
class TaskFilters:
    """Optional predicates applied conjunctively by TaskService.list_tasks()."""

    completed: bool | None = None
    priority: Priority | None = None
    search: str | None = None


@dataclass(frozen=True)
class TaskCreateData:
    """Input for TaskService.create()."""

    title: str
    description: str = ""
    due_date: datetime | None = None
    priority: Priority = Priority.MEDIUM
    recurrence: Recurrence = Recurrence.NONE


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int


class TaskService:
    """Owns the task collection and keeps the repository in sync with it.

    Every mutation rewrites the whole collection through the repository.
    A failed write is logged and otherwise ignored: the in-memory change
    stands and the next successful write persists it.
    """

    def __init__(
        self,
        repository: ITaskRepository,
        clock: Callable[[], datetime] = utc_now,
        seed_sample_tasks: bool = True,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._seed_sample_tasks = seed_sample_tasks
        self._tasks: list[Task] = []
        self._lock = threading.RLock()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def initialize(self) -> None:
        """Load the stored collection, seeding sample tasks if nothing is stored."""
        with self._lock:
            try:
                stored = self._repository.load()
            except PersistenceError as e:
                logger.error(
                    "task_load_failed",
                    path=self._repository.describe(),
                    error=e.message,
                )
                stored = None

            if stored is not None:
                self._tasks = stored
                logger.info(
                    "tasks_initialized",
                    path=self._repository.describe(),
                    count=len(stored),
                )
                return

            self._tasks = self._sample_tasks() if self._seed_sample_tasks else []
            logger.info(
                "tasks_seeded",
                path=self._repository.describe(),
                count=len(self._tasks),
            )
            self._persist()

    def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        """Return matching tasks, newest first.

        The sort is stable, so tasks created in the same instant keep their
        in-memory order (most recently inserted first).
        """
        filters = filters or TaskFilters()
        with self._lock:
            result = list(self._tasks)

        if filters.completed is not None:
            result = [t for t in result if t.completed == filters.completed]
        if filters.priority is not None:
            result = [t for t in result if t.priority == filters.priority]
        if filters.search:
            result = [t for t in result if t.matches_search(filters.search)]

        return sorted(result, key=lambda t: t.created_at, reverse=True)

    def get_by_id(self, task_id: str) -> Task | None:
        with self._lock:
            return self._find(task_id)

    def create(self, data: TaskCreateData) -> Task:
        """Create a task and insert it at the front of the collection."""
        errors = validate_task_fields(
            data.title,
            data.description,
            require_title=True,
            priority=data.priority,
            recurrence=data.recurrence,
        )
        if errors:
            raise ValidationError(errors)

        with self._lock:
            now = self._clock()
            task = Task(
                title=data.title,
                description=data.description or "",
                due_date=data.due_date,
                priority=data.priority,
                recurrence=data.recurrence,
                created_at=now,
                updated_at=now,
            )
            while self._find(task.id) is not None:
                task.id = new_task_id()

            self._tasks.insert(0, task)
            self._persist()

        logger.info("task_created", task_id=task.id, title=task.title)
        return task

    def update(self, task_id: str, changes: Mapping[str, Any]) -> Task | None:
        """Shallow-merge the given fields over an existing task.

        Fields absent from `changes` are preserved. Unknown keys and the
        identity/audit fields (`id`, `created_at`, `updated_at`) are ignored.
        Changing `completed` without an explicit `completed_at` sets or
        clears the completion timestamp.
        """
        applied = {
            k: v
            for k, v in changes.items()
            if k in UPDATABLE_FIELDS and not (v is None and k in NON_NULLABLE_FIELDS)
        }
        errors = validate_task_fields(
            applied.get("title"),
            applied.get("description"),
            require_title="title" in applied,
            priority=applied.get("priority"),
            recurrence=applied.get("recurrence"),
        )
        if errors:
            raise ValidationError(errors)

        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None

            now = self._clock()
            was_completed = task.completed

            for name, value in applied.items():
                if name == "priority":
                    value = Priority(value)
                elif name == "recurrence":
                    value = Recurrence(value)
                elif name == "completed":
                    value = bool(value)
                elif name in ("due_date", "completed_at"):
                    value = as_utc(value)
                elif name == "description" and value is None:
                    value = ""
                setattr(task, name, value)

            if "completed" in applied and "completed_at" not in applied:
                if task.completed and not was_completed:
                    task.completed_at = now
                elif not task.completed:
                    task.completed_at = None

            task.touch(now)
            self._persist()

        logger.info("task_updated", task_id=task_id, fields=sorted(applied))
        return task

    def toggle(self, task_id: str) -> Task | None:
        """Flip completion; completed_at is set on completion and cleared on reopen."""
        with self._lock:
            task = self._find(task_id)
            if task is None:
                return None

            now = self._clock()
            if task.completed:
                task.uncomplete(now)
            else:
                task.complete(now)
            self._persist()

        logger.info("task_toggled", task_id=task_id, completed=task.completed)
        return task

    def delete(self, task_id: str) -> Task | None:
        """Remove a task permanently and return it."""
        with self._lock:
            for index, task in enumerate(self._tasks):
                if task.id == task_id:
                    removed = self._tasks.pop(index)
                    self._persist()
                    break
            else:
                return None

        logger.info("task_deleted", task_id=task_id)
        return removed

    def stats(self) -> TaskStats:
        """Aggregate counts, computed fresh on every call."""
        with self._lock:
            now = self._clock()
            total = len(self._tasks)
            completed = sum(1 for t in self._tasks if t.completed)
            overdue = sum(1 for t in self._tasks if t.is_overdue(now))

        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue=overdue,
        )

    def _find(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _persist(self) -> None:
        try:
            self._repository.save(self._tasks)
        except PersistenceError as e:
            logger.error(
                "task_persist_failed",
                path=self._repository.describe(),
                error=e.message,
                count=len(self._tasks),
            )

    def _sample_tasks(self) -> list[Task]:
        now = self._clock()
        return [
            Task(
                title="Complete project proposal",
                description="Finish the project proposal document",
                due_date=now + timedelta(days=2),
                priority=Priority.HIGH,
                recurrence=Recurrence.NONE,
                created_at=now,
                updated_at=now,
            ),
            Task(
                title="Team meeting preparation",
                description="Prepare agenda for weekly meeting",
                due_date=now + timedelta(days=1),
                priority=Priority.MEDIUM,
                recurrence=Recurrence.WEEKLY,
                created_at=now,
                updated_at=now,
            ),
        ]
