"""JSON file implementation of the Task repository."""

from datetime import datetime
from pathlib import Path
from typing import Any

import orjson
import structlog

from core.exceptions import PersistenceError
from domain.entities.task import Priority, Recurrence, Task, as_utc

logger = structlog.get_logger()


class JsonTaskRepository:
    """Stores the whole collection as one pretty-printed JSON array.

    Every save rewrites the file in full. There is no protection against a
    partially written file if the process dies mid-write.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return str(self._path)

    def load(self) -> list[Task] | None:
        """Load all tasks, or None if the file does not exist."""
        if not self._path.exists():
            return None

        try:
            raw = orjson.loads(self._path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read task file: {e}", self._path) from e

        if not isinstance(raw, list):
            raise PersistenceError("Task file must contain a JSON array", self._path)

        try:
            tasks = [self._to_entity(item) for item in raw]
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise PersistenceError(f"Malformed task entry: {e}", self._path) from e

        logger.debug("tasks_loaded", path=str(self._path), count=len(tasks))
        return tasks

    def save(self, tasks: list[Task]) -> None:
        """Overwrite the file with the given collection."""
        try:
            payload = orjson.dumps(
                [self._to_dict(task) for task in tasks],
                option=orjson.OPT_INDENT_2,
            )
        except orjson.JSONEncodeError as e:
            raise PersistenceError(f"Could not encode tasks: {e}", self._path) from e

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(payload)
        except OSError as e:
            raise PersistenceError(f"Could not write task file: {e}", self._path) from e

    def check(self) -> str:
        """Report whether the file (or its directory) is usable."""
        if self._path.exists():
            if not self._path.is_file():
                return "unhealthy: not a regular file"
            try:
                with self._path.open("rb"):
                    pass
            except OSError as e:
                return f"unhealthy: {e}"
            return "healthy"

        parent = self._path.parent
        if parent.exists() and not parent.is_dir():
            return "unhealthy: parent is not a directory"
        return "healthy"

    @staticmethod
    def _to_dict(task: Task) -> dict[str, Any]:
        """Convert entity to its persisted JSON object."""
        return {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "due_date": _format_datetime(task.due_date),
            "completed": task.completed,
            "completed_at": _format_datetime(task.completed_at),
            "priority": task.priority.value,
            "recurrence": task.recurrence.value,
            "created_at": _format_datetime(task.created_at),
            "updated_at": _format_datetime(task.updated_at),
        }

    @staticmethod
    def _to_entity(data: dict[str, Any]) -> Task:
        """Convert a persisted JSON object to an entity."""
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")

        created_at = _parse_datetime(data["created_at"])
        if created_at is None:
            raise ValueError("created_at is required")

        return Task(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            due_date=_parse_datetime(data.get("due_date")),
            completed=bool(data.get("completed", False)),
            completed_at=_parse_datetime(data.get("completed_at")),
            priority=Priority(data.get("priority") or Priority.MEDIUM),
            recurrence=Recurrence(data.get("recurrence") or Recurrence.NONE),
            created_at=created_at,
            updated_at=_parse_datetime(data.get("updated_at")) or created_at,
        )


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None or value == "":
        return None
    return as_utc(datetime.fromisoformat(value))
