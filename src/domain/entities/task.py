"""Task domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from uuid import uuid4

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_task_id() -> str:
    return str(uuid4())


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Recurrence(StrEnum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


TITLE_REQUIRED = "Title is required"
TITLE_TOO_LONG = f"Title must be less than {TITLE_MAX_LENGTH} characters"
DESCRIPTION_TOO_LONG = f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"
INVALID_PRIORITY = "Priority must be low, medium, or high"
INVALID_RECURRENCE = "Recurrence must be none, daily, weekly, or monthly"
TITLE_INVALID_TEXT = "Title contains invalid characters"
DESCRIPTION_INVALID_TEXT = "Description contains invalid characters"


def is_valid_text(value: str) -> bool:
    """False for strings that cannot be encoded as UTF-8 (lone surrogates)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_task_fields(
    title: str | None,
    description: str | None = None,
    require_title: bool = True,
    priority: str | None = None,
    recurrence: str | None = None,
) -> list[str]:
    """Return every violated rule, in a stable order. Never stops at the first."""
    errors: list[str] = []

    if require_title or title is not None:
        if not isinstance(title, str) or not title.strip():
            errors.append(TITLE_REQUIRED)
        elif len(title) > TITLE_MAX_LENGTH:
            errors.append(TITLE_TOO_LONG)
        elif not is_valid_text(title):
            errors.append(TITLE_INVALID_TEXT)

    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(DESCRIPTION_TOO_LONG)
    elif description and not is_valid_text(description):
        errors.append(DESCRIPTION_INVALID_TEXT)

    if priority is not None and priority not in {p.value for p in Priority}:
        errors.append(INVALID_PRIORITY)

    if recurrence is not None and recurrence not in {r.value for r in Recurrence}:
        errors.append(INVALID_RECURRENCE)

    return errors


@dataclass
class Task:
    """Domain entity for a Task."""

    title: str
    id: str = field(default_factory=new_task_id)
    description: str = ""
    due_date: datetime | None = None
    completed: bool = False
    completed_at: datetime | None = None
    priority: Priority = Priority.MEDIUM
    recurrence: Recurrence = Recurrence.NONE
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Coerce enums and datetimes, and keep updated_at at or after created_at."""
        self.priority = Priority(self.priority)
        self.recurrence = Recurrence(self.recurrence)
        self.due_date = as_utc(self.due_date)
        self.completed_at = as_utc(self.completed_at)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def touch(self, now: datetime) -> None:
        """Refresh updated_at without ever moving it backwards."""
        self.updated_at = max(now, self.updated_at, self.created_at)

    def complete(self, now: datetime) -> None:
        """Mark the task as completed."""
        self.completed = True
        self.completed_at = now
        self.touch(now)

    def uncomplete(self, now: datetime) -> None:
        """Mark the task as pending again."""
        self.completed = False
        self.completed_at = None
        self.touch(now)

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date is not None and self.due_date < now and not self.completed

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on title or description."""
        needle = term.lower()
        return needle in self.title.lower() or needle in (self.description or "").lower()
