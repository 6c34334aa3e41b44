"""Heuristic due-date prediction from task text."""

from datetime import datetime, timedelta

from domain.entities.task import utc_now

DEFAULT_DUE_DAYS = 7

# First matching rule wins.
DUE_DAY_RULES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("urgent", "asap"), 1),
    (("soon", "quick"), 3),
    (("long", "research"), 14),
)


def predict_due_days(title: str, description: str = "") -> int:
    """Number of days until the task is likely due."""
    content = f"{title} {description or ''}".lower()
    for keywords, days in DUE_DAY_RULES:
        if any(keyword in content for keyword in keywords):
            return days
    return DEFAULT_DUE_DAYS


def predict_due_date(
    title: str,
    description: str = "",
    now: datetime | None = None,
) -> datetime:
    """Predicted due date: now plus the heuristic number of days."""
    return (now or utc_now()) + timedelta(days=predict_due_days(title, description))
