"""Pydantic schemas for Task API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from domain.entities.task import Priority, Recurrence, as_utc, validate_task_fields
from domain.services.task_service import TaskCreateData

_PRIORITY_HELP = "One of: low, medium, high"
_RECURRENCE_HELP = "One of: none, daily, weekly, monthly"


def _utc_field(value: datetime | None, info: ValidationInfo) -> datetime | None:
    try:
        return as_utc(value)
    except OverflowError as e:
        raise ValueError(f"{info.field_name} out of range") from e


class TaskCreate(BaseModel):
    """Schema for creating a Task.

    Field rules are checked by `validation_errors()` rather than by pydantic
    constraints so every violation is reported with its own message.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Complete project proposal",
                "description": "Finish the project proposal document",
                "due_date": "2026-10-20T09:00:00Z",
                "priority": "high",
                "recurrence": "none",
            }
        },
    )

    title: str | None = Field(None, description="Required, 1-200 characters")
    description: str | None = Field(None, description="Up to 1000 characters")
    due_date: datetime | None = None
    priority: str | None = Field(None, description=_PRIORITY_HELP)
    recurrence: str | None = Field(None, description=_RECURRENCE_HELP)

    @field_validator("due_date")
    @classmethod
    def _due_date_as_utc(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        return _utc_field(value, info)

    def validation_errors(self) -> list[str]:
        return validate_task_fields(
            self.title,
            self.description,
            require_title=True,
            priority=self.priority,
            recurrence=self.recurrence,
        )

    def to_create_data(self) -> TaskCreateData:
        return TaskCreateData(
            title=self.title or "",
            description=self.description or "",
            due_date=self.due_date,
            priority=Priority(self.priority or Priority.MEDIUM),
            recurrence=Recurrence(self.recurrence or Recurrence.NONE),
        )


class TaskUpdate(BaseModel):
    """Schema for updating a Task (all fields optional, only sent fields apply)."""

    title: str | None = Field(None, description="1-200 characters when present")
    description: str | None = Field(None, description="Up to 1000 characters")
    due_date: datetime | None = None
    completed: bool | None = None
    completed_at: datetime | None = None
    priority: str | None = Field(None, description=_PRIORITY_HELP)
    recurrence: str | None = Field(None, description=_RECURRENCE_HELP)

    @field_validator("due_date", "completed_at")
    @classmethod
    def _datetimes_as_utc(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        return _utc_field(value, info)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the request body."""
        return self.model_dump(exclude_unset=True)

    def validation_errors(self) -> list[str]:
        sent = self.changes()
        return validate_task_fields(
            sent.get("title"),
            sent.get("description"),
            require_title="title" in sent,
            priority=sent.get("priority"),
            recurrence=sent.get("recurrence"),
        )


class TaskResponse(BaseModel):
    """Schema for Task response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "9b2f6a43-3c1e-4d8e-9a63-5b1f0f7c2d11",
                "title": "Team meeting preparation",
                "description": "Prepare agenda for weekly meeting",
                "due_date": "2026-10-19T09:00:00Z",
                "completed": False,
                "completed_at": None,
                "priority": "medium",
                "recurrence": "weekly",
                "created_at": "2026-10-18T09:00:00Z",
                "updated_at": "2026-10-18T09:00:00Z",
            }
        },
    )

    id: str
    title: str
    description: str
    due_date: datetime | None
    completed: bool
    completed_at: datetime | None
    priority: Priority
    recurrence: Recurrence
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    """Schema for list of Tasks response."""

    success: bool = True
    data: list[TaskResponse]


class TaskDetailResponse(BaseModel):
    """Schema for single Task response."""

    success: bool = True
    data: TaskResponse


class TaskToggleResponse(TaskDetailResponse):
    message: str


class TaskStatsData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int
    pending: int
    overdue: int


class TaskStatsResponse(BaseModel):
    success: bool = True
    data: TaskStatsData


class SuggestRequest(BaseModel):
    input: str | None = Field(None, description="Free text to derive suggestions from")


class SuggestionsData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    titles: list[str]
    descriptions: list[str]
    tags: list[str]


class SuggestionsResponse(BaseModel):
    success: bool = True
    data: SuggestionsData


class DueDatePrediction(BaseModel):
    task_id: str
    predicted_due_date: datetime
    message: str = "Based on task content analysis"


class DueDatePredictionResponse(BaseModel):
    success: bool = True
    data: DueDatePrediction
