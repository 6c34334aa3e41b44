"""Task API routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies import get_task_service
from api.schemas.common import ErrorResponse, MessageResponse, ValidationErrorResponse
from api.schemas.task import (
    DueDatePrediction,
    DueDatePredictionResponse,
    SuggestionsData,
    SuggestionsResponse,
    SuggestRequest,
    TaskCreate,
    TaskDetailResponse,
    TaskListResponse,
    TaskResponse,
    TaskStatsData,
    TaskStatsResponse,
    TaskToggleResponse,
    TaskUpdate,
)
from core.config import settings
from core.exceptions import InvalidInputError, TaskNotFoundError, ValidationError
from core.rate_limit import limiter
from domain.entities.task import Priority, Task, is_valid_text
from domain.services.due_date_predictor import predict_due_date
from domain.services.suggestion_service import suggest_task_details
from domain.services.task_service import TaskFilters, TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])
stats_router = APIRouter(tags=["tasks"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Task not found"}}
_INVALID = {400: {"model": ValidationErrorResponse, "description": "Validation error"}}


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks",
    responses=_INVALID,
)
@limiter.limit(settings.rate_limit_read)  # type: ignore[untyped-decorator]
async def list_tasks(
    request: Request,
    service: TaskService = Depends(get_task_service),
    completed: bool | None = Query(None, description="Only completed (true) or pending (false)"),
    priority: Priority | None = Query(None, description="Filter by priority"),
    search: str | None = Query(None, description="Case-insensitive match on title or description"),
) -> TaskListResponse:
    """
    List tasks, newest first.

    Filters are combined with AND. Omitting all of them returns every task.
    """
    tasks = service.list_tasks(
        TaskFilters(completed=completed, priority=priority, search=search or None)
    )
    return TaskListResponse(data=[_build_task_response(t) for t in tasks])


@router.post(
    "/suggest",
    response_model=SuggestionsResponse,
    summary="Suggest task details",
    responses={400: {"model": ErrorResponse, "description": "Input text is required"}},
)
@limiter.limit(settings.rate_limit_write)  # type: ignore[untyped-decorator]
async def suggest_task(request: Request, body: SuggestRequest) -> SuggestionsResponse:
    """Suggest titles, descriptions and tags from free text keywords."""
    text = (body.input or "").strip()
    if not text:
        raise InvalidInputError("Input text is required")
    if not is_valid_text(text):
        raise InvalidInputError("Input text contains invalid characters")

    suggestions = suggest_task_details(text)
    return SuggestionsResponse(data=SuggestionsData.model_validate(suggestions))


@router.get(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Get a task",
    responses=_NOT_FOUND,
)
@limiter.limit(settings.rate_limit_read)  # type: ignore[untyped-decorator]
async def get_task(
    request: Request,
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """Get a specific task by ID."""
    return TaskDetailResponse(data=_build_task_response(_require_task(service, task_id)))


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    responses=_INVALID,
)
@limiter.limit(settings.rate_limit_write)  # type: ignore[untyped-decorator]
async def create_task(
    request: Request,
    body: TaskCreate,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """
    Create a new task.

    All violated field rules are reported together in `errors`.
    """
    errors = body.validation_errors()
    if errors:
        raise ValidationError(errors)

    task = service.create(body.to_create_data())
    return TaskDetailResponse(data=_build_task_response(task))


@router.put(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Update a task",
    responses={**_INVALID, **_NOT_FOUND},
)
@limiter.limit(settings.rate_limit_write)  # type: ignore[untyped-decorator]
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """
    Update an existing task. Only fields present in the body are changed.

    Send `"due_date": null` to clear the due date.
    """
    errors = body.validation_errors()
    if errors:
        raise ValidationError(errors)

    task = service.update(task_id, body.changes())
    if task is None:
        raise TaskNotFoundError(task_id)
    return TaskDetailResponse(data=_build_task_response(task))


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete a task",
    responses=_NOT_FOUND,
)
@limiter.limit(settings.rate_limit_write)  # type: ignore[untyped-decorator]
async def delete_task(
    request: Request,
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    """Delete a task permanently."""
    if service.delete(task_id) is None:
        raise TaskNotFoundError(task_id)
    return MessageResponse(message="Task deleted successfully")


@router.post(
    "/{task_id}/predict-due-date",
    response_model=DueDatePredictionResponse,
    summary="Predict a due date",
    responses=_NOT_FOUND,
)
@limiter.limit(settings.rate_limit_write)  # type: ignore[untyped-decorator]
async def predict_task_due_date(
    request: Request,
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> DueDatePredictionResponse:
    """Predict a due date from keywords in the task's title and description.

    The task itself is not modified.
    """
    task = _require_task(service, task_id)
    predicted = predict_due_date(task.title, task.description or "")
    return DueDatePredictionResponse(
        data=DueDatePrediction(task_id=task.id, predicted_due_date=predicted)
    )


@router.patch(
    "/{task_id}/toggle",
    response_model=TaskToggleResponse,
    summary="Toggle task completion",
    responses=_NOT_FOUND,
)
@limiter.limit(settings.rate_limit_write)  # type: ignore[untyped-decorator]
async def toggle_task(
    request: Request,
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskToggleResponse:
    """Flip a task between completed and pending."""
    task = service.toggle(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    state = "completed" if task.completed else "pending"
    return TaskToggleResponse(
        data=_build_task_response(task),
        message=f"Task marked as {state}",
    )


@stats_router.get(
    "/tasks-stats",
    response_model=TaskStatsResponse,
    summary="Task statistics",
)
@limiter.limit(settings.rate_limit_read)  # type: ignore[untyped-decorator]
async def get_task_stats(
    request: Request,
    service: TaskService = Depends(get_task_service),
) -> TaskStatsResponse:
    """Total, completed, pending and overdue task counts."""
    return TaskStatsResponse(data=TaskStatsData.model_validate(service.stats()))


def _require_task(service: TaskService, task_id: str) -> Task:
    task = service.get_by_id(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def _build_task_response(task: Task) -> TaskResponse:
    """Convert domain entity to response schema."""
    return TaskResponse.model_validate(task)
