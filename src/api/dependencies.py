"""Dependency providers for API routes.

The app factory builds one TaskService and one Scheduler per
application and stores them on `app.state`; routes receive them from here.
"""

from fastapi import Request

from domain.repositories.task_repository import ITaskRepository
from domain.services.task_service import TaskService
from infrastructure.scheduling.periodic import Scheduler


def get_task_service(request: Request) -> TaskService:
    """Get the application's Task service."""
    return request.app.state.task_service  # type: ignore[no-any-return]


def get_repository(request: Request) -> ITaskRepository:
    return request.app.state.repository  # type: ignore[no-any-return]


def get_scheduler(request: Request) -> Scheduler:
    return request.app.state.scheduler  # type: ignore[no-any-return]
