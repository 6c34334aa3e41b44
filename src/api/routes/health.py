"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_repository, get_scheduler, get_task_service
from core.config import settings
from domain.repositories.task_repository import ITaskRepository
from domain.services.task_service import TaskService
from infrastructure.scheduling.periodic import Scheduler

API_VERSION = "1.0.0"

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    service: str
    version: str
    environment: str
    storage: str | None = None
    scheduler: str | None = None
    task_count: int | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=settings.app_name,
        version=API_VERSION,
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    repository: ITaskRepository = Depends(get_repository),
    service: TaskService = Depends(get_task_service),
    scheduler: Scheduler = Depends(get_scheduler),
) -> HealthResponse:
    """
    Detailed health check including task file access and background jobs.

    Use for monitoring dashboards that need to verify all dependencies.
    """
    storage_status = repository.check()
    overall_status = "OK" if storage_status == "healthy" else "DEGRADED"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=settings.app_name,
        version=API_VERSION,
        environment=settings.app_env,
        storage=storage_status,
        scheduler="running" if scheduler.running else "stopped",
        task_count=service.count,
    )
