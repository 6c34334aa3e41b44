"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes import router as api_router
from core.config import Settings, settings as default_settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from domain.entities.task import utc_now
from domain.repositories.task_repository import ITaskRepository
from domain.services.task_jobs import TaskJobs
from domain.services.task_service import TaskService
from infrastructure.scheduling.periodic import Scheduler, build_scheduler
from infrastructure.storage.json_task_repo import JsonTaskRepository

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the background jobs on startup and cancel them on shutdown."""
    app_settings: Settings = app.state.settings
    scheduler: Scheduler = app.state.scheduler

    if app_settings.scheduler_enabled:
        scheduler.start()
    else:
        logger.info("scheduler_disabled")

    yield

    await scheduler.stop()


def create_app(
    settings: Settings | None = None,
    repository: ITaskRepository | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The task store is built and loaded here, once per application, and
    handed to routes and background jobs through `app.state`.
    """
    settings = settings or default_settings
    repository = repository or JsonTaskRepository(settings.data_file)

    task_service = TaskService(
        repository,
        clock=clock,
        seed_sample_tasks=settings.seed_sample_tasks,
    )
    task_service.initialize()

    task_jobs = TaskJobs(
        task_service,
        clock=clock,
        due_soon_window=timedelta(hours=settings.due_soon_window_hours),
        skip_regenerated=settings.recurrence_skip_regenerated,
    )

    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Personal Task Manager\n\n"
            "Create, list, filter, complete and delete tasks. Tasks are kept "
            "in memory and saved to a JSON file after every change.\n\n"
            "### Features\n"
            "- **Filtering**: by completion, priority and free-text search\n"
            "- **Suggestions**: keyword-based titles, descriptions and tags\n"
            "- **Due dates**: heuristic due-date prediction from task text\n"
            "- **Background jobs**: hourly due-soon scan, daily recurrence\n\n"
            "### Response envelope\n"
            "Successful responses carry `success: true` and `data`; errors carry "
            "`success: false` with `error` or a list of `errors`."
        ),
        version="1.0.0",
        debug=settings.debug,
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "tasks",
                "description": "Task management, suggestions and statistics",
            },
        ],
    )

    app.state.settings = settings
    app.state.repository = repository
    app.state.task_service = task_service
    app.state.task_jobs = task_jobs
    app.state.scheduler = build_scheduler(task_jobs, settings)

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # The browser UI is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api")

    logger.info(
        "app_created",
        data_file=repository.describe(),
        task_count=task_service.count,
        scheduler_enabled=settings.scheduler_enabled,
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=not default_settings.is_production,
    )
