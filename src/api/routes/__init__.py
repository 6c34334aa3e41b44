"""API router configuration."""

from fastapi import APIRouter

from api.routes.health import router as health_router
from api.routes.tasks import router as tasks_router
from api.routes.tasks import stats_router

router = APIRouter()
router.include_router(health_router)
router.include_router(stats_router)
router.include_router(tasks_router)
