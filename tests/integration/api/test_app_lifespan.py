"""Tests for application startup and shutdown."""

import json
from pathlib import Path

import pytest

from core.config import Settings
from main import create_app

from tests.conftest import FrozenClock


class TestLifespan:
    @pytest.mark.asyncio
    async def test_scheduler_runs_for_app_lifetime(
        self, data_file: Path, clock: FrozenClock
    ) -> None:
        settings = Settings(data_file=data_file, scheduler_enabled=True, rate_limit_enabled=False)
        app = create_app(settings=settings, clock=clock)

        async with app.router.lifespan_context(app):
            assert app.state.scheduler.running
            assert set(app.state.scheduler.jobs) == {"due_soon_scan", "recurring_tasks"}

        assert not app.state.scheduler.running

    @pytest.mark.asyncio
    async def test_scheduler_disabled(self, app) -> None:  # type: ignore[no-untyped-def]
        async with app.router.lifespan_context(app):
            assert not app.state.scheduler.running


class TestStartupLoad:
    def test_seeds_file_on_first_start(self, data_file: Path, clock: FrozenClock) -> None:
        create_app(settings=Settings(data_file=data_file), clock=clock)

        stored = json.loads(data_file.read_text(encoding="utf-8"))
        assert [t["title"] for t in stored] == [
            "Complete project proposal",
            "Team meeting preparation",
        ]

    def test_reloads_existing_file(self, data_file: Path, clock: FrozenClock) -> None:
        data_file.parent.mkdir(parents=True)
        data_file.write_text("[]", encoding="utf-8")

        app = create_app(settings=Settings(data_file=data_file), clock=clock)

        assert app.state.task_service.count == 0

    def test_corrupt_file_falls_back_to_samples(
        self, data_file: Path, clock: FrozenClock
    ) -> None:
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{corrupt", encoding="utf-8")

        app = create_app(settings=Settings(data_file=data_file), clock=clock)

        assert app.state.task_service.count == 2
        assert json.loads(data_file.read_text(encoding="utf-8"))[0]["priority"] == "high"

    def test_seeding_can_be_disabled(self, data_file: Path, clock: FrozenClock) -> None:
        app = create_app(
            settings=Settings(data_file=data_file, seed_sample_tasks=False), clock=clock
        )

        assert app.state.task_service.count == 0
