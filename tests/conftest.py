"""Pytest configuration and fixtures."""

import os
import sys
import tempfile
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Disable rate limiting and background jobs in tests, and keep the module-level
# app in main.py away from the working directory.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("DATA_FILE", str(Path(tempfile.mkdtemp()) / "tasks.json"))

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import Settings

FROZEN_NOW = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime = FROZEN_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at FROZEN_NOW."""
    return FrozenClock()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Path of a not-yet-existing task file."""
    return tmp_path / "data" / "tasks.json"


@pytest.fixture
def test_settings(data_file: Path) -> Settings:
    return Settings(
        data_file=data_file,
        scheduler_enabled=False,
        rate_limit_enabled=False,
        seed_sample_tasks=True,
    )


@pytest.fixture
def app(test_settings: Settings, clock: FrozenClock) -> FastAPI:
    """Application backed by a temporary task file seeded with sample tasks."""
    from main import create_app

    return create_app(settings=test_settings, clock=clock)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
