"""Shared fixtures for unit tests."""

import copy
from collections.abc import Callable
from datetime import datetime

import pytest

from core.exceptions import PersistenceError
from domain.entities.task import Task
from domain.services.task_service import TaskService


class FakeTaskRepository:
    """In-memory repository that records every save."""

    def __init__(self, stored: list[Task] | None = None) -> None:
        self.stored = copy.deepcopy(stored) if stored is not None else None
        self.saves = 0
        self.fail_on_save = False
        self.fail_on_load = False

    def load(self) -> list[Task] | None:
        if self.fail_on_load:
            raise PersistenceError("disk on fire", "fake.json")
        return copy.deepcopy(self.stored) if self.stored is not None else None

    def save(self, tasks: list[Task]) -> None:
        if self.fail_on_save:
            raise PersistenceError("disk full", "fake.json")
        self.saves += 1
        self.stored = copy.deepcopy(tasks)

    def describe(self) -> str:
        return "fake.json"

    def check(self) -> str:
        return "healthy"


@pytest.fixture
def repo() -> FakeTaskRepository:
    """Create an empty FakeTaskRepository."""
    return FakeTaskRepository()


@pytest.fixture
def service(repo: FakeTaskRepository, clock: Callable[[], datetime]) -> TaskService:
    """Service over an empty repository, without sample tasks."""
    svc = TaskService(repo, clock=clock, seed_sample_tasks=False)
    svc.initialize()
    return svc


@pytest.fixture
def seeded_service(repo: FakeTaskRepository, clock: Callable[[], datetime]) -> TaskService:
    """Service seeded with the two sample tasks."""
    svc = TaskService(repo, clock=clock, seed_sample_tasks=True)
    svc.initialize()
    return svc
