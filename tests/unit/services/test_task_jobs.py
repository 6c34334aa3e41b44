"""Unit tests for the due-soon scan and recurrence jobs."""

from datetime import datetime, timedelta, timezone

import pytest

from domain.entities.task import Priority, Recurrence, Task
from domain.services.task_jobs import TaskJobs, add_months, next_due_date
from domain.services.task_service import TaskCreateData, TaskFilters, TaskService

from tests.conftest import FROZEN_NOW, FrozenClock
from tests.unit.conftest import FakeTaskRepository


@pytest.fixture
def jobs(service: TaskService, clock: FrozenClock) -> TaskJobs:
    return TaskJobs(service, clock=clock)


class TestNextDueDate:
    @pytest.mark.parametrize(
        ("recurrence", "expected"),
        [
            (Recurrence.DAILY, FROZEN_NOW + timedelta(days=1)),
            (Recurrence.WEEKLY, FROZEN_NOW + timedelta(days=7)),
            (Recurrence.MONTHLY, FROZEN_NOW.replace(month=11)),
        ],
    )
    def test_advances_by_period(self, recurrence: Recurrence, expected: datetime) -> None:
        assert next_due_date(recurrence, FROZEN_NOW) == expected

    def test_none_has_no_next_date(self) -> None:
        with pytest.raises(ValueError):
            next_due_date(Recurrence.NONE, FROZEN_NOW)

    def test_monthly_clamps_to_end_of_short_month(self) -> None:
        jan_31 = datetime(2027, 1, 31, 12, 0, tzinfo=timezone.utc)

        assert add_months(jan_31, 1) == datetime(2027, 2, 28, 12, 0, tzinfo=timezone.utc)

    def test_monthly_rolls_over_year(self) -> None:
        dec_15 = datetime(2026, 12, 15, tzinfo=timezone.utc)

        assert add_months(dec_15, 1) == datetime(2027, 1, 15, tzinfo=timezone.utc)


class TestScanDueSoon:
    def test_finds_open_tasks_due_within_window(
        self, service: TaskService, jobs: TaskJobs
    ) -> None:
        soon = service.create(TaskCreateData("Soon", due_date=FROZEN_NOW + timedelta(hours=3)))
        edge = service.create(TaskCreateData("Edge", due_date=FROZEN_NOW + timedelta(hours=24)))
        service.create(TaskCreateData("Later", due_date=FROZEN_NOW + timedelta(hours=25)))
        service.create(TaskCreateData("Past", due_date=FROZEN_NOW - timedelta(hours=1)))
        service.create(TaskCreateData("Now", due_date=FROZEN_NOW))
        service.create(TaskCreateData("No due date"))
        done = service.create(TaskCreateData("Done", due_date=FROZEN_NOW + timedelta(hours=1)))
        service.toggle(done.id)

        result = jobs.scan_due_soon()

        assert {t.id for t in result} == {soon.id, edge.id}

    def test_does_not_mutate(self, service: TaskService, jobs: TaskJobs) -> None:
        task = service.create(TaskCreateData("Soon", due_date=FROZEN_NOW + timedelta(hours=3)))
        before = (task.updated_at, service.count)

        jobs.scan_due_soon()

        assert (task.updated_at, service.count) == before

    def test_custom_window(self, service: TaskService, clock: FrozenClock) -> None:
        service.create(TaskCreateData("In 3h", due_date=FROZEN_NOW + timedelta(hours=3)))
        jobs = TaskJobs(service, clock=clock, due_soon_window=timedelta(hours=2))

        assert jobs.scan_due_soon() == []


class TestRegenerateRecurring:
    def test_creates_successor_for_completed_recurring_task(
        self, service: TaskService, jobs: TaskJobs
    ) -> None:
        source = service.create(
            TaskCreateData(
                "Water plants",
                description="All of them",
                priority=Priority.LOW,
                recurrence=Recurrence.WEEKLY,
            )
        )
        service.toggle(source.id)

        created = jobs.regenerate_recurring()

        assert len(created) == 1
        successor = created[0]
        assert successor.id != source.id
        assert successor.title == "Water plants"
        assert successor.description == "All of them"
        assert successor.priority is Priority.LOW
        assert successor.recurrence is Recurrence.WEEKLY
        assert successor.due_date == FROZEN_NOW + timedelta(days=7)
        assert successor.completed is False

    def test_ignores_open_and_non_recurring_tasks(
        self, service: TaskService, jobs: TaskJobs
    ) -> None:
        service.create(TaskCreateData("Open recurring", recurrence=Recurrence.DAILY))
        one_off = service.create(TaskCreateData("Done one-off"))
        service.toggle(one_off.id)

        assert jobs.regenerate_recurring() == []

    def test_source_task_is_left_untouched(self, service: TaskService, jobs: TaskJobs) -> None:
        source = service.create(TaskCreateData("Standup", recurrence=Recurrence.DAILY))
        service.toggle(source.id)

        jobs.regenerate_recurring()

        assert source.completed is True
        assert source.recurrence is Recurrence.DAILY

    def test_repeated_runs_create_duplicates_by_default(
        self, service: TaskService, jobs: TaskJobs
    ) -> None:
        source = service.create(TaskCreateData("Standup", recurrence=Recurrence.DAILY))
        service.toggle(source.id)

        jobs.regenerate_recurring()
        jobs.regenerate_recurring()

        open_standups = service.list_tasks(TaskFilters(completed=False, search="Standup"))
        assert len(open_standups) == 2

    def test_skip_regenerated_prevents_duplicates(
        self, service: TaskService, clock: FrozenClock
    ) -> None:
        jobs = TaskJobs(service, clock=clock, skip_regenerated=True)
        source = service.create(TaskCreateData("Standup", recurrence=Recurrence.DAILY))
        service.toggle(source.id)

        first = jobs.regenerate_recurring()
        second = jobs.regenerate_recurring()

        assert len(first) == 1
        assert second == []

    def test_monthly_successor_due_next_month(
        self, service: TaskService, jobs: TaskJobs
    ) -> None:
        source = service.create(TaskCreateData("Pay rent", recurrence=Recurrence.MONTHLY))
        service.toggle(source.id)

        (successor,) = jobs.regenerate_recurring()

        assert successor.due_date == datetime(2026, 11, 18, 9, 0, tzinfo=timezone.utc)

    def test_invalid_stored_source_is_skipped(self, clock: FrozenClock) -> None:
        stored = [
            Task(
                title="   ",
                completed=True,
                recurrence=Recurrence.DAILY,
                created_at=FROZEN_NOW,
            ),
            Task(
                title="Water plants",
                completed=True,
                recurrence=Recurrence.WEEKLY,
                created_at=FROZEN_NOW - timedelta(hours=1),
            ),
        ]
        service = TaskService(FakeTaskRepository(stored), clock=clock)
        service.initialize()

        created = TaskJobs(service, clock=clock).regenerate_recurring()

        assert [t.title for t in created] == ["Water plants"]
        assert service.count == 3
