"""
Unit tests for the in-memory FarmRepository.

Tests cover id assignment, search filters, referential integrity, partial
updates and dashboard aggregation.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from teafarm.models.field import FieldDraft, FieldPatch, FieldSearchParams
from teafarm.models.harvest_record import (
    HarvestRecordDraft,
    HarvestRecordSearchParams,
    TeaGrade,
)
from teafarm.models.task import TaskDraft, TaskPatch, TaskSearchParams, TaskStatus, TaskType
from teafarm.models.weather_observation import (
    WeatherObservationDraft,
    WeatherObservationSearchParams,
)
from teafarm.services.repository import (
    FarmRepository,
    IntegrityError,
    RecordNotFoundError,
    get_repository,
    reset_repository,
)


@pytest.fixture
def repo():
    repository = FarmRepository()
    repository.create_field(FieldDraft(name="North Slope", location="Block A", area_size=2.5, soil_type="Loam"))
    repository.create_field(FieldDraft(name="River Bend", location="Block B", area_size=1.5))
    return repository


def _task(field_id=1, **overrides):
    data = dict(
        field_id=field_id,
        task_type=TaskType.PRUNING,
        assigned_worker="Ravi",
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 3),
    )
    data.update(overrides)
    return TaskDraft(**data)


def test_ids_are_assigned_in_order(repo):
    assert [f.id for f in repo.fields.all()] == [1, 2]
    assert repo.fields.get(1).created_at is not None


def test_get_unknown_id_raises(repo):
    with pytest.raises(RecordNotFoundError):
        repo.fields.get(99)


def test_field_search_is_case_insensitive(repo):
    assert [f.name for f in repo.list_fields(FieldSearchParams(location="block b"))] == ["River Bend"]
    assert [f.name for f in repo.list_fields(FieldSearchParams(soil_type="LOAM"))] == ["North Slope"]
    assert len(repo.list_fields(FieldSearchParams())) == 2


def test_create_task_sets_field_name(repo):
    task = repo.create_task(_task(field_id=2))
    assert task.field_name == "River Bend"
    assert task.status == TaskStatus.PENDING


def test_create_task_for_unknown_field_raises(repo):
    with pytest.raises(IntegrityError):
        repo.create_task(_task(field_id=42))


def test_task_filters(repo):
    repo.create_task(_task(assigned_worker="Ravi", start_date=date(2024, 5, 1)))
    repo.create_task(
        _task(
            assigned_worker="Meena",
            task_type=TaskType.FERTILIZING,
            start_date=date(2024, 6, 1),
            end_date=date(2024, 6, 2),
        )
    )

    assert len(repo.list_tasks(TaskSearchParams(assigned_worker="rav"))) == 1
    assert len(repo.list_tasks(TaskSearchParams(task_type=TaskType.FERTILIZING))) == 1
    # Date bounds are inclusive
    in_may = repo.list_tasks(TaskSearchParams(start_date=date(2024, 5, 1), end_date=date(2024, 5, 31)))
    assert [t.assigned_worker for t in in_may] == ["Ravi"]


def test_partial_update_keeps_other_attributes(repo):
    task = repo.create_task(_task(notes="first pass"))

    updated = repo.update_task(task.id, TaskPatch(status=TaskStatus.COMPLETED))

    assert updated.status == TaskStatus.COMPLETED
    assert updated.notes == "first pass"
    assert updated.assigned_worker == "Ravi"


def test_update_that_breaks_date_order_raises(repo):
    task = repo.create_task(_task())

    with pytest.raises(ValidationError):
        repo.update_task(task.id, TaskPatch(end_date=date(2024, 4, 1)))


def test_moving_task_to_another_field_refreshes_field_name(repo):
    task = repo.create_task(_task(field_id=1))

    moved = repo.update_task(task.id, TaskPatch(field_id=2))

    assert moved.field_name == "River Bend"


def test_renaming_field_propagates_to_linked_records(repo):
    repo.create_task(_task(field_id=1))
    repo.create_harvest_record(
        HarvestRecordDraft(field_id=1, harvest_date=date(2024, 5, 2), quantity_kg=10, tea_grade=TeaGrade.HIGH)
    )

    repo.update_field(1, FieldPatch(name="Upper Slope"))

    assert repo.tasks.get(1).field_name == "Upper Slope"
    assert repo.harvest_records.get(1).field_name == "Upper Slope"


def test_delete_referenced_field_is_rejected(repo):
    repo.create_task(_task(field_id=1))

    with pytest.raises(IntegrityError):
        repo.delete_field(1)
    assert len(repo.fields) == 2


def test_delete_unreferenced_field(repo):
    repo.delete_field(2)
    assert [f.id for f in repo.fields.all()] == [1]


def test_harvest_and_weather_filters(repo):
    repo.create_harvest_record(
        HarvestRecordDraft(field_id=1, harvest_date=date(2024, 5, 2), quantity_kg=10, tea_grade=TeaGrade.HIGH)
    )
    repo.create_harvest_record(
        HarvestRecordDraft(field_id=2, harvest_date=date(2024, 6, 2), quantity_kg=5, tea_grade=TeaGrade.PREMIUM)
    )
    repo.create_weather_observation(
        WeatherObservationDraft(field_id=2, date=date(2024, 6, 2), temperature=20, rainfall=3, humidity=80)
    )

    assert len(repo.list_harvest_records(HarvestRecordSearchParams(tea_grade=TeaGrade.PREMIUM))) == 1
    assert len(repo.list_harvest_records(HarvestRecordSearchParams(field_id=1))) == 1
    assert len(repo.list_harvest_records(HarvestRecordSearchParams(end_date=date(2024, 5, 2)))) == 1
    assert len(repo.list_weather_observations(WeatherObservationSearchParams(field_id=1))) == 0
    assert len(repo.list_weather_observations(WeatherObservationSearchParams(start_date=date(2024, 6, 2)))) == 1


def test_dashboard_stats(repo):
    repo.create_task(_task(status=TaskStatus.COMPLETED))
    repo.create_task(_task(status=TaskStatus.IN_PROGRESS))
    repo.create_task(_task())
    repo.create_harvest_record(
        HarvestRecordDraft(field_id=1, harvest_date=date(2024, 5, 2), quantity_kg=10, tea_grade=TeaGrade.HIGH)
    )
    repo.create_harvest_record(
        HarvestRecordDraft(field_id=1, harvest_date=date(2024, 4, 30), quantity_kg=4, tea_grade=TeaGrade.HIGH)
    )
    repo.create_weather_observation(
        WeatherObservationDraft(field_id=1, date=date(2024, 5, 1), temperature=20, rainfall=3, humidity=70)
    )
    repo.create_weather_observation(
        WeatherObservationDraft(field_id=1, date=date(2024, 5, 2), temperature=24, rainfall=5, humidity=90)
    )

    stats = repo.dashboard_stats(today=date(2024, 5, 20))

    assert stats.total_fields == 2
    assert stats.total_area == 4.0
    assert (stats.completed_tasks, stats.in_progress_tasks, stats.pending_tasks) == (1, 1, 1)
    assert stats.total_harvest == 14
    assert stats.monthly_harvest == 10
    assert stats.average_temperature == 22
    assert stats.total_rainfall == 8
    assert stats.average_humidity == 80
    assert stats.harvest_by_grade == {TeaGrade.HIGH: 14}


def test_dashboard_stats_empty_month():
    stats = FarmRepository().dashboard_stats(today=date(2024, 5, 20))
    assert stats.total_fields == 0
    assert stats.average_temperature == 0.0
    assert stats.harvest_by_grade == {}


def test_reset_repository_returns_fresh_singleton():
    first = get_repository()
    first.revoked_tokens.add("abc")

    fresh = reset_repository()

    assert fresh is get_repository()
    assert fresh is not first
    assert fresh.revoked_tokens == set()
