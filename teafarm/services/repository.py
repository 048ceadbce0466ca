"""
In-memory repository backing the reference REST backend.

This module keeps every collection in process memory, assigns ids, stamps
timestamps, enforces that linked records reference an existing field, and
computes the dashboard aggregates.

Usage:
    from teafarm.services.repository import get_repository

    repo = get_repository()
    field = repo.create_field(FieldDraft(name="North", location="A", area_size=2.0))
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, Dict, Generic, Iterable, List, Optional, Set, Type, TypeVar

from pydantic import BaseModel

from teafarm.models.dashboard import DashboardStats
from teafarm.models.field import Field, FieldDraft, FieldPatch, FieldSearchParams
from teafarm.models.harvest_record import (
    HarvestRecord,
    HarvestRecordDraft,
    HarvestRecordPatch,
    HarvestRecordSearchParams,
)
from teafarm.models.task import Task, TaskDraft, TaskPatch, TaskSearchParams, TaskStatus
from teafarm.models.weather_observation import (
    WeatherObservation,
    WeatherObservationDraft,
    WeatherObservationPatch,
    WeatherObservationSearchParams,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordNotFoundError(Exception):
    """Raised when a record id does not exist."""

    pass


class IntegrityError(Exception):
    """
    Raised when a change would break a reference to a field.

    This exception is raised when:
    - a task, harvest record or weather observation names an unknown field
    - a field that is still referenced is deleted
    """

    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _contains(value: Optional[str], needle: Optional[str]) -> bool:
    if needle is None:
        return True
    return value is not None and needle.lower() in value.lower()


def _within(value: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


class Collection(Generic[RecordT]):
    """Id-keyed records of one model, listed in id order."""

    def __init__(self, model: Type[RecordT], label: str):
        self._model = model
        self._label = label
        self._rows: Dict[int, RecordT] = {}
        self._next_id = 1

    def all(self) -> List[RecordT]:
        return [self._rows[key] for key in sorted(self._rows)]

    def filter(self, predicate: Callable[[RecordT], bool]) -> List[RecordT]:
        return [row for row in self.all() if predicate(row)]

    def get(self, id: int) -> RecordT:
        if id not in self._rows:
            raise RecordNotFoundError(f"{self._label} {id} not found")
        return self._rows[id]

    def add(self, draft: BaseModel, **extra) -> RecordT:
        now = _now()
        record = self._model.model_validate(
            {**draft.model_dump(), **extra, "id": self._next_id, "created_at": now, "updated_at": now}
        )
        self._rows[record.id] = record
        self._next_id += 1
        return record

    def change(self, id: int, changes: Dict, **extra) -> RecordT:
        """Apply a partial update; the merged record is validated again."""
        current = self.get(id)
        data = {**current.model_dump(), **changes, **extra, "id": id, "updated_at": _now()}
        record = self._model.model_validate(data)
        self._rows[id] = record
        return record

    def put(self, record: RecordT) -> None:
        self._rows[record.id] = record

    def remove(self, id: int) -> None:
        self.get(id)
        del self._rows[id]

    def __len__(self) -> int:
        return len(self._rows)


class FarmRepository:
    """All collections of the farm plus the revoked-token list."""

    def __init__(self):
        self.fields: Collection[Field] = Collection(Field, "Field")
        self.tasks: Collection[Task] = Collection(Task, "Task")
        self.harvest_records: Collection[HarvestRecord] = Collection(
            HarvestRecord, "Harvest record"
        )
        self.weather_observations: Collection[WeatherObservation] = Collection(
            WeatherObservation, "Weather observation"
        )
        self.revoked_tokens: Set[str] = set()

    def _field_name(self, field_id: int) -> str:
        try:
            return self.fields.get(field_id).name
        except RecordNotFoundError:
            raise IntegrityError(f"Field {field_id} does not exist")

    def _linked_collections(self) -> Iterable[Collection]:
        return (self.tasks, self.harvest_records, self.weather_observations)

    def _change_linked(self, collection: Collection, id: int, patch: BaseModel):
        changes = patch.model_dump(exclude_unset=True)
        collection.get(id)
        if changes.get("field_id") is not None:
            return collection.change(id, changes, field_name=self._field_name(changes["field_id"]))
        return collection.change(id, changes)

    # Fields

    def list_fields(self, params: FieldSearchParams) -> List[Field]:
        return self.fields.filter(
            lambda f: _contains(f.name, params.name)
            and _contains(f.location, params.location)
            and _contains(f.soil_type, params.soil_type)
        )

    def create_field(self, draft: FieldDraft) -> Field:
        return self.fields.add(draft)

    def update_field(self, id: int, patch: FieldPatch) -> Field:
        field = self.fields.change(id, patch.model_dump(exclude_unset=True))
        for collection in self._linked_collections():
            for row in collection.filter(lambda r: r.field_id == id):
                collection.put(row.model_copy(update={"field_name": field.name}))
        return field

    def delete_field(self, id: int) -> None:
        self.fields.get(id)
        for collection in self._linked_collections():
            if collection.filter(lambda r: r.field_id == id):
                raise IntegrityError(f"Field {id} is still referenced by other records")
        self.fields.remove(id)

    # Tasks

    def list_tasks(self, params: TaskSearchParams) -> List[Task]:
        return self.tasks.filter(
            lambda t: (params.task_type is None or t.task_type == params.task_type)
            and (params.status is None or t.status == params.status)
            and _contains(t.assigned_worker, params.assigned_worker)
            and _within(t.start_date, params.start_date, params.end_date)
        )

    def create_task(self, draft: TaskDraft) -> Task:
        return self.tasks.add(draft, field_name=self._field_name(draft.field_id))

    def update_task(self, id: int, patch: TaskPatch) -> Task:
        return self._change_linked(self.tasks, id, patch)

    # Harvest records

    def list_harvest_records(self, params: HarvestRecordSearchParams) -> List[HarvestRecord]:
        return self.harvest_records.filter(
            lambda h: (params.tea_grade is None or h.tea_grade == params.tea_grade)
            and (params.field_id is None or h.field_id == params.field_id)
            and _within(h.harvest_date, params.start_date, params.end_date)
        )

    def create_harvest_record(self, draft: HarvestRecordDraft) -> HarvestRecord:
        return self.harvest_records.add(draft, field_name=self._field_name(draft.field_id))

    def update_harvest_record(self, id: int, patch: HarvestRecordPatch) -> HarvestRecord:
        return self._change_linked(self.harvest_records, id, patch)

    # Weather observations

    def list_weather_observations(
        self, params: WeatherObservationSearchParams
    ) -> List[WeatherObservation]:
        return self.weather_observations.filter(
            lambda w: (params.field_id is None or w.field_id == params.field_id)
            and _within(w.date, params.start_date, params.end_date)
        )

    def create_weather_observation(self, draft: WeatherObservationDraft) -> WeatherObservation:
        return self.weather_observations.add(draft, field_name=self._field_name(draft.field_id))

    def update_weather_observation(
        self, id: int, patch: WeatherObservationPatch
    ) -> WeatherObservation:
        return self._change_linked(self.weather_observations, id, patch)

    # Dashboard

    def dashboard_stats(self, today: Optional[date] = None) -> DashboardStats:
        """
        Aggregate the dashboard figures.

        Monthly values cover the calendar month of ``today``; averages are
        0.0 when the month has no observations.
        """
        today = today or date.today()

        def in_month(day: date) -> bool:
            return day.year == today.year and day.month == today.month

        tasks = self.tasks.all()
        harvests = self.harvest_records.all()
        monthly_weather = [w for w in self.weather_observations.all() if in_month(w.date)]

        by_grade: Dict = {}
        for record in harvests:
            by_grade[record.tea_grade] = by_grade.get(record.tea_grade, 0.0) + record.quantity_kg

        def mean(values: List[float]) -> float:
            return sum(values) / len(values) if values else 0.0

        return DashboardStats(
            total_fields=len(self.fields),
            total_area=sum(f.area_size for f in self.fields.all()),
            completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            in_progress_tasks=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            pending_tasks=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
            total_harvest=sum(h.quantity_kg for h in harvests),
            monthly_harvest=sum(h.quantity_kg for h in harvests if in_month(h.harvest_date)),
            average_temperature=mean([w.temperature for w in monthly_weather]),
            total_rainfall=sum(w.rainfall for w in monthly_weather),
            average_humidity=mean([w.humidity for w in monthly_weather]),
            harvest_by_grade=by_grade,
        )


# Module-level singleton instance
_repository: Optional[FarmRepository] = None


def get_repository() -> FarmRepository:
    """
    Get the singleton FarmRepository instance.

    Returns:
        FarmRepository instance
    """
    global _repository
    if _repository is None:
        _repository = FarmRepository()
        logger.info("In-memory farm repository created")
    return _repository


def reset_repository() -> FarmRepository:
    """Discard all records and start from an empty repository."""
    global _repository
    _repository = None
    return get_repository()
