"""
Entity slices for fields, tasks, harvest records and weather observations.
"""

from teafarm.models.field import Field, FieldDraft, FieldPatch, FieldSearchParams
from teafarm.models.harvest_record import (
    HarvestRecord,
    HarvestRecordDraft,
    HarvestRecordPatch,
    HarvestRecordSearchParams,
)
from teafarm.models.task import Task, TaskDraft, TaskPatch, TaskSearchParams
from teafarm.models.weather_observation import (
    WeatherObservation,
    WeatherObservationDraft,
    WeatherObservationPatch,
    WeatherObservationSearchParams,
)
from teafarm.store.slice import EntitySlice


class FieldSlice(EntitySlice[Field, FieldDraft, FieldPatch, FieldSearchParams]):
    resource_name = "fields"
    noun = "field"
    draft_model = FieldDraft
    patch_model = FieldPatch
    filter_model = FieldSearchParams


class TaskSlice(EntitySlice[Task, TaskDraft, TaskPatch, TaskSearchParams]):
    resource_name = "tasks"
    noun = "task"
    draft_model = TaskDraft
    patch_model = TaskPatch
    filter_model = TaskSearchParams


class HarvestRecordSlice(
    EntitySlice[HarvestRecord, HarvestRecordDraft, HarvestRecordPatch, HarvestRecordSearchParams]
):
    resource_name = "harvest_records"
    noun = "harvest record"
    draft_model = HarvestRecordDraft
    patch_model = HarvestRecordPatch
    filter_model = HarvestRecordSearchParams


class WeatherObservationSlice(
    EntitySlice[
        WeatherObservation,
        WeatherObservationDraft,
        WeatherObservationPatch,
        WeatherObservationSearchParams,
    ]
):
    resource_name = "weather_observations"
    noun = "weather observation"
    draft_model = WeatherObservationDraft
    patch_model = WeatherObservationPatch
    filter_model = WeatherObservationSearchParams
