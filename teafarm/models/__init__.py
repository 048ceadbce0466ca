"""
Wire models for Tea Farm Operations.
"""

from teafarm.models.auth import LoginRequest, LoginResponse, User, UserRole
from teafarm.models.dashboard import DashboardStats
from teafarm.models.field import Field, FieldDraft, FieldPatch, FieldSearchParams
from teafarm.models.harvest_record import (
    HarvestRecord,
    HarvestRecordDraft,
    HarvestRecordPatch,
    HarvestRecordSearchParams,
    TeaGrade,
)
from teafarm.models.task import (
    Task,
    TaskDraft,
    TaskPatch,
    TaskSearchParams,
    TaskStatus,
    TaskType,
)
from teafarm.models.weather_observation import (
    WeatherObservation,
    WeatherObservationDraft,
    WeatherObservationPatch,
    WeatherObservationSearchParams,
)

__all__ = [
    "DashboardStats",
    "Field",
    "FieldDraft",
    "FieldPatch",
    "FieldSearchParams",
    "HarvestRecord",
    "HarvestRecordDraft",
    "HarvestRecordPatch",
    "HarvestRecordSearchParams",
    "LoginRequest",
    "LoginResponse",
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskSearchParams",
    "TaskStatus",
    "TaskType",
    "TeaGrade",
    "User",
    "UserRole",
    "WeatherObservation",
    "WeatherObservationDraft",
    "WeatherObservationPatch",
    "WeatherObservationSearchParams",
]
