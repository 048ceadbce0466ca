"""
Task data models for Tea Farm Operations.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from teafarm.models.base import CamelModel, NonBlankStr, PatchModel


class TaskType(str, Enum):
    PLANTING = "PLANTING"
    FERTILIZING = "FERTILIZING"
    PEST_CONTROL = "PEST_CONTROL"
    HARVESTING = "HARVESTING"
    PRUNING = "PRUNING"
    IRRIGATION = "IRRIGATION"
    OTHER = "OTHER"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskDraft(CamelModel):
    """Task payload without a server-assigned id."""

    field_id: int = Field(..., description="Referenced field")
    task_type: TaskType = Field(..., description="Kind of work")
    assigned_worker: NonBlankStr = Field(..., description="Worker in charge")
    start_date: date = Field(..., description="First day of work")
    end_date: date = Field(..., description="Last day of work")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Progress status")
    notes: Optional[str] = Field(None, description="Free-form notes")

    @model_validator(mode="after")
    def check_date_order(self) -> "TaskDraft":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class Task(TaskDraft):
    """Task as returned by the server."""

    id: int
    field_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskPatch(PatchModel):
    """Partial update of a task."""

    field_id: Optional[int] = None
    task_type: Optional[TaskType] = None
    assigned_worker: Optional[NonBlankStr] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[TaskStatus] = None
    notes: Optional[str] = None


class TaskSearchParams(CamelModel):
    """Query parameters accepted by GET /tasks."""

    task_type: Optional[TaskType] = None
    status: Optional[TaskStatus] = None
    assigned_worker: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
