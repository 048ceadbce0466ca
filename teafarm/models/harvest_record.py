"""
Harvest record data models for Tea Farm Operations.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from teafarm.models.base import CamelModel, PatchModel


class TeaGrade(str, Enum):
    PREMIUM = "PREMIUM"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    STANDARD = "STANDARD"


class HarvestRecordDraft(CamelModel):
    """Harvest record payload without a server-assigned id."""

    field_id: int = Field(..., description="Harvested field")
    harvest_date: date = Field(..., description="Day of harvest")
    quantity_kg: float = Field(..., ge=0, description="Harvested quantity in kg")
    tea_grade: TeaGrade = Field(..., description="Grade of the leaf")
    notes: Optional[str] = Field(None, description="Free-form notes")


class HarvestRecord(HarvestRecordDraft):
    """Harvest record as returned by the server."""

    id: int
    field_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HarvestRecordPatch(PatchModel):
    """Partial update of a harvest record."""

    field_id: Optional[int] = None
    harvest_date: Optional[date] = None
    quantity_kg: Optional[float] = Field(None, ge=0)
    tea_grade: Optional[TeaGrade] = None
    notes: Optional[str] = None


class HarvestRecordSearchParams(CamelModel):
    """Query parameters accepted by GET /harvest-records."""

    tea_grade: Optional[TeaGrade] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    field_id: Optional[int] = None
