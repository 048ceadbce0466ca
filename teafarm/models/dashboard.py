"""
Dashboard summary model for Tea Farm Operations.
"""

from typing import Dict

from pydantic import Field

from teafarm.models.base import CamelModel
from teafarm.models.harvest_record import TeaGrade


class DashboardStats(CamelModel):
    """Aggregate figures shown on the dashboard. Monthly values cover the current month."""

    total_fields: int = Field(0, ge=0, description="Number of fields")
    total_area: float = Field(0.0, ge=0, description="Sum of field areas in hectares")
    completed_tasks: int = Field(0, ge=0)
    in_progress_tasks: int = Field(0, ge=0)
    pending_tasks: int = Field(0, ge=0)
    total_harvest: float = Field(0.0, ge=0, description="All-time harvest in kg")
    monthly_harvest: float = Field(0.0, ge=0, description="Harvest this month in kg")
    average_temperature: float = Field(0.0, description="Mean temperature this month")
    total_rainfall: float = Field(0.0, ge=0, description="Rainfall this month in mm")
    average_humidity: float = Field(0.0, description="Mean humidity this month")
    harvest_by_grade: Dict[TeaGrade, float] = Field(
        default_factory=dict, description="All-time harvest in kg per tea grade"
    )
