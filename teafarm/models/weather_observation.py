"""
Weather observation data models for Tea Farm Operations.

The observation day is exposed as ``date`` on the wire, so the module
refers to the type as ``datetime.date`` to keep the attribute name.
"""

import datetime
from typing import Optional

from pydantic import Field

from teafarm.models.base import CamelModel, PatchModel


class WeatherObservationDraft(CamelModel):
    """Weather observation payload without a server-assigned id."""

    field_id: int = Field(..., description="Observed field")
    date: datetime.date = Field(..., description="Day of observation")
    temperature: float = Field(..., description="Temperature in °C")
    rainfall: float = Field(..., ge=0, description="Rainfall in mm")
    humidity: float = Field(..., ge=0, le=100, description="Relative humidity in %")
    pests_seen: Optional[str] = Field(None, description="Pests spotted, if any")
    notes: Optional[str] = Field(None, description="Free-form notes")


class WeatherObservation(WeatherObservationDraft):
    """Weather observation as returned by the server."""

    id: int
    field_name: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class WeatherObservationPatch(PatchModel):
    """Partial update of a weather observation."""

    field_id: Optional[int] = None
    date: Optional[datetime.date] = None
    temperature: Optional[float] = None
    rainfall: Optional[float] = Field(None, ge=0)
    humidity: Optional[float] = Field(None, ge=0, le=100)
    pests_seen: Optional[str] = None
    notes: Optional[str] = None


class WeatherObservationSearchParams(CamelModel):
    """Query parameters accepted by GET /weather-observations."""

    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    field_id: Optional[int] = None
