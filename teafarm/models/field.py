"""
Field data models for Tea Farm Operations.

A field is a named plot of the estate; every task, harvest record and
weather observation references one.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field as Attr

from teafarm.models.base import CamelModel, NonBlankStr, PatchModel


class FieldDraft(CamelModel):
    """Field payload without a server-assigned id."""

    name: NonBlankStr = Attr(..., description="Field name")
    location: NonBlankStr = Attr(..., description="Location on the estate")
    area_size: float = Attr(..., gt=0, description="Area in hectares")
    soil_type: Optional[str] = Attr(None, description="Soil type")
    notes: Optional[str] = Attr(None, description="Free-form notes")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "North Slope",
                    "location": "Block A",
                    "areaSize": 2.5,
                    "soilType": "Loam",
                }
            ]
        }
    }


class Field(FieldDraft):
    """Field as returned by the server."""

    id: int = Attr(..., description="Server-assigned identifier")
    created_at: Optional[datetime] = Attr(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Attr(None, description="Last update timestamp")


class FieldPatch(PatchModel):
    """Partial update of a field."""

    name: Optional[NonBlankStr] = None
    location: Optional[NonBlankStr] = None
    area_size: Optional[float] = Attr(None, gt=0)
    soil_type: Optional[str] = None
    notes: Optional[str] = None


class FieldSearchParams(CamelModel):
    """Query parameters accepted by GET /fields."""

    name: Optional[str] = None
    location: Optional[str] = None
    soil_type: Optional[str] = None
