"""
Weather observation API endpoints for the reference backend.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from teafarm.core.deps import depends_repository
from teafarm.core.security import require_token
from teafarm.models.weather_observation import (
    WeatherObservation,
    WeatherObservationDraft,
    WeatherObservationPatch,
    WeatherObservationSearchParams,
)
from teafarm.services.repository import FarmRepository

router = APIRouter(
    prefix="/weather-observations",
    tags=["weather-observations"],
    dependencies=[Depends(require_token)],
)


@router.get("", response_model=List[WeatherObservation])
async def list_weather_observations(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    field_id: Optional[int] = Query(None, alias="fieldId"),
    repository: FarmRepository = Depends(depends_repository),
) -> List[WeatherObservation]:
    params = WeatherObservationSearchParams(
        start_date=start_date, end_date=end_date, field_id=field_id
    )
    return repository.list_weather_observations(params)


@router.get("/{id}", response_model=WeatherObservation)
async def get_weather_observation(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> WeatherObservation:
    return repository.weather_observations.get(id)


@router.post("", response_model=WeatherObservation, status_code=status.HTTP_201_CREATED)
async def create_weather_observation(
    draft: WeatherObservationDraft,
    repository: FarmRepository = Depends(depends_repository),
) -> WeatherObservation:
    """
    Record a weather observation.

    Example:
        POST /api/weather-observations
        {"fieldId": 1, "date": "2024-05-02", "temperature": 22.5,
         "rainfall": 3.0, "humidity": 78, "pestsSeen": "tea mosquito bug"}
    """
    return repository.create_weather_observation(draft)


@router.put("/{id}", response_model=WeatherObservation)
async def update_weather_observation(
    patch: WeatherObservationPatch,
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> WeatherObservation:
    return repository.update_weather_observation(id, patch)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_weather_observation(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Response:
    repository.weather_observations.remove(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
