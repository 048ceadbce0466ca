"""
Harvest record API endpoints for the reference backend.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from teafarm.core.deps import depends_repository
from teafarm.core.security import require_token
from teafarm.models.harvest_record import (
    HarvestRecord,
    HarvestRecordDraft,
    HarvestRecordPatch,
    HarvestRecordSearchParams,
    TeaGrade,
)
from teafarm.services.repository import FarmRepository

router = APIRouter(
    prefix="/harvest-records", tags=["harvest-records"], dependencies=[Depends(require_token)]
)


@router.get("", response_model=List[HarvestRecord])
async def list_harvest_records(
    tea_grade: Optional[TeaGrade] = Query(None, alias="teaGrade"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    field_id: Optional[int] = Query(None, alias="fieldId"),
    repository: FarmRepository = Depends(depends_repository),
) -> List[HarvestRecord]:
    """
    List harvest records.

    Args:
        tea_grade: Exact tea grade
        start_date: Earliest harvest date (inclusive)
        end_date: Latest harvest date (inclusive)
        field_id: Harvested field
        repository: FarmRepository dependency injection

    Example:
        GET /api/harvest-records?teaGrade=PREMIUM&startDate=2024-05-01
    """
    params = HarvestRecordSearchParams(
        tea_grade=tea_grade, start_date=start_date, end_date=end_date, field_id=field_id
    )
    return repository.list_harvest_records(params)


@router.get("/{id}", response_model=HarvestRecord)
async def get_harvest_record(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> HarvestRecord:
    return repository.harvest_records.get(id)


@router.post("", response_model=HarvestRecord, status_code=status.HTTP_201_CREATED)
async def create_harvest_record(
    draft: HarvestRecordDraft,
    repository: FarmRepository = Depends(depends_repository),
) -> HarvestRecord:
    """Record a harvest; ``fieldId`` must name an existing field."""
    return repository.create_harvest_record(draft)


@router.put("/{id}", response_model=HarvestRecord)
async def update_harvest_record(
    patch: HarvestRecordPatch,
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> HarvestRecord:
    return repository.update_harvest_record(id, patch)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_harvest_record(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Response:
    repository.harvest_records.remove(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
