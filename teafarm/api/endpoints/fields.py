"""
Field API endpoints for the reference backend.

This module provides CRUD operations on fields with name, location and
soil-type search.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from teafarm.core.deps import depends_repository
from teafarm.core.security import require_token
from teafarm.models.field import Field, FieldDraft, FieldPatch, FieldSearchParams
from teafarm.services.repository import FarmRepository

router = APIRouter(prefix="/fields", tags=["fields"], dependencies=[Depends(require_token)])


@router.get("", response_model=List[Field])
async def list_fields(
    name: Optional[str] = Query(None, description="Case-insensitive name fragment"),
    location: Optional[str] = Query(None, description="Case-insensitive location fragment"),
    soil_type: Optional[str] = Query(None, alias="soilType", description="Soil type fragment"),
    repository: FarmRepository = Depends(depends_repository),
) -> List[Field]:
    """
    List fields, optionally narrowed by search parameters.

    Args:
        name: Name fragment
        location: Location fragment
        soil_type: Soil type fragment
        repository: FarmRepository dependency injection

    Returns:
        List[Field]: Matching fields in id order

    Example:
        GET /api/fields?location=block
    """
    params = FieldSearchParams(name=name, location=location, soil_type=soil_type)
    return repository.list_fields(params)


@router.get("/{id}", response_model=Field)
async def get_field(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Field:
    return repository.fields.get(id)


@router.post("", response_model=Field, status_code=status.HTTP_201_CREATED)
async def create_field(
    draft: FieldDraft,
    repository: FarmRepository = Depends(depends_repository),
) -> Field:
    """
    Create a field.

    Example:
        POST /api/fields
        {"name": "North Slope", "location": "Block A", "areaSize": 2.5}

        Response (201):
        {"id": 1, "name": "North Slope", "location": "Block A", "areaSize": 2.5, ...}
    """
    return repository.create_field(draft)


@router.put("/{id}", response_model=Field)
async def update_field(
    patch: FieldPatch,
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Field:
    """Partially update a field; omitted attributes keep their value."""
    return repository.update_field(id, patch)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_field(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Response:
    """
    Delete a field.

    Raises:
        IntegrityError: Rendered as 400 while tasks, harvest records or
            weather observations still reference the field
    """
    repository.delete_field(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
