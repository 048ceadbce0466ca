"""
FastAPI dependency injection utilities for the reference backend.
"""

from fastapi import Depends

from teafarm.services.repository import FarmRepository, get_repository


async def depends_repository(
    repository: FarmRepository = Depends(get_repository),
) -> FarmRepository:
    """
    FastAPI dependency injection for FarmRepository.

    Usage in routes:
        @router.get("/fields")
        async def list_fields(repo: FarmRepository = Depends(depends_repository)):
            return repo.fields.all()

    Returns:
        FarmRepository: The singleton repository instance
    """
    return repository
