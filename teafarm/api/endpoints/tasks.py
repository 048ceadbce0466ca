"""
Task API endpoints for the reference backend.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from teafarm.core.deps import depends_repository
from teafarm.core.security import require_token
from teafarm.models.task import Task, TaskDraft, TaskPatch, TaskSearchParams, TaskStatus, TaskType
from teafarm.services.repository import FarmRepository

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(require_token)])


@router.get("", response_model=List[Task])
async def list_tasks(
    task_type: Optional[TaskType] = Query(None, alias="taskType"),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    assigned_worker: Optional[str] = Query(None, alias="assignedWorker"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    repository: FarmRepository = Depends(depends_repository),
) -> List[Task]:
    """
    List tasks.

    ``startDate``/``endDate`` bound the task start date (inclusive);
    ``assignedWorker`` matches a case-insensitive fragment.
    """
    params = TaskSearchParams(
        task_type=task_type,
        status=task_status,
        assigned_worker=assigned_worker,
        start_date=start_date,
        end_date=end_date,
    )
    return repository.list_tasks(params)


@router.get("/{id}", response_model=Task)
async def get_task(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Task:
    return repository.tasks.get(id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    draft: TaskDraft,
    repository: FarmRepository = Depends(depends_repository),
) -> Task:
    return repository.create_task(draft)


@router.put("/{id}", response_model=Task)
async def update_task(
    patch: TaskPatch,
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Task:
    return repository.update_task(id, patch)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    id: int = Path(..., ge=1),
    repository: FarmRepository = Depends(depends_repository),
) -> Response:
    repository.tasks.remove(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
