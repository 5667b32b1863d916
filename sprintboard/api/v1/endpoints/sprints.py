from typing import List, Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.api.v1.endpoints.auth import get_current_user
from sprintboard.api.v1.endpoints.projects import check_project_rights
from sprintboard.db.session import get_db
from sprintboard.models.user import User
from sprintboard.schemas.sprint import Sprint, SprintCreate, SprintUpdate
from sprintboard.services import sprint as sprint_service

router = APIRouter()


@router.get("/{project_id}/sprints", response_model=List[Sprint])
async def read_sprints(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Спринты проекта, новые первыми.
    """
    await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    return await sprint_service.get_multi(db=db, project_id=project_id)


@router.post("/{project_id}/sprints", response_model=Sprint, status_code=status.HTTP_201_CREATED)
async def create_sprint(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    sprint_in: SprintCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Создать спринт. Даты принимаются в формате DD-MM-YYYY или ISO.
    """
    await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    return await sprint_service.create(db=db, project_id=project_id, obj_in=sprint_in)


@router.patch("/{project_id}/sprints/{sprint_id}", response_model=Sprint)
async def update_sprint(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    sprint_id: int,
    sprint_in: SprintUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Частично обновить спринт.
    """
    await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    if not sprint_in.model_fields_set:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields to update")
    return await sprint_service.update(db=db, project_id=project_id, sprint_id=sprint_id, obj_in=sprint_in)


@router.delete("/{project_id}/sprints/{sprint_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sprint(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    sprint_id: int,
    current_user: User = Depends(get_current_user),
) -> None:
    """
    Удалить спринт.
    """
    await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    await sprint_service.delete(db=db, project_id=project_id, sprint_id=sprint_id)
