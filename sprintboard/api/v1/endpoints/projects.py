from typing import List, Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.api.v1.endpoints.auth import get_current_user
from sprintboard.db.session import get_db
from sprintboard.models.project import Project as ProjectModel
from sprintboard.models.user import User
from sprintboard.schemas.project import Project, ProjectCreate, ProjectUpdate, ProjectWithRole
from sprintboard.services import permissions
from sprintboard.services import project as project_service

router = APIRouter()


async def check_project_rights(db: AsyncSession, project_id: int, current_user: User) -> ProjectModel:
    """
    Пропускает владельца и участников с любой ролью.
    Для постороннего пользователя проект выглядит несуществующим (404).
    """
    if not await permissions.has_access(db, current_user.id, project_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    project = await project_service.get(db=db, id=project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


async def check_project_owner_rights(db: AsyncSession, project_id: int, current_user: User) -> ProjectModel:
    project = await check_project_rights(db=db, project_id=project_id, current_user=current_user)

    if not await permissions.is_owner(db, current_user.id, project_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the project owner can modify this project",
        )
    return project


@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    *,
    db: AsyncSession = Depends(get_db),
    project_in: ProjectCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Создать новый проект, текущий пользователь становится владельцем.
    """
    return await project_service.create(db=db, obj_in=project_in, owner_id=current_user.id)


@router.get("/", response_model=List[ProjectWithRole])
async def read_projects(
    db: AsyncSession = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Проекты, которыми пользователь владеет или в которых состоит.
    """
    projects = await project_service.get_multi_for_user(db=db, user_id=current_user.id, skip=skip, limit=limit)
    return [
        ProjectWithRole(**Project.model_validate(project).model_dump(), role=role)
        for project, role in projects
    ]


@router.get("/{project_id}", response_model=ProjectWithRole)
async def read_project(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Получить проект вместе с ролью текущего пользователя.
    """
    project = await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    role = await permissions.get_effective_role(db, current_user.id, project_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return ProjectWithRole(**Project.model_validate(project).model_dump(), role=role)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    project_in: ProjectUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Изменить название или описание. Только для владельца.
    """
    await check_project_owner_rights(db=db, project_id=project_id, current_user=current_user)
    return await project_service.update(db=db, id=project_id, obj_in=project_in)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    current_user: User = Depends(get_current_user),
) -> None:
    """
    Удалить проект вместе с участниками и спринтами. Только для владельца.
    """
    await check_project_owner_rights(db=db, project_id=project_id, current_user=current_user)
    await project_service.delete(db=db, id=project_id)
