import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.cache import client as cache
from sprintboard.core.config import settings
from sprintboard.core.exceptions import ProjectNotFoundError
from sprintboard.models.member import EffectiveRole
from sprintboard.models.project import Project
from sprintboard.repo import member as member_repo
from sprintboard.repo import project as project_repo
from sprintboard.schemas.project import ProjectCache, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


async def get(db: AsyncSession, id: int) -> Optional[Project]:
    """
    Получает проект, сначала из кэша. Возвращенный из кэша объект не привязан
    к сессии и годится только для чтения.
    """
    cache_key = cache.project_key(id)
    cached_project = await cache.get_cache(cache_key)
    if cached_project:
        try:
            return ProjectCache(**cached_project).to_orm_model()
        except Exception as e:
            logger.warning("Error deserializing cached project %s: %s", id, e)
            await cache.delete_cache(cache_key)

    project = await project_repo.get_project_by_id(db, id)

    if project:
        await cache.set_cache(
            cache_key,
            ProjectCache.model_validate(project).model_dump(mode="json"),
            expires=settings.PROJECT_CACHE_TTL,
        )

    return project


async def get_multi_for_user(
    db: AsyncSession, *, user_id: int, skip: int = 0, limit: int = 100
) -> List[Tuple[Project, EffectiveRole]]:
    """Проекты пользователя вместе с его ролью в каждом из них"""
    projects = await project_repo.get_projects_for_user(db, user_id, skip=skip, limit=limit)
    roles = await member_repo.get_roles_for_user(db, user_id, [p.id for p in projects if p.owner_id != user_id])

    result = []
    for project in projects:
        if project.owner_id == user_id:
            result.append((project, EffectiveRole.OWNER))
        elif project.id in roles:
            result.append((project, EffectiveRole.from_member_role(roles[project.id])))
    return result


async def create(db: AsyncSession, *, obj_in: ProjectCreate, owner_id: int) -> Project:
    db_obj = Project(name=obj_in.name, description=obj_in.description, owner_id=owner_id)
    await project_repo.create_project_in_db(db, db_obj)
    logger.info("User %s created project %s", owner_id, db_obj.id)
    return db_obj


async def update(db: AsyncSession, *, id: int, obj_in: ProjectUpdate) -> Project:
    db_obj = await project_repo.get_project_by_id(db, id)
    if db_obj is None:
        raise ProjectNotFoundError()

    obj_data = obj_in.model_dump(exclude_unset=True)
    # Имя нельзя обнулить, явный null просто игнорируем
    if obj_data.get("name") is None:
        obj_data.pop("name", None)
    if not obj_data:
        return db_obj

    for field, value in obj_data.items():
        setattr(db_obj, field, value)

    await project_repo.update_project_in_db(db, db_obj)
    await cache.delete_cache(cache.project_key(id))
    return db_obj


async def delete(db: AsyncSession, *, id: int) -> bool:
    # Участники и спринты удаляются каскадно
    result = await project_repo.delete_project_from_db(db, id)
    if result:
        await cache.delete_cache(cache.project_key(id))
        logger.info("Project %s deleted", id)
    return result
