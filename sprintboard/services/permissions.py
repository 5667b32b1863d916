"""
Проверки прав пользователя в проекте.

Владение и членство проверяются двумя независимыми запросами: владелец
хранится в projects.owner_id и никогда не бывает строкой project_members.
Все функции заново читают БД при каждом вызове. "Нет доступа" возвращается
как False/None, а ошибки БД пробрасываются вызывающему коду.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.models.member import ProjectRole, EffectiveRole
from sprintboard.repo import member as member_repo
from sprintboard.repo import project as project_repo


async def is_owner(db: AsyncSession, user_id: int, project_id: int) -> bool:
    """Является ли пользователь владельцем проекта"""
    project = await project_repo.get_owned_project(db, project_id, user_id)
    return project is not None


async def has_access(db: AsyncSession, user_id: int, project_id: int) -> bool:
    """Владелец или участник с любой ролью. Для несуществующего проекта False."""
    if await is_owner(db, user_id, project_id):
        return True
    member = await member_repo.get_project_member(db, project_id, user_id)
    return member is not None


async def can_manage_members(db: AsyncSession, user_id: int, project_id: int) -> bool:
    """Приглашать, менять роли и удалять участников могут владелец и ADMIN"""
    if await is_owner(db, user_id, project_id):
        return True
    role = await member_repo.get_member_role(db, project_id, user_id)
    return role == ProjectRole.ADMIN


async def get_effective_role(db: AsyncSession, user_id: int, project_id: int) -> Optional[EffectiveRole]:
    """OWNER для владельца, сохраненная роль для участника, иначе None"""
    if await is_owner(db, user_id, project_id):
        return EffectiveRole.OWNER
    role = await member_repo.get_member_role(db, project_id, user_id)
    if role is None:
        return None
    return EffectiveRole.from_member_role(role)
