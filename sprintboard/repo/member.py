from typing import Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from sprintboard.models.member import ProjectMember, ProjectRole


async def get_member_by_id(db: AsyncSession, id: int) -> Optional[ProjectMember]:
    """Получает членство по глобальному идентификатору"""
    result = await db.execute(select(ProjectMember).where(ProjectMember.id == id))
    return result.scalars().first()


async def get_project_member(db: AsyncSession, project_id: int, user_id: int) -> Optional[ProjectMember]:
    """Получает запись о членстве пользователя в проекте"""
    result = await db.execute(
        select(ProjectMember).where((ProjectMember.project_id == project_id) & (ProjectMember.user_id == user_id))
    )
    return result.scalars().first()


async def get_member_role(db: AsyncSession, project_id: int, user_id: int) -> Optional[ProjectRole]:
    """Получает роль пользователя в проекте"""
    result = await db.execute(
        select(ProjectMember.role).where((ProjectMember.project_id == project_id) & (ProjectMember.user_id == user_id))
    )
    return result.scalars().first()


async def get_members_by_project_id(db: AsyncSession, project_id: int) -> List[ProjectMember]:
    """Получает всех участников проекта в порядке добавления"""
    result = await db.execute(
        select(ProjectMember)
        .where(ProjectMember.project_id == project_id)
        .order_by(ProjectMember.created_at, ProjectMember.id)
    )
    return result.scalars().all()


async def create_member_in_db(db: AsyncSession, member: ProjectMember) -> None:
    """Создает членство. IntegrityError при дубликате (project_id, user_id) пробрасывается."""
    db.add(member)
    await db.commit()
    await db.refresh(member)
    await db.refresh(member, ["user"])


async def update_member_in_db(db: AsyncSession, member: ProjectMember) -> None:
    db.add(member)
    await db.commit()
    await db.refresh(member)
    await db.refresh(member, ["user"])


async def delete_member_from_db(db: AsyncSession, id: int) -> bool:
    result = await db.execute(delete(ProjectMember).where(ProjectMember.id == id))
    await db.commit()
    return result.rowcount > 0


async def get_roles_for_user(db: AsyncSession, user_id: int, project_ids: List[int]) -> Dict[int, ProjectRole]:
    """Роли пользователя в перечисленных проектах, ключ - project_id"""
    if not project_ids:
        return {}
    result = await db.execute(
        select(ProjectMember.project_id, ProjectMember.role).where(
            (ProjectMember.user_id == user_id) & (ProjectMember.project_id.in_(project_ids))
        )
    )
    return {project_id: role for project_id, role in result.all()}
