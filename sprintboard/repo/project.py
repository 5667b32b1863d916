from typing import List, Optional

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from sprintboard.models.member import ProjectMember
from sprintboard.models.project import Project


async def get_project_by_id(db: AsyncSession, id: int) -> Optional[Project]:
    result = await db.execute(select(Project).where(Project.id == id))
    return result.scalars().first()


async def get_owned_project(db: AsyncSession, project_id: int, user_id: int) -> Optional[Project]:
    result = await db.execute(select(Project).where((Project.id == project_id) & (Project.owner_id == user_id)))
    return result.scalars().first()


async def get_projects_for_user(db: AsyncSession, user_id: int, skip: int = 0, limit: int = 100) -> List[Project]:
    """Projects the user owns or is a member of, most recently updated first."""
    member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
    result = await db.execute(
        select(Project)
        .where(or_(Project.owner_id == user_id, Project.id.in_(member_of)))
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


async def create_project_in_db(db: AsyncSession, project: Project) -> None:
    db.add(project)
    await db.commit()
    await db.refresh(project)


async def update_project_in_db(db: AsyncSession, project: Project) -> None:
    db.add(project)
    await db.commit()
    await db.refresh(project)


async def delete_project_from_db(db: AsyncSession, id: int) -> bool:
    result = await db.execute(delete(Project).where(Project.id == id))
    await db.commit()
    return result.rowcount > 0
