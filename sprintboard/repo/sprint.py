from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from sprintboard.models.sprint import Sprint


async def get_sprint_in_project(db: AsyncSession, project_id: int, sprint_id: int) -> Optional[Sprint]:
    """Получает спринт, только если он принадлежит проекту"""
    result = await db.execute(select(Sprint).where((Sprint.id == sprint_id) & (Sprint.project_id == project_id)))
    return result.scalars().first()


async def get_sprints_by_project(db: AsyncSession, project_id: int) -> List[Sprint]:
    result = await db.execute(
        select(Sprint).where(Sprint.project_id == project_id).order_by(Sprint.created_at.desc(), Sprint.id.desc())
    )
    return result.scalars().all()


async def create_sprint_in_db(db: AsyncSession, sprint: Sprint) -> None:
    db.add(sprint)
    await db.commit()
    await db.refresh(sprint)


async def update_sprint_in_db(db: AsyncSession, sprint: Sprint) -> None:
    db.add(sprint)
    await db.commit()
    await db.refresh(sprint)


async def delete_sprint_from_db(db: AsyncSession, project_id: int, sprint_id: int) -> bool:
    result = await db.execute(delete(Sprint).where((Sprint.id == sprint_id) & (Sprint.project_id == project_id)))
    await db.commit()
    return result.rowcount > 0
