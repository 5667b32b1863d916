from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from sprintboard.models.user import User


async def get_user_by_id(db: AsyncSession, id: int) -> Optional[User]:
    """Получает пользователя по идентификатору"""
    result = await db.execute(select(User).where(User.id == id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Получает пользователя по email"""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def create_user_in_db(db: AsyncSession, user: User) -> None:
    """Создает пользователя в базе данных"""
    db.add(user)
    await db.commit()
    await db.refresh(user)


async def update_user_in_db(db: AsyncSession, user: User) -> None:
    """Обновляет пользователя в базе данных"""
    db.add(user)
    await db.commit()
    await db.refresh(user)
