import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import sprintboard.repo.user as user_repo
from sprintboard.core.exceptions import ConflictError
from sprintboard.core.security import get_password_hash, verify_password
from sprintboard.models.user import User
from sprintboard.schemas.user import UserCreate

logger = logging.getLogger(__name__)


async def get(db: AsyncSession, id: int) -> Optional[User]:
    """Получает пользователя по идентификатору"""
    return await user_repo.get_user_by_id(db, id)


async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Получает пользователя по email (email хранится в нижнем регистре)"""
    return await user_repo.get_user_by_email(db, email.strip().lower())


async def register(db: AsyncSession, *, obj_in: UserCreate) -> User:
    """
    Регистрирует пользователя.
    Если аккаунт был создан приглашением и еще без пароля, он переходит к владельцу email.
    """
    email = obj_in.email.lower()
    user = await user_repo.get_user_by_email(db, email)

    if user is not None:
        if user.password_hash:
            raise ConflictError("User with this email already exists")
        user.password_hash = get_password_hash(obj_in.password)
        if obj_in.name:
            user.name = obj_in.name
        if obj_in.image:
            user.image = obj_in.image
        await user_repo.update_user_in_db(db, user)
        logger.info("Invited user %s claimed their account", user.id)
        return user

    user = User(
        email=email,
        name=obj_in.name,
        image=obj_in.image,
        password_hash=get_password_hash(obj_in.password),
    )
    await user_repo.create_user_in_db(db, user)
    return user


async def get_or_create_invited(db: AsyncSession, *, email: str) -> User:
    """Находит пользователя по email или создает аккаунт без пароля для приглашенного"""
    email = email.strip().lower()
    user = await user_repo.get_user_by_email(db, email)
    if user is not None:
        return user

    user = User(email=email, name=None)
    try:
        await user_repo.create_user_in_db(db, user)
    except IntegrityError:
        # Тот же email успел создать параллельный запрос
        await db.rollback()
        user = await user_repo.get_user_by_email(db, email)
        if user is None:
            raise
        return user

    logger.info("Created placeholder account %s for invited email", user.id)
    return user


async def authenticate(db: AsyncSession, *, email: str, password: str) -> Optional[User]:
    """
    Проверяет пользователя по email и паролю
    """
    user = await get_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
