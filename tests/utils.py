import random
import string
from functools import lru_cache
from typing import Dict, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.core.security import create_access_token, get_password_hash
from sprintboard.models.member import ProjectMember, ProjectRole
from sprintboard.models.project import Project
from sprintboard.models.sprint import Sprint
from sprintboard.models.user import User


def random_string(length: int = 10) -> str:
    """Генерирует случайную строку заданной длины."""
    return "".join(random.choices(string.ascii_lowercase, k=length))


def random_email() -> str:
    """Генерирует случайный email."""
    return f"{random_string(8)}@{random_string(6)}.com"


@lru_cache(maxsize=None)
def password_hash(password: str) -> str:
    return get_password_hash(password)


async def create_test_user(
    db: AsyncSession,
    email: Optional[str] = None,
    password: Optional[str] = "testpassword",
    name: Optional[str] = None,
) -> User:
    """Создает тестового пользователя в БД. password=None - аккаунт из приглашения."""
    user = User(
        email=email or random_email(),
        name=name,
        password_hash=password_hash(password) if password else None,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_test_project(db: AsyncSession, owner: User, name: Optional[str] = None) -> Project:
    """Создает тестовый проект с указанным владельцем."""
    project = Project(name=name or f"Project {random_string(5)}", owner_id=owner.id)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def add_project_member(
    db: AsyncSession, project: Project, user: User, role: ProjectRole = ProjectRole.DEVELOPER
) -> ProjectMember:
    """Добавляет пользователя в проект напрямую, минуя API."""
    member = ProjectMember(project_id=project.id, user_id=user.id, role=role)
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member


async def create_test_sprint(db: AsyncSession, project: Project, title: Optional[str] = None) -> Sprint:
    sprint = Sprint(project_id=project.id, title=title or f"Sprint {random_string(5)}")
    db.add(sprint)
    await db.commit()
    await db.refresh(sprint)
    return sprint


def auth_headers(user: User) -> Dict[str, str]:
    """Заголовки с токеном без обращения к /auth/login."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


async def get_async_auth_headers(client: httpx.AsyncClient, email: str, password: str) -> Dict[str, str]:
    """Выполняет авторизацию через API и возвращает заголовки с токеном."""
    response = await client.post("/api/v1/auth/login", data={"username": email, "password": password})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
