from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from sprintboard.models.member import EffectiveRole


def clean_description(value: Optional[str]) -> Optional[str]:
    # Пустое описание хранится как NULL
    if value is None:
        return None
    value = value.strip()
    return value or None


# Схема для создания проекта
class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("description")
    @classmethod
    def description_or_none(cls, v: Optional[str]) -> Optional[str]:
        return clean_description(v)


# Схема для обновления проекта, description можно явно обнулить
class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("description")
    @classmethod
    def description_or_none(cls, v: Optional[str]) -> Optional[str]:
        return clean_description(v)


# Схема для получения проекта из БД
class Project(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Проект вместе с ролью текущего пользователя
class ProjectWithRole(Project):
    role: EffectiveRole


# Схема для кэширования проекта в Redis
class ProjectCache(Project):
    owner_id: int

    def to_orm_model(self):
        from sprintboard.models.project import Project as ProjectModel

        return ProjectModel(**self.model_dump())
