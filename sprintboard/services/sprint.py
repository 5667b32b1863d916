import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.core.exceptions import InvalidSprintDatesError, SprintNotFoundError, SprintTitleConflictError
from sprintboard.models.sprint import Sprint
from sprintboard.repo import sprint as sprint_repo
from sprintboard.schemas.sprint import SprintCreate, SprintUpdate, dates_in_order, parse_sprint_date

logger = logging.getLogger(__name__)

TITLE_CONSTRAINT = "uq_sprints_project_title"


def _is_title_conflict(exc: IntegrityError) -> bool:
    # PostgreSQL называет ограничение, SQLite перечисляет его колонки
    message = str(exc.orig)
    return TITLE_CONSTRAINT in message or "sprints.project_id, sprints.title" in message


async def get_multi(db: AsyncSession, *, project_id: int) -> List[Sprint]:
    """Спринты проекта, новые первыми"""
    return await sprint_repo.get_sprints_by_project(db, project_id)


async def create(db: AsyncSession, *, project_id: int, obj_in: SprintCreate) -> Sprint:
    db_obj = Sprint(
        project_id=project_id,
        title=obj_in.title,
        start_date=obj_in.start_date,
        end_date=obj_in.end_date,
    )
    try:
        await sprint_repo.create_sprint_in_db(db, db_obj)
    except IntegrityError as e:
        await db.rollback()
        if not _is_title_conflict(e):
            raise
        raise SprintTitleConflictError()
    return db_obj


async def update(db: AsyncSession, *, project_id: int, sprint_id: int, obj_in: SprintUpdate) -> Sprint:
    db_obj = await sprint_repo.get_sprint_in_project(db, project_id, sprint_id)
    if db_obj is None:
        raise SprintNotFoundError()

    obj_data = obj_in.model_dump(exclude_unset=True)
    if obj_data.get("title") is None:
        obj_data.pop("title", None)

    # Проверяем порядок дат с учетом уже сохраненных значений
    start_date = obj_data.get("start_date", parse_sprint_date(db_obj.start_date))
    end_date = obj_data.get("end_date", parse_sprint_date(db_obj.end_date))
    if not dates_in_order(start_date, end_date):
        raise InvalidSprintDatesError()

    for field, value in obj_data.items():
        setattr(db_obj, field, value)

    try:
        await sprint_repo.update_sprint_in_db(db, db_obj)
    except IntegrityError as e:
        await db.rollback()
        if not _is_title_conflict(e):
            raise
        raise SprintTitleConflictError()
    return db_obj


async def delete(db: AsyncSession, *, project_id: int, sprint_id: int) -> None:
    if not await sprint_repo.delete_sprint_from_db(db, project_id, sprint_id):
        raise SprintNotFoundError()
    logger.info("Sprint %s deleted from project %s", sprint_id, project_id)
