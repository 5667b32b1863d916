import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.core.exceptions import (
    AlreadyMemberError,
    MemberNotFoundError,
    OwnerMembershipError,
    PermissionDeniedError,
    ProjectNotFoundError,
)
from sprintboard.messaging.producers import MEMBER_EVENTS_TOPIC, send_event
from sprintboard.models.member import ProjectMember, ProjectRole
from sprintboard.models.project import Project
from sprintboard.models.user import User
from sprintboard.repo import member as member_repo
from sprintboard.repo import user as user_repo
from sprintboard.schemas.member import MemberInvite
from sprintboard.services import permissions
from sprintboard.services import user as user_service

logger = logging.getLogger(__name__)


async def get_roster(db: AsyncSession, *, project: Project) -> Tuple[User, List[ProjectMember]]:
    """Возвращает владельца проекта и список участников в порядке добавления"""
    owner = await user_repo.get_user_by_id(db, project.owner_id)
    if owner is None:
        raise ProjectNotFoundError("Project owner not found")
    members = await member_repo.get_members_by_project_id(db, project.id)
    return owner, members


async def _get_member_in_project(db: AsyncSession, project: Project, member_id: int) -> ProjectMember:
    # Идентификаторы членства глобальные, поэтому проверяем принадлежность проекту
    member = await member_repo.get_member_by_id(db, member_id)
    if member is None or member.project_id != project.id:
        raise MemberNotFoundError()
    return member


def _ensure_not_owner(project: Project, member: ProjectMember, message: str) -> None:
    # Сравниваем по пользователю, а не по роли
    if member.user_id == project.owner_id:
        raise OwnerMembershipError(message)


async def invite_member(
    db: AsyncSession,
    *,
    project: Project,
    inviter: User,
    obj_in: MemberInvite,
) -> ProjectMember:
    """
    Приглашает пользователя в проект по email.

    Если аккаунта с таким email нет, он создается без пароля. После записи
    членства публикуется событие member_invited; его ошибка не откатывает
    членство.
    """
    # rollback экспайрит объекты сессии, поэтому нужные поля читаем заранее
    project_id, project_name, owner_id = project.id, project.name, project.owner_id
    inviter_id, inviter_name, inviter_email = inviter.id, inviter.name, inviter.email

    if not await permissions.can_manage_members(db, inviter_id, project_id):
        raise PermissionDeniedError()

    owner = await user_repo.get_user_by_id(db, owner_id)
    if owner is not None and owner.email.lower() == obj_in.email:
        raise OwnerMembershipError("User is already the owner of this project")

    target = await user_service.get_or_create_invited(db, email=obj_in.email)
    target_id, target_email = target.id, target.email

    if await member_repo.get_project_member(db, project_id, target_id):
        raise AlreadyMemberError()

    member = ProjectMember(project_id=project_id, user_id=target_id, role=obj_in.role)
    try:
        await member_repo.create_member_in_db(db, member)
    except IntegrityError:
        # Параллельное приглашение того же пользователя
        await db.rollback()
        logger.info("Concurrent invite of user %s to project %s", target_id, project_id)
        raise AlreadyMemberError()

    logger.info("User %s invited user %s to project %s as %s", inviter_id, target_id, project_id, obj_in.role.value)

    await send_event(
        MEMBER_EVENTS_TOPIC,
        "member_invited",
        {
            "project_id": project_id,
            "project_name": project_name,
            "member_id": member.id,
            "user_id": target_id,
            "email": target_email,
            "role": obj_in.role.value,
            "inviter_name": inviter_name,
            "inviter_email": inviter_email,
        },
    )

    return member


async def update_member_role(
    db: AsyncSession,
    *,
    project: Project,
    member_id: int,
    role: ProjectRole,
    actor_id: int,
) -> ProjectMember:
    """Меняет роль участника. Требуется право управления участниками."""
    if not await permissions.can_manage_members(db, actor_id, project.id):
        raise PermissionDeniedError()

    member = await _get_member_in_project(db, project, member_id)
    _ensure_not_owner(project, member, "Cannot change the owner's role")

    member.role = role
    await member_repo.update_member_in_db(db, member)
    logger.info("User %s changed role of member %s in project %s to %s", actor_id, member.id, project.id, role.value)
    return member


async def remove_member(
    db: AsyncSession,
    *,
    project: Project,
    member_id: int,
    actor_id: int,
) -> None:
    """
    Удаляет участника из проекта.
    Участник может удалить себя сам, удаление других требует права управления.
    """
    member = await _get_member_in_project(db, project, member_id)
    _ensure_not_owner(project, member, "Cannot remove the project owner")

    if member.user_id != actor_id and not await permissions.can_manage_members(db, actor_id, project.id):
        raise PermissionDeniedError()

    if not await member_repo.delete_member_from_db(db, member.id):
        raise MemberNotFoundError()
    logger.info("User %s removed member %s from project %s", actor_id, member_id, project.id)
