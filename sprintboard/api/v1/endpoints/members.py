from typing import List, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.api.v1.endpoints.auth import get_current_user
from sprintboard.api.v1.endpoints.projects import check_project_rights
from sprintboard.db.session import get_db
from sprintboard.models.user import User
from sprintboard.schemas.member import Member, MemberInvite, MemberRoleUpdate
from sprintboard.services import member as member_service

router = APIRouter()


@router.get("/{project_id}/members", response_model=List[Member])
async def read_project_members(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Владелец проекта (роль OWNER) и затем участники в порядке добавления.
    """
    project = await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    owner, members = await member_service.get_roster(db=db, project=project)
    return [Member.from_owner(owner)] + [Member.from_membership(member) for member in members]


@router.post("/{project_id}/members", response_model=Member, status_code=status.HTTP_201_CREATED)
async def invite_project_member(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    member_in: MemberInvite,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Пригласить пользователя по email. Доступно владельцу и администраторам проекта.
    """
    project = await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    member = await member_service.invite_member(db=db, project=project, inviter=current_user, obj_in=member_in)
    return Member.from_membership(member)


@router.patch("/{project_id}/members/{member_id}", response_model=Member)
async def update_project_member_role(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    member_id: int,
    role_in: MemberRoleUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Изменить роль участника. Роль владельца изменить нельзя.
    """
    project = await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    member = await member_service.update_member_role(
        db=db, project=project, member_id=member_id, role=role_in.role, actor_id=current_user.id
    )
    return Member.from_membership(member)


@router.delete("/{project_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_project_member(
    *,
    db: AsyncSession = Depends(get_db),
    project_id: int,
    member_id: int,
    current_user: User = Depends(get_current_user),
) -> None:
    """
    Удалить участника. Участник может выйти из проекта сам.
    """
    project = await check_project_rights(db=db, project_id=project_id, current_user=current_user)
    await member_service.remove_member(db=db, project=project, member_id=member_id, actor_id=current_user.id)
