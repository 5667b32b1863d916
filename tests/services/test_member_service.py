"""
Unit tests for the member service.
Repository and permission functions are patched, so only the membership
rules are exercised here.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from sprintboard.core.exceptions import (
    AlreadyMemberError,
    MemberNotFoundError,
    OwnerMembershipError,
    PermissionDeniedError,
)
from sprintboard.models.member import ProjectMember, ProjectRole
from sprintboard.models.project import Project
from sprintboard.models.user import User
from sprintboard.schemas.member import MemberInvite
from sprintboard.services import member as member_service

OWNER_ID = 1
ADMIN_ID = 2
DEV_ID = 3
PROJECT_ID = 10


def create_project() -> Project:
    return Project(id=PROJECT_ID, name="Apollo", owner_id=OWNER_ID)


def create_member(id: int, user_id: int, role: ProjectRole = ProjectRole.DEVELOPER, project_id: int = PROJECT_ID):
    now = datetime.now(timezone.utc)
    return ProjectMember(id=id, project_id=project_id, user_id=user_id, role=role, created_at=now, updated_at=now)


def create_user(id: int, email: str, name: str = None) -> User:
    return User(id=id, email=email, name=name, is_active=True)


@pytest.fixture
def can_manage():
    with patch("sprintboard.services.member.permissions.can_manage_members", new_callable=AsyncMock) as mocked:
        mocked.return_value = True
        yield mocked


@pytest.fixture
def member_repo():
    with patch("sprintboard.services.member.member_repo") as mocked:
        mocked.get_member_by_id = AsyncMock()
        mocked.get_project_member = AsyncMock(return_value=None)
        mocked.create_member_in_db = AsyncMock()
        mocked.update_member_in_db = AsyncMock()
        mocked.delete_member_from_db = AsyncMock(return_value=True)
        yield mocked


@pytest.mark.asyncio
async def test_update_role_rejects_owner_row_even_for_managers(mock_session, can_manage, member_repo):
    """An inconsistent row pointing at the owner must never be edited."""
    member_repo.get_member_by_id.return_value = create_member(5, OWNER_ID, ProjectRole.CLIENT)

    with pytest.raises(OwnerMembershipError) as exc:
        await member_service.update_member_role(
            mock_session, project=create_project(), member_id=5, role=ProjectRole.ADMIN, actor_id=OWNER_ID
        )

    assert exc.value.message == "Cannot change the owner's role"
    member_repo.update_member_in_db.assert_not_called()


@pytest.mark.asyncio
async def test_remove_rejects_owner_row(mock_session, can_manage, member_repo):
    member_repo.get_member_by_id.return_value = create_member(5, OWNER_ID, ProjectRole.ADMIN)

    with pytest.raises(OwnerMembershipError):
        await member_service.remove_member(mock_session, project=create_project(), member_id=5, actor_id=OWNER_ID)

    member_repo.delete_member_from_db.assert_not_called()


@pytest.mark.asyncio
async def test_member_from_another_project_is_not_found(mock_session, can_manage, member_repo):
    member_repo.get_member_by_id.return_value = create_member(5, DEV_ID, project_id=PROJECT_ID + 1)

    with pytest.raises(MemberNotFoundError):
        await member_service.update_member_role(
            mock_session, project=create_project(), member_id=5, role=ProjectRole.ADMIN, actor_id=OWNER_ID
        )
    with pytest.raises(MemberNotFoundError):
        await member_service.remove_member(mock_session, project=create_project(), member_id=5, actor_id=OWNER_ID)


@pytest.mark.asyncio
async def test_update_role_requires_manage_permission(mock_session, can_manage, member_repo):
    can_manage.return_value = False

    with pytest.raises(PermissionDeniedError):
        await member_service.update_member_role(
            mock_session, project=create_project(), member_id=5, role=ProjectRole.ADMIN, actor_id=DEV_ID
        )

    member_repo.get_member_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_update_role_saves_new_role(mock_session, can_manage, member_repo):
    member = create_member(5, DEV_ID)
    member_repo.get_member_by_id.return_value = member

    result = await member_service.update_member_role(
        mock_session, project=create_project(), member_id=5, role=ProjectRole.ADMIN, actor_id=ADMIN_ID
    )

    assert result.role == ProjectRole.ADMIN
    member_repo.update_member_in_db.assert_awaited_once_with(mock_session, member)


@pytest.mark.asyncio
async def test_member_can_remove_themselves_without_manage_permission(mock_session, can_manage, member_repo):
    can_manage.return_value = False
    member_repo.get_member_by_id.return_value = create_member(5, DEV_ID, ProjectRole.CLIENT)

    await member_service.remove_member(mock_session, project=create_project(), member_id=5, actor_id=DEV_ID)

    member_repo.delete_member_from_db.assert_awaited_once_with(mock_session, 5)
    can_manage.assert_not_called()


@pytest.mark.asyncio
async def test_removing_someone_else_requires_manage_permission(mock_session, can_manage, member_repo):
    can_manage.return_value = False
    member_repo.get_member_by_id.return_value = create_member(5, ADMIN_ID, ProjectRole.ADMIN)

    with pytest.raises(PermissionDeniedError):
        await member_service.remove_member(mock_session, project=create_project(), member_id=5, actor_id=DEV_ID)

    member_repo.delete_member_from_db.assert_not_called()


@pytest.mark.asyncio
async def test_invite_concurrent_duplicate_is_a_conflict(mock_session, can_manage, member_repo):
    owner = create_user(OWNER_ID, "owner@example.com")
    invitee = create_user(DEV_ID, "dev@example.com")
    member_repo.create_member_in_db.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    with patch("sprintboard.services.member.user_repo.get_user_by_id", new_callable=AsyncMock, return_value=owner), \
            patch("sprintboard.services.member.user_service.get_or_create_invited",
                  new_callable=AsyncMock, return_value=invitee), \
            patch("sprintboard.services.member.send_event", new_callable=AsyncMock) as send_event:
        with pytest.raises(AlreadyMemberError):
            await member_service.invite_member(
                mock_session,
                project=create_project(),
                inviter=owner,
                obj_in=MemberInvite(email="dev@example.com", role=ProjectRole.DEVELOPER),
            )

    mock_session.rollback.assert_awaited_once()
    send_event.assert_not_called()


@pytest.mark.asyncio
async def test_invite_keeps_membership_when_event_is_not_delivered(mock_session, can_manage, member_repo):
    owner = create_user(OWNER_ID, "owner@example.com", name="Olga")
    invitee = create_user(DEV_ID, "dev@example.com")

    with patch("sprintboard.services.member.user_repo.get_user_by_id", new_callable=AsyncMock, return_value=owner), \
            patch("sprintboard.services.member.user_service.get_or_create_invited",
                  new_callable=AsyncMock, return_value=invitee), \
            patch("sprintboard.services.member.send_event", new_callable=AsyncMock, return_value=False) as send_event:
        member = await member_service.invite_member(
            mock_session,
            project=create_project(),
            inviter=owner,
            obj_in=MemberInvite(email="Dev@Example.com", role=ProjectRole.CLIENT),
        )

    assert member.user_id == DEV_ID
    assert member.role == ProjectRole.CLIENT
    member_repo.create_member_in_db.assert_awaited_once()
    member_repo.delete_member_from_db.assert_not_called()
    mock_session.rollback.assert_not_called()

    event_data = send_event.await_args.args[2]
    assert event_data["email"] == "dev@example.com"
    assert event_data["inviter_name"] == "Olga"
    assert event_data["role"] == "CLIENT"


@pytest.mark.asyncio
async def test_inviting_the_owner_is_rejected(mock_session, can_manage, member_repo):
    owner = create_user(OWNER_ID, "owner@example.com")
    admin = create_user(ADMIN_ID, "admin@example.com")

    with patch("sprintboard.services.member.user_repo.get_user_by_id", new_callable=AsyncMock, return_value=owner):
        with pytest.raises(OwnerMembershipError):
            await member_service.invite_member(
                mock_session,
                project=create_project(),
                inviter=admin,
                obj_in=MemberInvite(email="OWNER@example.com", role=ProjectRole.ADMIN),
            )

    member_repo.create_member_in_db.assert_not_called()
