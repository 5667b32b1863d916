from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from sprintboard.models.member import ProjectRole, EffectiveRole


class MemberInvite(BaseModel):
    email: EmailStr
    role: ProjectRole

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class MemberRoleUpdate(BaseModel):
    role: ProjectRole


class Member(BaseModel):
    # У владельца нет строки в project_members, поэтому id пустой
    id: Optional[int] = None
    user_id: int
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: EffectiveRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_membership(cls, member) -> "Member":
        return cls(
            id=member.id,
            user_id=member.user.id,
            email=member.user.email,
            name=member.user.name,
            image=member.user.image,
            role=EffectiveRole.from_member_role(member.role),
            created_at=member.created_at,
            updated_at=member.updated_at,
        )

    @classmethod
    def from_owner(cls, owner) -> "Member":
        return cls(
            user_id=owner.id,
            email=owner.email,
            name=owner.name,
            image=owner.image,
            role=EffectiveRole.OWNER,
        )
