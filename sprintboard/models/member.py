import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, UniqueConstraint

from sprintboard.db.base import Base


class ProjectRole(str, enum.Enum):
    """Роли, которые хранятся в project_members"""

    ADMIN = "ADMIN"
    DEVELOPER = "DEVELOPER"
    CLIENT = "CLIENT"


class EffectiveRole(str, enum.Enum):
    """Роль пользователя в проекте для отображения. OWNER вычисляется и не хранится."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    DEVELOPER = "DEVELOPER"
    CLIENT = "CLIENT"

    @classmethod
    def from_member_role(cls, role: ProjectRole) -> "EffectiveRole":
        return cls(ProjectRole(role).value)


class ProjectMember(Base):
    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(ProjectRole), nullable=False, default=ProjectRole.DEVELOPER)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
