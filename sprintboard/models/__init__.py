from sprintboard.models.user import User
from sprintboard.models.project import Project
from sprintboard.models.member import ProjectMember, ProjectRole, EffectiveRole
from sprintboard.models.sprint import Sprint
from sprintboard.models import relationships  # noqa: F401

__all__ = ["User", "Project", "ProjectMember", "ProjectRole", "EffectiveRole", "Sprint"]
