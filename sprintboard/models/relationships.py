from sqlalchemy.orm import relationship

from sprintboard.models.user import User
from sprintboard.models.project import Project
from sprintboard.models.member import ProjectMember
from sprintboard.models.sprint import Sprint

# Отношения для User
User.owned_projects = relationship("Project", back_populates="owner", passive_deletes=True)
User.memberships = relationship("ProjectMember", back_populates="user", passive_deletes=True)

# Отношения для Project
Project.owner = relationship("User", back_populates="owned_projects")
Project.members = relationship("ProjectMember", back_populates="project", passive_deletes=True)
Project.sprints = relationship("Sprint", back_populates="project", passive_deletes=True)

# Отношения для ProjectMember
ProjectMember.project = relationship("Project", back_populates="members")
ProjectMember.user = relationship("User", back_populates="memberships", lazy="joined")

# Отношения для Sprint
Sprint.project = relationship("Project", back_populates="sprints")
