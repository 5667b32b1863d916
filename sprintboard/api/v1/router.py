from fastapi import APIRouter
from sprintboard.api.v1.endpoints import auth, users, projects, members, sprints

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(members.router, prefix="/projects", tags=["members"])
api_router.include_router(sprints.router, prefix="/projects", tags=["sprints"])
