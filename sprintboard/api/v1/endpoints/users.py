from typing import Any

from fastapi import APIRouter, Depends

from sprintboard.api.v1.endpoints.auth import get_current_user
from sprintboard.models.user import User as UserModel
from sprintboard.schemas.user import User

router = APIRouter()


@router.get("/me", response_model=User)
async def read_current_user(current_user: UserModel = Depends(get_current_user)) -> Any:
    """Текущий пользователь"""
    return current_user
