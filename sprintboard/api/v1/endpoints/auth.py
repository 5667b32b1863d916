from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.core.config import settings
from sprintboard.core.exceptions import ConflictError
from sprintboard.core.security import create_access_token, decode_access_token
from sprintboard.db.session import get_db
from sprintboard.models.user import User as UserModel
from sprintboard.schemas.token import Token, TokenPayload
from sprintboard.schemas.user import User, UserCreate
from sprintboard.services import user as user_service

router = APIRouter()

# auto_error=False: токен может прийти и в cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Unauthorized",
    headers={"WWW-Authenticate": "Bearer"},
)


@router.post("/login", response_model=Token)
async def login_access_token(
    db: AsyncSession = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()
):
    """
    OAuth2 совместимый логин, в поле username передается email.
    """
    user = await user_service.authenticate(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    elif not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
    }


@router.post("/register", response_model=User)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    """
    Регистрация нового пользователя или активация аккаунта, созданного приглашением
    """
    try:
        return await user_service.register(db, obj_in=user_in)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


# Асинхронная зависимость для получения текущего пользователя
async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> UserModel:
    token = token or request.cookies.get(settings.TOKEN_COOKIE_NAME)
    if not token:
        raise credentials_exception
    try:
        payload = decode_access_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise credentials_exception
    if token_data.sub is None:
        raise credentials_exception

    user = await user_service.get(db, id=token_data.sub)
    if not user or not user.is_active:
        raise credentials_exception
    return user
