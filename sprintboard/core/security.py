from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import bcrypt
from jose import jwt

from sprintboard.core.config import settings

ALGORITHM = "HS256"
MAX_PASSWORD_BYTES = 72


def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Создает подписанный JWT, в sub кладется идентификатор пользователя"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises jose.JWTError on a bad signature or an expired token."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    # У приглашенных пользователей пароля еще нет
    if not password_hash:
        return False
    password = plain_password.encode("utf-8")
    if len(password) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password, password_hash.encode("utf-8"))
