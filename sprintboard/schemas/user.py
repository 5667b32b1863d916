from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from sprintboard.core.security import MAX_PASSWORD_BYTES


class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    image: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt учитывает только первые 72 байта
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        return v


class User(UserBase):
    id: int
    image: Optional[str] = None

    class Config:
        from_attributes = True
