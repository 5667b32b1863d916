from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Boolean, DateTime

from sprintboard.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    image = Column(String, nullable=True)
    # Пусто у аккаунтов, созданных приглашением, пока пользователь не зарегистрируется
    password_hash = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
