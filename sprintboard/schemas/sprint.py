import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DD_MM_YYYY = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")


def parse_sprint_date(value):
    """Принимает DD-MM-YYYY или ISO 8601, пустые значения превращает в None"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise ValueError("Invalid date format. Use DD-MM-YYYY or ISO format")

    value = value.strip()
    if not value:
        return None

    match = DD_MM_YYYY.match(value)
    try:
        if match:
            day, month, year = (int(part) for part in match.groups())
            return datetime(year, month, day, tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError("Invalid date format. Use DD-MM-YYYY or ISO format")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def dates_in_order(start_date: Optional[datetime], end_date: Optional[datetime]) -> bool:
    if start_date is None or end_date is None:
        return True
    return start_date <= end_date


class SprintBase(BaseModel):
    title: str
    start_date: Optional[datetime] = Field(None, description="Дата начала (DD-MM-YYYY или ISO)")
    end_date: Optional[datetime] = Field(None, description="Дата окончания (DD-MM-YYYY или ISO)")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return parse_sprint_date(v)


class SprintCreate(SprintBase):
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @model_validator(mode="after")
    def check_dates(self):
        if not dates_in_order(self.start_date, self.end_date):
            raise ValueError("Start date cannot be after end date")
        return self


class SprintUpdate(SprintBase):
    title: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


class Sprint(BaseModel):
    id: int
    project_id: int
    title: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
