from typing import Optional, Tuple
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, field_validator

from .application import ApplicationRecord, to_naive_utc


class ResumeRecord(BaseModel):
    """Resume version with the applications that used it, pre-populated by the repository"""
    model_config = ConfigDict(frozen=True)

    id: str
    version_name: str
    last_used_date: Optional[date] = None
    applications: Tuple[ApplicationRecord, ...] = ()

    @field_validator("last_used_date", mode="before")
    @classmethod
    def truncate_to_date(cls, value):
        if isinstance(value, datetime):
            return to_naive_utc(value).date()
        return value
