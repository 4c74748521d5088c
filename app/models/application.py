from enum import Enum
from typing import Optional
from datetime import date, datetime, timezone
from pydantic import BaseModel, ConfigDict, field_validator


class ApplicationStatus(str, Enum):
    """Stages of a job application. Declaration order is the hiring funnel order."""
    APPLIED = "Applied"
    PHONE_SCREEN = "Phone Screen"
    TECHNICAL_INTERVIEW = "Technical Interview"
    ONSITE_INTERVIEW = "Onsite Interview"
    OFFER_RECEIVED = "Offer Received"
    OFFER_ACCEPTED = "Offer Accepted"
    DECLINED = "Declined"
    REJECTED = "Rejected"


class TimePeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ApplicationRecord(BaseModel):
    """Read-only snapshot of one job application as seen by the analytics engine"""
    model_config = ConfigDict(frozen=True)

    id: str
    company: str
    job_title: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    application_date: date
    updated_at: datetime
    resume_id: Optional[str] = None
    resume_version_name: Optional[str] = None  # Denormalised from the linked resume
    is_archived: bool = False

    @field_validator("application_date", mode="before")
    @classmethod
    def truncate_to_date(cls, value):
        # Mongo stores dates as datetimes
        if isinstance(value, datetime):
            return to_naive_utc(value).date()
        return value

    @field_validator("updated_at")
    @classmethod
    def normalize_updated_at(cls, value: datetime) -> datetime:
        return to_naive_utc(value)
