"""Shared fixtures: record factories and an in-memory analytics repository."""

from datetime import date, datetime
from typing import List, Optional

import pytest

from app.models.application import ApplicationRecord, ApplicationStatus
from app.models.resume import ResumeRecord
from app.schemas.analytics import AnalyticsFilters

# Fixed clock for anything that depends on "now"
NOW = datetime(2024, 3, 15, 12, 0, 0)


def make_application(
    status: ApplicationStatus = ApplicationStatus.APPLIED,
    application_date: date = date(2024, 3, 1),
    company: str = "Acme",
    resume_id: Optional[str] = None,
    resume_version_name: Optional[str] = None,
    updated_at: Optional[datetime] = None,
    app_id: Optional[str] = None,
) -> ApplicationRecord:
    make_application.counter += 1
    return ApplicationRecord(
        id=app_id or f"app-{make_application.counter}",
        company=company,
        job_title="Software Engineer",
        status=status,
        application_date=application_date,
        updated_at=updated_at or datetime.combine(application_date, datetime.min.time()),
        resume_id=resume_id,
        resume_version_name=resume_version_name,
    )


make_application.counter = 0


def make_resume(resume_id: str, version_name: str, applications=(), last_used_date=None) -> ResumeRecord:
    return ResumeRecord(
        id=resume_id,
        version_name=version_name,
        last_used_date=last_used_date,
        applications=tuple(applications),
    )


class FakeAnalyticsRepository:
    """In-memory repository recording the calls it receives."""

    def __init__(self, applications=(), resumes=(), error: Optional[Exception] = None):
        self.applications: List[ApplicationRecord] = list(applications)
        self.resumes: List[ResumeRecord] = list(resumes)
        self.error = error
        self.calls = []

    async def get_filtered_applications(self, user_id: str, filters: AnalyticsFilters):
        self.calls.append(("applications", user_id, filters))
        if self.error:
            raise self.error
        return list(self.applications)

    async def get_user_resumes(self, user_id: str, filters: AnalyticsFilters):
        self.calls.append(("resumes", user_id, filters))
        if self.error:
            raise self.error
        return list(self.resumes)


@pytest.fixture
def funnel_applications():
    """One application at each stage from Applied to Offer Received."""
    return [
        make_application(ApplicationStatus.APPLIED, date(2024, 1, 1), company="Acme"),
        make_application(ApplicationStatus.PHONE_SCREEN, date(2024, 1, 7), company="Acme"),
        make_application(ApplicationStatus.TECHNICAL_INTERVIEW, date(2024, 1, 20), company="Globex"),
        make_application(ApplicationStatus.ONSITE_INTERVIEW, date(2024, 2, 3), company="Globex"),
        make_application(ApplicationStatus.OFFER_RECEIVED, date(2024, 2, 10), company="Initech"),
    ]
