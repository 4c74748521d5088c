from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence

from app.models.application import ApplicationRecord, ApplicationStatus, TimePeriod
from app.schemas.analytics import ApplicationsTrend, PipelineSummary
from app.analytics.periods import group_by_period
from app.analytics.utils import safe_mean

ACTIVE_STATUSES = frozenset({
    ApplicationStatus.APPLIED,
    ApplicationStatus.PHONE_SCREEN,
    ApplicationStatus.TECHNICAL_INTERVIEW,
    ApplicationStatus.ONSITE_INTERVIEW,
})

COMPLETED_STATUSES = frozenset({
    ApplicationStatus.OFFER_RECEIVED,
    ApplicationStatus.OFFER_ACCEPTED,
    ApplicationStatus.DECLINED,
    ApplicationStatus.REJECTED,
})

RECENT_ACTIVITY_DAYS = 7


def calculate_applications_trends(
    applications: Sequence[ApplicationRecord],
    period: TimePeriod = TimePeriod.WEEKLY,
) -> List[ApplicationsTrend]:
    """
    Per-period application counts, split into untouched (still Applied) and
    moved-on applications. Only observed periods appear, ascending by key.
    """
    trends = []
    for key, apps in group_by_period(applications, period).items():
        new_applications = sum(1 for app in apps if app.status == ApplicationStatus.APPLIED)
        trends.append(ApplicationsTrend(
            period=key,
            count=len(apps),
            new_applications=new_applications,
            status_changes=len(apps) - new_applications,
        ))

    return sorted(trends, key=lambda trend: trend.period)


def days_since(application_date: date, now: datetime) -> int:
    return (now.date() - application_date).days


def calculate_average_time_in_pipeline(
    applications: Sequence[ApplicationRecord],
    now: Optional[datetime] = None,
) -> float:
    # Days since application for every record, terminal or not: no status
    # history is stored, so this is elapsed time rather than time in stage.
    now = now or datetime.utcnow()
    return safe_mean([days_since(app.application_date, now) for app in applications])


def calculate_pipeline_summary(
    applications: Sequence[ApplicationRecord],
    now: Optional[datetime] = None,
) -> PipelineSummary:
    now = now or datetime.utcnow()
    cutoff = now - timedelta(days=RECENT_ACTIVITY_DAYS)

    recent_activity_count = sum(
        1 for app in applications
        if datetime.combine(app.application_date, time.min) >= cutoff or app.updated_at >= cutoff
    )

    return PipelineSummary(
        total_applications=len(applications),
        active_applications=sum(1 for app in applications if app.status in ACTIVE_STATUSES),
        completed_applications=sum(1 for app in applications if app.status in COMPLETED_STATUSES),
        recent_activity_count=recent_activity_count,
        average_time_in_pipeline=calculate_average_time_in_pipeline(applications, now),
    )
