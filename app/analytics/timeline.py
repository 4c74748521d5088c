from datetime import datetime
from typing import List, Optional, Sequence

from app.models.application import ApplicationRecord, TimePeriod
from app.schemas.analytics import (
    CompanyResponseTime,
    PeakPeriod,
    ResponseTimeMetrics,
    TimelineSummary,
    VelocityMetrics,
    VelocityTrend,
)
from app.analytics.periods import group_by_period
from app.analytics.status_distribution import calculate_status_distribution
from app.analytics.trends import calculate_average_time_in_pipeline
from app.analytics.utils import first_max, first_min, group_by, round_half_up

PEAK_PERIOD_LIMIT = 5
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


def calculate_timespan_days(applications: Sequence[ApplicationRecord]) -> int:
    """Whole days between the oldest and newest application; 0 for fewer than two."""
    if len(applications) < 2:
        return 0
    dates = [app.application_date for app in applications]
    return (max(dates) - min(dates)).days


def calculate_velocity_metrics(
    applications: Sequence[ApplicationRecord],
    period: TimePeriod = TimePeriod.WEEKLY,
) -> VelocityMetrics:
    if not applications:
        return VelocityMetrics()

    groups = group_by_period(applications, period)
    velocity_trend = [
        VelocityTrend(period=key, application_count=len(groups[key]))
        for key in sorted(groups)
    ]

    # sorted() is stable, so equal counts keep chronological order
    by_count = sorted(velocity_trend, key=lambda trend: trend.application_count, reverse=True)
    peak_application_periods = [
        PeakPeriod(period=trend.period, application_count=trend.application_count, rank=rank)
        for rank, trend in enumerate(by_count[:PEAK_PERIOD_LIMIT], start=1)
    ]

    # A floor of one week/month keeps single-day datasets from inflating rates
    timespan = calculate_timespan_days(applications)
    weeks_in_timespan = max(timespan / DAYS_PER_WEEK, 1)
    months_in_timespan = max(timespan / DAYS_PER_MONTH, 1)

    return VelocityMetrics(
        applications_per_week=round_half_up(len(applications) / weeks_in_timespan, 2),
        applications_per_month=round_half_up(len(applications) / months_in_timespan, 2),
        velocity_trend=velocity_trend,
        peak_application_periods=peak_application_periods,
    )


def calculate_timeline_summary(
    applications: Sequence[ApplicationRecord],
    now: Optional[datetime] = None,
) -> TimelineSummary:
    """
    Oldest/newest application, timespan and monthly activity extremes.

    With no applications the oldest and newest dates are set to today; they
    are a placeholder, not an observation.
    """
    if not applications:
        today = (now or datetime.utcnow()).date()
        return TimelineSummary(oldest_application=today, newest_application=today)

    dates = [app.application_date for app in applications]
    monthly_groups = group_by_period(applications, TimePeriod.MONTHLY)
    monthly_counts = [(month, len(monthly_groups[month])) for month in sorted(monthly_groups)]

    most_active = first_max(monthly_counts, lambda entry: entry[1])
    least_active = first_min(monthly_counts, lambda entry: entry[1])

    return TimelineSummary(
        oldest_application=min(dates),
        newest_application=max(dates),
        total_timespan_days=calculate_timespan_days(applications),
        average_applications_per_month=round_half_up(len(applications) / len(monthly_counts), 2),
        most_active_month=most_active[0],
        least_active_month=least_active[0],
    )


def calculate_response_time_metrics(
    applications: Sequence[ApplicationRecord],
    now: Optional[datetime] = None,
) -> ResponseTimeMetrics:
    # Without status history, response time falls back to days since applying
    # and no per-transition breakdown can be produced.
    now = now or datetime.utcnow()

    response_time_by_company: List[CompanyResponseTime] = [
        CompanyResponseTime(
            company=company,
            average_response_time=calculate_average_time_in_pipeline(apps, now),
            total_applications=len(apps),
            status_breakdown=calculate_status_distribution(apps),
        )
        for company, apps in group_by(applications, lambda app: app.company).items()
    ]

    return ResponseTimeMetrics(
        average_response_time=calculate_average_time_in_pipeline(applications, now),
        response_time_by_status=[],
        response_time_by_company=response_time_by_company,
    )
