"""
Period bucketing shared by every time-based calculator.

Keys sort lexicographically in chronological order:
    daily   -> "2024-01-07"
    weekly  -> "2023-12-31"  (the Sunday that starts the week)
    monthly -> "2024-01"
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Sequence, Union

from app.models.application import ApplicationRecord, TimePeriod
from app.analytics.utils import group_by


def week_start(value: date) -> date:
    # date.weekday() is Monday=0 .. Sunday=6; shift so Sunday=0
    days_since_sunday = (value.weekday() + 1) % 7
    return value - timedelta(days=days_since_sunday)


def bucket_key(value: Union[date, datetime], period: TimePeriod) -> str:
    if isinstance(value, datetime):
        value = value.date()

    if period == TimePeriod.WEEKLY:
        return week_start(value).isoformat()
    if period == TimePeriod.MONTHLY:
        return f"{value.year:04d}-{value.month:02d}"
    return value.isoformat()


def group_by_period(
    applications: Sequence[ApplicationRecord],
    period: TimePeriod,
) -> Dict[str, List[ApplicationRecord]]:
    """Group applications by bucket key, in first-encountered order."""
    return group_by(applications, lambda app: bucket_key(app.application_date, period))
