"""
Parse analytics query parameters into AnalyticsFilters.

Invalid input never raises: a bad value is dropped as if it was not sent.
"""

import re
from datetime import date, datetime
from typing import Optional

from app.models.application import ApplicationStatus, TimePeriod
from app.schemas.analytics import AnalyticsFilters, DateRange

MIN_FILTER_DATE = date(2000, 1, 1)
MAX_STRING_LENGTH = 255
UNSAFE_CHARACTERS = re.compile(r"[<>\"'%;()&+]")
TRUE_VALUES = {"true", "1", "yes"}


def parse_date(value: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """ISO date or datetime between 2000-01-01 and the end of next year, else None."""
    if not value or not isinstance(value, str):
        return None

    try:
        parsed = datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None

    today = today or datetime.utcnow().date()
    max_date = date(today.year + 1, 12, 31)
    if parsed < MIN_FILTER_DATE or parsed > max_date:
        return None
    return parsed


def parse_boolean(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return False


def sanitize_string(value: Optional[str]) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    cleaned = UNSAFE_CHARACTERS.sub("", value.strip())[:MAX_STRING_LENGTH]
    return cleaned or None


def parse_time_period(value: Optional[str]) -> Optional[TimePeriod]:
    try:
        return TimePeriod(value) if value else None
    except ValueError:
        return None


def parse_status(value: Optional[str]) -> Optional[ApplicationStatus]:
    try:
        return ApplicationStatus(value) if value else None
    except ValueError:
        return None


def parse_analytics_filters(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    time_period: Optional[str] = None,
    company: Optional[str] = None,
    resume_id: Optional[str] = None,
    status: Optional[str] = None,
    include_archived: Optional[str] = None,
    today: Optional[date] = None,
) -> Optional[AnalyticsFilters]:
    """Build filters from raw query values. Returns None when nothing usable was sent."""
    values = {}

    period = parse_time_period(time_period)
    if period:
        values["time_period"] = period

    start = parse_date(start_date, today)
    end = parse_date(end_date, today)
    if start and end and start <= end:
        values["date_range"] = DateRange(start_date=start, end_date=end)

    company = sanitize_string(company)
    if company:
        values["company"] = company

    resume_id = sanitize_string(resume_id)
    if resume_id:
        values["resume_id"] = resume_id

    parsed_status = parse_status(status)
    if parsed_status:
        values["status"] = parsed_status

    if include_archived is not None:
        values["include_archived"] = parse_boolean(include_archived)

    return AnalyticsFilters(**values) if values else None
