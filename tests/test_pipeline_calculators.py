"""Tests for status distribution, period bucketing, trends and the pipeline summary."""

from datetime import date, datetime

import pytest

from app.analytics.periods import bucket_key, group_by_period, week_start
from app.analytics.status_distribution import calculate_status_distribution
from app.analytics.trends import calculate_applications_trends, calculate_pipeline_summary
from app.analytics.utils import percentage, round_half_up
from app.models.application import ApplicationStatus, TimePeriod
from app.schemas.analytics import PipelineSummary, StatusDistribution
from conftest import NOW, make_application

S = ApplicationStatus


# --- Rounding helpers ---


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(0.875, 2) == 0.88
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(66.66666666, 2) == 66.67


def test_percentage_with_zero_denominator_is_zero():
    assert percentage(5, 0) == 0.0
    assert percentage(0, 0) == 0.0


# --- Status distribution ---


def test_status_distribution_example():
    applications = [
        make_application(S.APPLIED),
        make_application(S.APPLIED),
        make_application(S.PHONE_SCREEN),
    ]

    assert calculate_status_distribution(applications) == [
        StatusDistribution(status=S.APPLIED, count=2, percentage=66.67),
        StatusDistribution(status=S.PHONE_SCREEN, count=1, percentage=33.33),
    ]


def test_status_distribution_empty_input():
    assert calculate_status_distribution([]) == []


def test_status_distribution_omits_absent_statuses():
    distribution = calculate_status_distribution([make_application(S.REJECTED)])
    assert [d.status for d in distribution] == [S.REJECTED]
    assert distribution[0].percentage == 100.0


@pytest.mark.parametrize("statuses", [
    [S.APPLIED] * 3 + [S.REJECTED] * 3 + [S.OFFER_RECEIVED],
    [S.APPLIED, S.PHONE_SCREEN, S.TECHNICAL_INTERVIEW, S.DECLINED, S.REJECTED, S.OFFER_ACCEPTED],
    [S.APPLIED] * 7 + [S.ONSITE_INTERVIEW] * 5 + [S.OFFER_RECEIVED] * 11,
])
def test_status_distribution_percentages_sum_to_100(statuses):
    distribution = calculate_status_distribution([make_application(s) for s in statuses])
    assert abs(sum(d.percentage for d in distribution) - 100) <= 0.1
    assert sum(d.count for d in distribution) == len(statuses)


# --- Period bucketing ---


def test_daily_and_monthly_keys():
    assert bucket_key(date(2024, 3, 5), TimePeriod.DAILY) == "2024-03-05"
    assert bucket_key(date(2024, 3, 5), TimePeriod.MONTHLY) == "2024-03"
    assert bucket_key(datetime(2024, 3, 5, 23, 59), TimePeriod.DAILY) == "2024-03-05"


def test_weekly_keys_start_on_sunday():
    # 2024-01-01 is a Monday, 2024-01-07 a Sunday
    assert bucket_key(date(2024, 1, 1), TimePeriod.WEEKLY) == "2023-12-31"
    assert bucket_key(date(2024, 1, 7), TimePeriod.WEEKLY) == "2024-01-07"
    assert bucket_key(date(2024, 1, 13), TimePeriod.WEEKLY) == "2024-01-07"


def test_week_start_of_a_sunday_is_itself():
    assert week_start(date(2023, 12, 31)) == date(2023, 12, 31)


def test_group_by_period_keeps_first_encountered_order():
    applications = [
        make_application(application_date=date(2024, 2, 1)),
        make_application(application_date=date(2024, 1, 1)),
        make_application(application_date=date(2024, 2, 20)),
    ]
    groups = group_by_period(applications, TimePeriod.MONTHLY)
    assert list(groups) == ["2024-02", "2024-01"]
    assert len(groups["2024-02"]) == 2


# --- Trends ---


def test_weekly_trends_sorted_and_split_by_status():
    applications = [
        make_application(S.APPLIED, date(2024, 1, 7)),
        make_application(S.PHONE_SCREEN, date(2024, 1, 2)),
        make_application(S.APPLIED, date(2024, 1, 1)),
    ]

    trends = calculate_applications_trends(applications)

    assert [t.period for t in trends] == ["2023-12-31", "2024-01-07"]
    assert (trends[0].count, trends[0].new_applications, trends[0].status_changes) == (2, 1, 1)
    assert (trends[1].count, trends[1].new_applications, trends[1].status_changes) == (1, 1, 0)


def test_trends_skip_empty_periods():
    applications = [
        make_application(application_date=date(2024, 1, 15)),
        make_application(application_date=date(2024, 4, 15)),
    ]
    trends = calculate_applications_trends(applications, TimePeriod.MONTHLY)
    assert [t.period for t in trends] == ["2024-01", "2024-04"]


def test_trends_empty_input():
    assert calculate_applications_trends([], TimePeriod.DAILY) == []


# --- Pipeline summary ---


def test_pipeline_summary_counts():
    applications = [
        make_application(S.APPLIED, date(2024, 3, 10)),
        make_application(S.REJECTED, date(2024, 3, 1), updated_at=datetime(2024, 3, 14, 9, 0)),
        make_application(S.OFFER_ACCEPTED, date(2024, 2, 1)),
    ]

    summary = calculate_pipeline_summary(applications, NOW)

    assert summary.total_applications == 3
    assert summary.active_applications == 1
    assert summary.completed_applications == 2
    assert summary.recent_activity_count == 2
    # 5 + 14 + 43 days since applying
    assert summary.average_time_in_pipeline == 20.67


def test_recent_activity_window_is_seven_days_back_from_now():
    # NOW is 2024-03-15 12:00, so the window opens at 2024-03-08 12:00
    applications = [
        make_application(S.APPLIED, date(2024, 3, 8)),
        make_application(S.APPLIED, date(2024, 3, 9)),
        make_application(S.APPLIED, date(2024, 3, 1), updated_at=datetime(2024, 3, 8, 12, 0)),
    ]

    summary = calculate_pipeline_summary(applications, NOW)
    assert summary.recent_activity_count == 2

    at_midnight = calculate_pipeline_summary(applications, datetime(2024, 3, 15))
    assert at_midnight.recent_activity_count == 3


def test_pipeline_summary_empty():
    assert calculate_pipeline_summary([], NOW) == PipelineSummary()


def test_calculators_are_idempotent(funnel_applications):
    assert calculate_status_distribution(funnel_applications) == calculate_status_distribution(funnel_applications)
    assert calculate_applications_trends(funnel_applications) == calculate_applications_trends(funnel_applications)
    assert calculate_pipeline_summary(funnel_applications, NOW) == calculate_pipeline_summary(funnel_applications, NOW)
