"""Tests for resume performance metrics and summary."""

from datetime import date

from app.analytics.resume_performance import (
    calculate_resume_metrics,
    calculate_resume_performance_summary,
    calculate_success_rate,
)
from app.models.application import ApplicationStatus
from app.schemas.analytics import ConversionRates, ResumePerformanceSummary
from conftest import make_application, make_resume

S = ApplicationStatus


def _resumes():
    return [
        make_resume("r1", "Backend v1", [
            make_application(S.OFFER_RECEIVED), make_application(S.APPLIED), make_application(S.APPLIED),
        ], last_used_date=date(2024, 3, 1)),
        make_resume("r2", "Backend v2", [
            make_application(S.OFFER_ACCEPTED), make_application(S.OFFER_RECEIVED), make_application(S.APPLIED),
        ]),
        make_resume("r3", "Unused"),
    ]


def test_success_rate_counts_offers():
    applications = [make_application(S.OFFER_ACCEPTED), make_application(S.REJECTED)]
    assert calculate_success_rate(applications) == 50.0
    assert calculate_success_rate([]) == 0.0


def test_resume_metrics():
    metrics = calculate_resume_metrics(_resumes())

    assert [m.usage_count for m in metrics] == [3, 3, 0]
    assert [m.success_rate for m in metrics] == [33.33, 66.67, 0.0]
    assert metrics[0].last_used_date == date(2024, 3, 1)
    assert metrics[1].conversion_rates.offer_to_accepted == 50.0
    assert metrics[2].conversion_rates == ConversionRates()


def test_resume_summary():
    summary = calculate_resume_performance_summary(calculate_resume_metrics(_resumes()))

    assert summary.total_resumes == 3
    # r1 and r2 are both used three times; the first one wins
    assert summary.most_used_resume.id == "r1"
    assert summary.most_used_resume.usage_count == 3
    assert summary.best_performing_resume.id == "r2"
    assert summary.best_performing_resume.success_rate == 66.67
    assert summary.average_usage_per_resume == 2.0


def test_best_performing_tie_is_first_in_input_order():
    first = make_resume("first", "A", [make_application(S.OFFER_RECEIVED), make_application(S.APPLIED)])
    second = make_resume("second", "B", [make_application(S.OFFER_ACCEPTED), make_application(S.REJECTED)])

    summary = calculate_resume_performance_summary(calculate_resume_metrics([first, second]))
    assert summary.best_performing_resume.id == "first"

    # Repeatable, and follows input order rather than ids
    summary = calculate_resume_performance_summary(calculate_resume_metrics([first, second]))
    assert summary.best_performing_resume.id == "first"
    summary = calculate_resume_performance_summary(calculate_resume_metrics([second, first]))
    assert summary.best_performing_resume.id == "second"


def test_no_resumes_gives_empty_summary():
    assert calculate_resume_metrics([]) == []
    assert calculate_resume_performance_summary([]) == ResumePerformanceSummary()
