from typing import List, Sequence

from app.models.application import ApplicationRecord, ApplicationStatus
from app.models.resume import ResumeRecord
from app.schemas.analytics import (
    BestPerformingResume,
    MostUsedResume,
    ResumeMetrics,
    ResumePerformanceSummary,
)
from app.analytics.conversion import calculate_conversion_rates
from app.analytics.utils import first_max, percentage, safe_mean

SUCCESS_STATUSES = frozenset({
    ApplicationStatus.OFFER_RECEIVED,
    ApplicationStatus.OFFER_ACCEPTED,
})


def calculate_success_rate(applications: Sequence[ApplicationRecord]) -> float:
    """Share of applications that reached an offer, as a percentage."""
    successful = sum(1 for app in applications if app.status in SUCCESS_STATUSES)
    return percentage(successful, len(applications))


def calculate_resume_metrics(resumes: Sequence[ResumeRecord]) -> List[ResumeMetrics]:
    return [
        ResumeMetrics(
            resume_id=resume.id,
            version_name=resume.version_name,
            usage_count=len(resume.applications),
            conversion_rates=calculate_conversion_rates(resume.applications),
            success_rate=calculate_success_rate(resume.applications),
            last_used_date=resume.last_used_date,
        )
        for resume in resumes
    ]


def calculate_resume_performance_summary(resume_metrics: Sequence[ResumeMetrics]) -> ResumePerformanceSummary:
    """
    Most used and best performing resume plus average usage.

    Ties go to the resume listed first, so the same input always picks the
    same resume.
    """
    if not resume_metrics:
        return ResumePerformanceSummary()

    most_used = first_max(resume_metrics, lambda m: m.usage_count)
    best_performing = first_max(resume_metrics, lambda m: m.success_rate)

    return ResumePerformanceSummary(
        total_resumes=len(resume_metrics),
        most_used_resume=MostUsedResume(
            id=most_used.resume_id,
            version_name=most_used.version_name,
            usage_count=most_used.usage_count,
        ),
        best_performing_resume=BestPerformingResume(
            id=best_performing.resume_id,
            version_name=best_performing.version_name,
            success_rate=best_performing.success_rate,
        ),
        average_usage_per_resume=safe_mean([m.usage_count for m in resume_metrics]),
    )
