"""
Hiring-funnel conversion rates.

Counts are progressive: an application counts toward every funnel stage up to
and including its current status. Declined and Rejected applications only
count toward Applied, because only the current status is stored and the
stage they left from is unknown.
"""

from typing import List, Optional, Sequence

from app.models.application import ApplicationRecord, ApplicationStatus, TimePeriod
from app.schemas.analytics import (
    BestConvertingCompany,
    BestConvertingPeriod,
    BestConvertingResume,
    CompanyConversion,
    ConversionRates,
    ConversionSummary,
    PeriodConversion,
    ResumeConversion,
)
from app.analytics.periods import group_by_period
from app.analytics.status_distribution import calculate_status_distribution, count_by_status
from app.analytics.utils import first_max, group_by, percentage

FUNNEL_STAGES = (
    ApplicationStatus.APPLIED,
    ApplicationStatus.PHONE_SCREEN,
    ApplicationStatus.TECHNICAL_INTERVIEW,
    ApplicationStatus.ONSITE_INTERVIEW,
    ApplicationStatus.OFFER_RECEIVED,
    ApplicationStatus.OFFER_ACCEPTED,
)

LOW_CONVERSION_THRESHOLD = 10.0
RESUME_SPREAD_THRESHOLD = 20.0

LOW_CONVERSION_MESSAGE = (
    "Overall conversion rate is low - consider improving resume or application strategy"
)
RESUME_SPREAD_MESSAGE = (
    "Significant difference in resume performance - focus on best performing resume format"
)


def progressive_count(applications: Sequence[ApplicationRecord], stage: ApplicationStatus) -> int:
    """Number of applications whose current status is `stage` or a later funnel stage."""
    if stage == ApplicationStatus.APPLIED:
        return len(applications)

    later_stages = FUNNEL_STAGES[FUNNEL_STAGES.index(stage):]
    counts = count_by_status(applications)
    return sum(counts[s] for s in later_stages)


def calculate_conversion_rates(applications: Sequence[ApplicationRecord]) -> ConversionRates:
    total = len(applications)
    phone_screen = progressive_count(applications, ApplicationStatus.PHONE_SCREEN)
    technical = progressive_count(applications, ApplicationStatus.TECHNICAL_INTERVIEW)
    onsite = progressive_count(applications, ApplicationStatus.ONSITE_INTERVIEW)
    offer = progressive_count(applications, ApplicationStatus.OFFER_RECEIVED)
    accepted = progressive_count(applications, ApplicationStatus.OFFER_ACCEPTED)

    return ConversionRates(
        application_to_phone_screen=percentage(phone_screen, total),
        phone_screen_to_technical=percentage(technical, phone_screen),
        technical_to_onsite=percentage(onsite, technical),
        onsite_to_offer=percentage(offer, onsite),
        offer_to_accepted=percentage(accepted, offer),
        overall_application_to_offer=percentage(offer, total),
    )


# ===========================
# SLICES
# ===========================

def calculate_conversion_by_company(applications: Sequence[ApplicationRecord]) -> List[CompanyConversion]:
    return [
        CompanyConversion(
            company=company,
            application_count=len(apps),
            conversion_rates=calculate_conversion_rates(apps),
            final_outcomes=calculate_status_distribution(apps),
        )
        for company, apps in group_by(applications, lambda app: app.company).items()
    ]


def calculate_conversion_by_resume(applications: Sequence[ApplicationRecord]) -> List[ResumeConversion]:
    """Applications without a linked resume are left out."""
    linked = [app for app in applications if app.resume_id]

    return [
        ResumeConversion(
            resume_id=resume_id,
            version_name=apps[0].resume_version_name or "",
            application_count=len(apps),
            conversion_rates=calculate_conversion_rates(apps),
            final_outcomes=calculate_status_distribution(apps),
        )
        for resume_id, apps in group_by(linked, lambda app: app.resume_id).items()
    ]


def calculate_conversion_by_period(
    applications: Sequence[ApplicationRecord],
    period: TimePeriod = TimePeriod.MONTHLY,
) -> List[PeriodConversion]:
    return [
        PeriodConversion(
            period=key,
            application_count=len(apps),
            conversion_rates=calculate_conversion_rates(apps),
            final_outcomes=calculate_status_distribution(apps),
        )
        for key, apps in group_by_period(applications, period).items()
    ]


# ===========================
# SUMMARY
# ===========================

def _overall_rate(conversion) -> float:
    return conversion.conversion_rates.overall_application_to_offer


def generate_improvement_opportunities(
    company_conversions: Sequence[CompanyConversion],
    resume_conversions: Sequence[ResumeConversion],
) -> List[str]:
    opportunities = []

    company_rates = [_overall_rate(c) for c in company_conversions]
    average_conversion = sum(company_rates) / len(company_rates) if company_rates else 0.0
    if average_conversion < LOW_CONVERSION_THRESHOLD:
        opportunities.append(LOW_CONVERSION_MESSAGE)

    if len(resume_conversions) > 1:
        resume_rates = [_overall_rate(r) for r in resume_conversions]
        if max(resume_rates) - min(resume_rates) > RESUME_SPREAD_THRESHOLD:
            opportunities.append(RESUME_SPREAD_MESSAGE)

    return opportunities


def calculate_conversion_summary(
    company_conversions: Sequence[CompanyConversion],
    resume_conversions: Sequence[ResumeConversion],
    period_conversions: Sequence[PeriodConversion],
) -> ConversionSummary:
    """
    Pick the best-converting company, resume and period by overall
    application-to-offer rate. Ties go to the entry encountered first.
    """
    best_company: Optional[CompanyConversion] = first_max(company_conversions, _overall_rate)
    best_resume: Optional[ResumeConversion] = first_max(resume_conversions, _overall_rate)
    best_period: Optional[PeriodConversion] = first_max(period_conversions, _overall_rate)

    return ConversionSummary(
        best_converting_company=BestConvertingCompany(
            company=best_company.company,
            conversion_rate=_overall_rate(best_company),
        ) if best_company else None,
        best_converting_resume=BestConvertingResume(
            id=best_resume.resume_id,
            version_name=best_resume.version_name,
            conversion_rate=_overall_rate(best_resume),
        ) if best_resume else None,
        best_converting_period=BestConvertingPeriod(
            period=best_period.period,
            conversion_rate=_overall_rate(best_period),
        ) if best_period else None,
        improvement_opportunities=generate_improvement_opportunities(
            company_conversions, resume_conversions
        ),
    )
