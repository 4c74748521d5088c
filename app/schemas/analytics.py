# ========================================
# app/schemas/analytics.py
# ========================================

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from typing import List, Optional
from datetime import date, datetime

from app.models.application import ApplicationStatus, TimePeriod


class AnalyticsModel(BaseModel):
    """Base for analytics value objects: immutable, readable from attributes"""
    model_config = ConfigDict(frozen=True, from_attributes=True)


# ===========================
# FILTERS
# ===========================

class DateRange(AnalyticsModel):
    """Inclusive date range"""
    start_date: date
    end_date: date


class AnalyticsFilters(AnalyticsModel):
    """Filters applied by the repository before the engine sees any record"""
    date_range: Optional[DateRange] = None  # Void unless start <= end
    time_period: Optional[TimePeriod] = None
    company: Optional[str] = None  # Case-insensitive substring
    resume_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    include_archived: bool = False

    @field_validator("date_range", mode="before")
    @classmethod
    def drop_unparseable_range(cls, value):
        if value is None or isinstance(value, DateRange):
            return value
        try:
            return DateRange.model_validate(value)
        except ValidationError:
            return None

    @field_validator("date_range")
    @classmethod
    def drop_inverted_range(cls, value: Optional[DateRange]) -> Optional[DateRange]:
        if value is not None and value.start_date > value.end_date:
            return None
        return value


# ===========================
# SHARED BUILDING BLOCKS
# ===========================

class StatusDistribution(AnalyticsModel):
    status: ApplicationStatus
    count: int
    percentage: float


class ConversionRates(AnalyticsModel):
    """Funnel conversion percentages, each in [0, 100]"""
    application_to_phone_screen: float = 0.0
    phone_screen_to_technical: float = 0.0
    technical_to_onsite: float = 0.0
    onsite_to_offer: float = 0.0
    offer_to_accepted: float = 0.0
    overall_application_to_offer: float = 0.0


# ===========================
# PIPELINE VIEW
# ===========================

class ApplicationsTrend(AnalyticsModel):
    period: str  # Bucket key, see app.analytics.periods
    count: int
    new_applications: int
    status_changes: int


class PipelineSummary(AnalyticsModel):
    total_applications: int = 0
    active_applications: int = 0
    completed_applications: int = 0
    recent_activity_count: int = 0  # Applied or updated in last 7 days
    average_time_in_pipeline: float = 0.0  # Days


class PipelineAnalytics(AnalyticsModel):
    status_distribution: List[StatusDistribution] = []
    applications_trends: List[ApplicationsTrend] = []
    summary: PipelineSummary = PipelineSummary()


# ===========================
# RESUME PERFORMANCE VIEW
# ===========================

class ResumeMetrics(AnalyticsModel):
    resume_id: str
    version_name: str
    usage_count: int
    conversion_rates: ConversionRates
    success_rate: float  # Percentage of applications that led to offers
    last_used_date: Optional[date] = None


class MostUsedResume(AnalyticsModel):
    id: str
    version_name: str
    usage_count: int


class BestPerformingResume(AnalyticsModel):
    id: str
    version_name: str
    success_rate: float


class ResumePerformanceSummary(AnalyticsModel):
    total_resumes: int = 0
    most_used_resume: Optional[MostUsedResume] = None
    best_performing_resume: Optional[BestPerformingResume] = None
    average_usage_per_resume: float = 0.0


class ResumePerformanceAnalytics(AnalyticsModel):
    resume_metrics: List[ResumeMetrics] = []
    summary: ResumePerformanceSummary = ResumePerformanceSummary()


# ===========================
# TIMELINE VIEW
# ===========================

class StatusResponseTime(AnalyticsModel):
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    average_days: float
    median_days: float
    applications: int


class CompanyResponseTime(AnalyticsModel):
    company: str
    average_response_time: float
    total_applications: int
    status_breakdown: List[StatusDistribution]


class ResponseTimeMetrics(AnalyticsModel):
    average_response_time: float = 0.0  # Days
    response_time_by_status: List[StatusResponseTime] = []
    response_time_by_company: List[CompanyResponseTime] = []


class VelocityTrend(AnalyticsModel):
    period: str
    application_count: int


class PeakPeriod(AnalyticsModel):
    period: str
    application_count: int
    rank: int


class VelocityMetrics(AnalyticsModel):
    applications_per_week: float = 0.0
    applications_per_month: float = 0.0
    velocity_trend: List[VelocityTrend] = []
    peak_application_periods: List[PeakPeriod] = []


class TimelineSummary(AnalyticsModel):
    oldest_application: date
    newest_application: date
    total_timespan_days: int = 0
    average_applications_per_month: float = 0.0
    most_active_month: str = ""
    least_active_month: str = ""


class TimelineAnalytics(AnalyticsModel):
    response_time_metrics: ResponseTimeMetrics
    velocity_metrics: VelocityMetrics
    summary: TimelineSummary


# ===========================
# CONVERSION VIEW
# ===========================

class CompanyConversion(AnalyticsModel):
    company: str
    application_count: int
    conversion_rates: ConversionRates
    final_outcomes: List[StatusDistribution]


class ResumeConversion(AnalyticsModel):
    resume_id: str
    version_name: str
    application_count: int
    conversion_rates: ConversionRates
    final_outcomes: List[StatusDistribution]


class PeriodConversion(AnalyticsModel):
    period: str
    application_count: int
    conversion_rates: ConversionRates
    final_outcomes: List[StatusDistribution]


class BestConvertingCompany(AnalyticsModel):
    company: str
    conversion_rate: float


class BestConvertingResume(AnalyticsModel):
    id: str
    version_name: str
    conversion_rate: float


class BestConvertingPeriod(AnalyticsModel):
    period: str
    conversion_rate: float


class ConversionSummary(AnalyticsModel):
    best_converting_company: Optional[BestConvertingCompany] = None
    best_converting_resume: Optional[BestConvertingResume] = None
    best_converting_period: Optional[BestConvertingPeriod] = None
    improvement_opportunities: List[str] = []


class ConversionAnalytics(AnalyticsModel):
    overall_conversion: ConversionRates = ConversionRates()
    conversion_by_company: List[CompanyConversion] = []
    conversion_by_resume: List[ResumeConversion] = []
    conversion_by_period: List[PeriodConversion] = []
    summary: ConversionSummary = ConversionSummary()


# ===========================
# COMPLETE VIEW
# ===========================

class CompleteAnalytics(AnalyticsModel):
    pipeline: PipelineAnalytics
    resume_performance: ResumePerformanceAnalytics
    timeline: TimelineAnalytics
    conversion: ConversionAnalytics
    generated_at: datetime
    date_range: DateRange
