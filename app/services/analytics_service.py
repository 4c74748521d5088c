# ========================================
# app/services/analytics_service.py
# ========================================

"""
Analytics service: fetches a user's filtered records from the repository and
runs the pure calculators in app.analytics over them.

The four single views never raise. A failure while building one is logged and
answered with that view's zeroed result. The complete view does not soft-fail:
a partial report is worse than a visible error, so failures propagate.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, TypeVar

from loguru import logger

from app.models.application import TimePeriod
from app.repositories.analytics_repository import AnalyticsRepository
from app.schemas.analytics import (
    AnalyticsFilters,
    CompleteAnalytics,
    ConversionAnalytics,
    DateRange,
    PipelineAnalytics,
    ResponseTimeMetrics,
    ResumePerformanceAnalytics,
    TimelineAnalytics,
    VelocityMetrics,
)
from app.analytics.conversion import (
    calculate_conversion_by_company,
    calculate_conversion_by_period,
    calculate_conversion_by_resume,
    calculate_conversion_rates,
    calculate_conversion_summary,
)
from app.analytics.resume_performance import (
    calculate_resume_metrics,
    calculate_resume_performance_summary,
)
from app.analytics.status_distribution import calculate_status_distribution
from app.analytics.timeline import (
    calculate_response_time_metrics,
    calculate_timeline_summary,
    calculate_velocity_metrics,
)
from app.analytics.trends import calculate_applications_trends, calculate_pipeline_summary

T = TypeVar("T")

DEFAULT_RANGE_DAYS = 90


def normalize_filters(filters: Optional[AnalyticsFilters]) -> AnalyticsFilters:
    return filters if filters is not None else AnalyticsFilters()


# ===========================
# EMPTY RESULTS
# ===========================

def empty_pipeline_analytics() -> PipelineAnalytics:
    return PipelineAnalytics()


def empty_resume_performance_analytics() -> ResumePerformanceAnalytics:
    return ResumePerformanceAnalytics()


def empty_timeline_analytics(now: datetime) -> TimelineAnalytics:
    return TimelineAnalytics(
        response_time_metrics=ResponseTimeMetrics(),
        velocity_metrics=VelocityMetrics(),
        summary=calculate_timeline_summary([], now),
    )


def empty_conversion_analytics() -> ConversionAnalytics:
    return ConversionAnalytics()


class AnalyticsService:
    """Job application analytics, always scoped to one user"""

    def __init__(
        self,
        repository: AnalyticsRepository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.repository = repository
        self.clock = clock

    # ===========================
    # PUBLIC VIEWS
    # ===========================

    async def get_pipeline_analytics(
        self, user_id: str, filters: Optional[AnalyticsFilters] = None
    ) -> PipelineAnalytics:
        """Status distribution, trends and pipeline summary"""
        return await self._soft_fail(
            "pipeline", user_id,
            lambda: self._build_pipeline(user_id, normalize_filters(filters)),
            empty_pipeline_analytics,
        )

    async def get_resume_performance_analytics(
        self, user_id: str, filters: Optional[AnalyticsFilters] = None
    ) -> ResumePerformanceAnalytics:
        """Usage and conversion metrics per resume version"""
        return await self._soft_fail(
            "resume_performance", user_id,
            lambda: self._build_resume_performance(user_id, normalize_filters(filters)),
            empty_resume_performance_analytics,
        )

    async def get_timeline_analytics(
        self, user_id: str, filters: Optional[AnalyticsFilters] = None
    ) -> TimelineAnalytics:
        """Response time, velocity and timeline summary"""
        return await self._soft_fail(
            "timeline", user_id,
            lambda: self._build_timeline(user_id, normalize_filters(filters)),
            lambda: empty_timeline_analytics(self.clock()),
        )

    async def get_conversion_analytics(
        self, user_id: str, filters: Optional[AnalyticsFilters] = None
    ) -> ConversionAnalytics:
        """Funnel conversion rates, overall and per company/resume/period"""
        return await self._soft_fail(
            "conversion", user_id,
            lambda: self._build_conversion(user_id, normalize_filters(filters)),
            empty_conversion_analytics,
        )

    async def get_complete_analytics(
        self, user_id: str, filters: Optional[AnalyticsFilters] = None
    ) -> CompleteAnalytics:
        """All four views built concurrently. Any failure is raised to the caller."""
        filters = normalize_filters(filters)

        tasks = [
            asyncio.ensure_future(self._build_pipeline(user_id, filters)),
            asyncio.ensure_future(self._build_resume_performance(user_id, filters)),
            asyncio.ensure_future(self._build_timeline(user_id, filters)),
            asyncio.ensure_future(self._build_conversion(user_id, filters)),
        ]

        try:
            pipeline, resume_performance, timeline, conversion = await asyncio.gather(*tasks)
        except Exception:
            logger.bind(view="complete", user_id=user_id).exception(
                f"Failed to get complete analytics for user {user_id}"
            )
            raise
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        return CompleteAnalytics(
            pipeline=pipeline,
            resume_performance=resume_performance,
            timeline=timeline,
            conversion=conversion,
            generated_at=self.clock(),
            date_range=self.get_effective_date_range(filters),
        )

    def get_effective_date_range(self, filters: Optional[AnalyticsFilters] = None) -> DateRange:
        """Requested range, or the last 90 days"""
        filters = normalize_filters(filters)
        if filters.date_range:
            return filters.date_range

        today = self.clock().date()
        return DateRange(start_date=today - timedelta(days=DEFAULT_RANGE_DAYS), end_date=today)

    # ===========================
    # SOFT-FAIL ADAPTER
    # ===========================

    async def _soft_fail(
        self,
        view: str,
        user_id: str,
        build: Callable[[], Awaitable[T]],
        empty: Callable[[], T],
    ) -> T:
        try:
            return await build()
        except Exception:
            logger.bind(view=view, user_id=user_id).exception(
                f"Failed to get {view} analytics for user {user_id}, returning empty result"
            )
            return empty()

    # ===========================
    # VIEW BUILDERS (raise on failure)
    # ===========================

    async def _build_pipeline(self, user_id: str, filters: AnalyticsFilters) -> PipelineAnalytics:
        applications = await self.repository.get_filtered_applications(user_id, filters)

        return PipelineAnalytics(
            status_distribution=calculate_status_distribution(applications),
            applications_trends=calculate_applications_trends(
                applications, filters.time_period or TimePeriod.WEEKLY
            ),
            summary=calculate_pipeline_summary(applications, self.clock()),
        )

    async def _build_resume_performance(
        self, user_id: str, filters: AnalyticsFilters
    ) -> ResumePerformanceAnalytics:
        resumes = await self.repository.get_user_resumes(user_id, filters)

        resume_metrics = calculate_resume_metrics(resumes)
        return ResumePerformanceAnalytics(
            resume_metrics=resume_metrics,
            summary=calculate_resume_performance_summary(resume_metrics),
        )

    async def _build_timeline(self, user_id: str, filters: AnalyticsFilters) -> TimelineAnalytics:
        applications = await self.repository.get_filtered_applications(user_id, filters)
        now = self.clock()

        return TimelineAnalytics(
            response_time_metrics=calculate_response_time_metrics(applications, now),
            velocity_metrics=calculate_velocity_metrics(
                applications, filters.time_period or TimePeriod.WEEKLY
            ),
            summary=calculate_timeline_summary(applications, now),
        )

    async def _build_conversion(self, user_id: str, filters: AnalyticsFilters) -> ConversionAnalytics:
        applications = await self.repository.get_filtered_applications(user_id, filters)

        by_company = calculate_conversion_by_company(applications)
        by_resume = calculate_conversion_by_resume(applications)
        by_period = calculate_conversion_by_period(
            applications, filters.time_period or TimePeriod.MONTHLY
        )

        return ConversionAnalytics(
            overall_conversion=calculate_conversion_rates(applications),
            conversion_by_company=by_company,
            conversion_by_resume=by_resume,
            conversion_by_period=by_period,
            summary=calculate_conversion_summary(by_company, by_resume, by_period),
        )
