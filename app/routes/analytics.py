# ========================================
# app/routes/analytics.py
# ========================================

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from datetime import datetime
from typing import Optional
from loguru import logger

from app.database import get_db
from app.repositories.analytics_repository import MongoAnalyticsRepository
from app.schemas.analytics import (
    AnalyticsFilters,
    CompleteAnalytics,
    ConversionAnalytics,
    PipelineAnalytics,
    ResumePerformanceAnalytics,
    TimelineAnalytics,
)
from app.services.analytics_service import AnalyticsService
from app.utils.auth import get_current_user
from app.utils.export import create_csv_response_headers, export_complete_analytics_to_csv
from app.utils.filters import parse_analytics_filters

router = APIRouter(prefix="/analytics", tags=["Analytics"])


# ===========================
# DEPENDENCIES
# ===========================

def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(MongoAnalyticsRepository(get_db()))


def get_analytics_filters(
    start_date: Optional[str] = Query(None, description="ISO date, inclusive"),
    end_date: Optional[str] = Query(None, description="ISO date, inclusive"),
    time_period: Optional[str] = Query(None, description="Period: daily, weekly, monthly"),
    company: Optional[str] = Query(None, description="Case-insensitive partial match"),
    resume_id: Optional[str] = Query(None, description="Only applications sent with this resume"),
    status: Optional[str] = Query(None, description="Application status, e.g. 'Phone Screen'"),
    include_archived: Optional[str] = Query(None, description="Include archived applications"),
) -> Optional[AnalyticsFilters]:
    return parse_analytics_filters(
        start_date=start_date,
        end_date=end_date,
        time_period=time_period,
        company=company,
        resume_id=resume_id,
        status=status,
        include_archived=include_archived,
    )


# ===========================
# ANALYTICS ENDPOINTS
# ===========================

# ✅ 1. PIPELINE VIEW
@router.get("/pipeline", response_model=PipelineAnalytics)
async def get_pipeline_analytics(
    filters: Optional[AnalyticsFilters] = Depends(get_analytics_filters),
    current_user: dict = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Status distribution, application trends and pipeline summary."""
    return await service.get_pipeline_analytics(str(current_user["_id"]), filters)


# ✅ 2. RESUME PERFORMANCE VIEW
@router.get("/resume-performance", response_model=ResumePerformanceAnalytics)
async def get_resume_performance_analytics(
    filters: Optional[AnalyticsFilters] = Depends(get_analytics_filters),
    current_user: dict = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Usage, conversion and success rate for each resume version."""
    return await service.get_resume_performance_analytics(str(current_user["_id"]), filters)


# ✅ 3. TIMELINE VIEW
@router.get("/timeline", response_model=TimelineAnalytics)
async def get_timeline_analytics(
    filters: Optional[AnalyticsFilters] = Depends(get_analytics_filters),
    current_user: dict = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Response times, application velocity and timeline summary."""
    return await service.get_timeline_analytics(str(current_user["_id"]), filters)


# ✅ 4. CONVERSION VIEW
@router.get("/conversion", response_model=ConversionAnalytics)
async def get_conversion_analytics(
    filters: Optional[AnalyticsFilters] = Depends(get_analytics_filters),
    current_user: dict = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Funnel conversion rates overall and by company, resume and period."""
    return await service.get_conversion_analytics(str(current_user["_id"]), filters)


# ✅ 5. COMPLETE REPORT
@router.get("/complete", response_model=CompleteAnalytics)
async def get_complete_analytics(
    filters: Optional[AnalyticsFilters] = Depends(get_analytics_filters),
    current_user: dict = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """All analytics views in one response."""
    try:
        return await service.get_complete_analytics(str(current_user["_id"]), filters)
    except Exception as e:
        logger.error(f"Complete analytics request failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve complete analytics")


# ✅ 6. EXPORT COMPLETE REPORT
@router.get("/export")
async def export_analytics_report(
    filters: Optional[AnalyticsFilters] = Depends(get_analytics_filters),
    current_user: dict = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Export the complete analytics report as CSV."""
    try:
        analytics = await service.get_complete_analytics(str(current_user["_id"]), filters)
    except Exception as e:
        logger.error(f"Analytics export failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to export analytics")

    filename = f"analytics_report_{datetime.utcnow().strftime('%Y%m%d')}"
    return Response(
        content=export_complete_analytics_to_csv(analytics),
        media_type="text/csv",
        headers=create_csv_response_headers(filename),
    )
