# ========================================
# app/main.py
# ========================================

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import ALLOWED_ORIGINS
from app.database import connect_to_mongo, close_mongo_connection
from app.utils.logging_config import configure_logging

# Analytics
from app.routes.analytics import router as analytics_router

configure_logging()

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title="Job Tracker Analytics API",
    description="Pipeline, resume performance, timeline and conversion analytics for job applications",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# ===========================
# CORS MIDDLEWARE
# ===========================
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
async def start_db():
    """Connect to MongoDB on startup"""
    await connect_to_mongo()

@app.on_event("shutdown")
async def stop_db():
    """Close MongoDB connection on shutdown"""
    await close_mongo_connection()

# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(analytics_router)

# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
async def root():
    """API root endpoint with feature summary"""
    return {
        "status": "✅ Job Tracker Analytics API Running",
        "version": "1.0.0",
        "documentation": "/docs",
        "endpoints": {
            "analytics": [
                "/analytics/pipeline",
                "/analytics/resume-performance",
                "/analytics/timeline",
                "/analytics/conversion",
                "/analytics/complete",
                "/analytics/export"
            ]
        },
        "query_parameters": [
            "start_date",
            "end_date",
            "time_period (daily, weekly, monthly)",
            "company",
            "resume_id",
            "status",
            "include_archived"
        ]
    }
