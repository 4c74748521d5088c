# ========================================
# app/repositories/analytics_repository.py
# ========================================

import re
from datetime import datetime, time
from typing import Any, Dict, List, Optional, Protocol

from bson import ObjectId
from loguru import logger

from app.models.application import ApplicationRecord
from app.models.resume import ResumeRecord
from app.schemas.analytics import AnalyticsFilters


class AnalyticsRepository(Protocol):
    """Data access the analytics service depends on. Results are user-scoped and already filtered."""

    async def get_filtered_applications(
        self, user_id: str, filters: AnalyticsFilters
    ) -> List[ApplicationRecord]:
        ...

    async def get_user_resumes(
        self, user_id: str, filters: AnalyticsFilters
    ) -> List[ResumeRecord]:
        ...


def id_candidates(value: str) -> List[Any]:
    """A stored reference may be a string or an ObjectId; match both."""
    candidates: List[Any] = [value]
    if ObjectId.is_valid(value):
        candidates.append(ObjectId(value))
    return candidates


def build_application_query(user_id: str, filters: AnalyticsFilters) -> Dict[str, Any]:
    query: Dict[str, Any] = {"user_id": {"$in": id_candidates(user_id)}}

    # Archived applications are excluded by default
    if not filters.include_archived:
        query["is_archived"] = {"$ne": True}

    if filters.date_range:
        query["application_date"] = {
            "$gte": datetime.combine(filters.date_range.start_date, time.min),
            "$lte": datetime.combine(filters.date_range.end_date, time.max),
        }

    if filters.company:
        query["company"] = {"$regex": re.escape(filters.company), "$options": "i"}

    if filters.resume_id:
        query["resume_id"] = {"$in": id_candidates(filters.resume_id)}

    if filters.status:
        query["status"] = filters.status.value

    return query


def application_from_document(
    doc: Dict[str, Any], resume_version_name: Optional[str] = None
) -> ApplicationRecord:
    resume_id = doc.get("resume_id")
    application_date = doc["application_date"]

    return ApplicationRecord(
        id=str(doc["_id"]),
        company=doc.get("company", ""),
        job_title=doc.get("job_title", ""),
        status=doc.get("status", "Applied"),
        application_date=application_date,
        updated_at=doc.get("updated_at") or application_date,
        resume_id=str(resume_id) if resume_id else None,
        resume_version_name=resume_version_name,
        is_archived=doc.get("is_archived", False),
    )


class MongoAnalyticsRepository:
    """Reads applications and resumes from the `applications` and `resumes` collections."""

    def __init__(self, db, max_documents: int = 10000):
        self.db = db
        self.max_documents = max_documents

    async def _find_applications(self, user_id: str, filters: AnalyticsFilters) -> List[Dict[str, Any]]:
        query = build_application_query(user_id, filters)
        docs = await (
            self.db.applications.find(query)
            .sort("application_date", -1)
            .to_list(self.max_documents)
        )
        logger.debug(f"Fetched {len(docs)} applications for user {user_id}")
        return docs

    async def _resume_names(self, user_id: str) -> Dict[str, str]:
        resumes = await self.db.resumes.find(
            {"user_id": {"$in": id_candidates(user_id)}},
            {"version_name": 1},
        ).to_list(1000)
        return {str(r["_id"]): r.get("version_name", "") for r in resumes}

    async def get_filtered_applications(
        self, user_id: str, filters: AnalyticsFilters
    ) -> List[ApplicationRecord]:
        docs = await self._find_applications(user_id, filters)
        names = await self._resume_names(user_id)

        return [
            application_from_document(doc, names.get(str(doc.get("resume_id"))))
            for doc in docs
        ]

    async def get_user_resumes(
        self, user_id: str, filters: AnalyticsFilters
    ) -> List[ResumeRecord]:
        query: Dict[str, Any] = {"user_id": {"$in": id_candidates(user_id)}}
        if filters.resume_id:
            query["_id"] = {"$in": id_candidates(filters.resume_id)}

        resume_docs = await self.db.resumes.find(query).to_list(1000)
        application_docs = await self._find_applications(user_id, filters)

        # Link each resume to the filtered applications that used it
        linked: Dict[str, List[Dict[str, Any]]] = {}
        for doc in application_docs:
            if doc.get("resume_id"):
                linked.setdefault(str(doc["resume_id"]), []).append(doc)

        resumes = []
        for resume in resume_docs:
            resume_id = str(resume["_id"])
            version_name = resume.get("version_name", "")
            resumes.append(ResumeRecord(
                id=resume_id,
                version_name=version_name,
                last_used_date=resume.get("last_used_date"),
                applications=tuple(
                    application_from_document(doc, version_name)
                    for doc in linked.get(resume_id, [])
                ),
            ))

        return resumes
