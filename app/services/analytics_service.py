"""
Employer Analytics Service

Read-only dashboard numbers for one employer:
- counts   : open jobs, applications received, accepted applications
- trends   : last window vs the window before it (default 7 days each)
- recent   : newest jobs and applications for display

Nothing is cached; every call counts straight from the collections.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from app.core.config import get_settings
from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import ApplicationStatus
from app.services.mongo_service import applicant_summary, guard_storage, index_by_id, to_object_id

log = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def compute_trend(current: int, previous: int) -> int:
    """
    Percentage change from `previous` to `current`, rounded half up.
    previous == 0 reports 100 for any activity and 0 otherwise.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return math.floor((current - previous) / previous * 100 + 0.5)


class AnalyticsService:

    def __init__(self):
        self.jobs: Collection = get_collection(COLLECTIONS["jobs"])
        self.applications: Collection = get_collection(COLLECTIONS["applications"])
        self.users: Collection = get_collection(COLLECTIONS["users"])
        self.settings = get_settings()

    @guard_storage
    def get_for_employer(self, employer_id: str, now: Optional[datetime] = None) -> dict:
        employer_oid = to_object_id(employer_id, "user id")
        now = now or datetime.utcnow()
        window = timedelta(days=self.settings.analytics_window_days)
        current = {"$gte": now - window, "$lte": now}
        previous = {"$gte": now - 2 * window, "$lt": now - window}

        job_ids = [doc["_id"] for doc in self.jobs.find({"company": employer_oid}, {"_id": 1})]
        own_apps = {"job": {"$in": job_ids}}
        hired = {"job": {"$in": job_ids}, "status": ApplicationStatus.accepted.value}

        def count_jobs(created=None):
            query = {"company": employer_oid}
            if created:
                query["created_at"] = created
            return self.jobs.count_documents(query)

        def count_apps(base: dict, created=None):
            query = dict(base)
            if created:
                query["created_at"] = created
            return self.applications.count_documents(query)

        counts = {
            "total_active_jobs": self.jobs.count_documents({"company": employer_oid, "is_closed": False}),
            "total_applications": count_apps(own_apps),
            "total_hired": count_apps(hired),
            "trends": {
                "active_jobs": compute_trend(count_jobs(current), count_jobs(previous)),
                "total_applicants": compute_trend(count_apps(own_apps, current), count_apps(own_apps, previous)),
                "total_hired": compute_trend(count_apps(hired, current), count_apps(hired, previous))
            }
        }

        return {
            "counts": counts,
            "data": {
                "recent_jobs": self._recent_jobs(employer_oid),
                "recent_applications": self._recent_applications(job_ids)
            }
        }

    def _recent_jobs(self, employer_oid) -> list:
        cursor = (
            self.jobs.find(
                {"company": employer_oid},
                {"title": 1, "location": 1, "job_type": 1, "is_closed": 1, "created_at": 1}
            )
            .sort(NEWEST_FIRST)
            .limit(self.settings.analytics_recent_limit)
        )
        return [
            {
                "id": str(job["_id"]),
                "title": job["title"],
                "location": job.get("location"),
                "job_type": job["job_type"],
                "is_closed": job.get("is_closed", False),
                "created_at": job["created_at"]
            }
            for job in cursor
        ]

    def _recent_applications(self, job_ids: list) -> list:
        apps = list(
            self.applications.find({"job": {"$in": job_ids}})
            .sort(NEWEST_FIRST)
            .limit(self.settings.analytics_recent_limit)
        )
        applicants = index_by_id(self.users.find({"_id": {"$in": [a["applicant"] for a in apps]}}))
        titles = {
            job["_id"]: job["title"]
            for job in self.jobs.find({"_id": {"$in": [a["job"] for a in apps]}}, {"title": 1})
        }

        results = []
        for app in apps:
            applicant = applicant_summary(applicants.get(app["applicant"]))
            if applicant:
                applicant.pop("resume", None)
            results.append({
                "id": str(app["_id"]),
                "status": app["status"],
                "job_title": titles.get(app["job"]),
                "applicant": applicant,
                "created_at": app["created_at"]
            })
        return results


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService()
