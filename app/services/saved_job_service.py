"""
Saved Job Service

A jobseeker's bookmarks, independent of applications.
The unique index on saved_jobs(jobseeker, job) rejects a second save;
that DuplicateKeyError is reported as a Conflict.
"""

import logging
from datetime import datetime

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.core.errors import Conflict, NotFound
from app.db.mongodb import get_collection, COLLECTIONS
from app.services.mongo_service import guard_storage, index_by_id, job_summary, to_object_id

log = logging.getLogger(__name__)


class SavedJobService:

    def __init__(self):
        self.saved_jobs: Collection = get_collection(COLLECTIONS["saved_jobs"])
        self.jobs: Collection = get_collection(COLLECTIONS["jobs"])
        self.users: Collection = get_collection(COLLECTIONS["users"])

    @guard_storage
    def save(self, jobseeker_id: str, job_id: str) -> str:
        """Bookmark an open job. Returns the saved entry id."""
        jobseeker_oid = to_object_id(jobseeker_id, "user id")
        job_oid = to_object_id(job_id, "job id")

        job = self.jobs.find_one({"_id": job_oid}, {"is_closed": 1})
        if not job or job.get("is_closed"):
            raise NotFound("Job not found")

        try:
            result = self.saved_jobs.insert_one({
                "jobseeker": jobseeker_oid,
                "job": job_oid,
                "created_at": datetime.utcnow()
            })
        except DuplicateKeyError:
            raise Conflict("Job already saved")

        log.info(f"Job {job_oid} saved by {jobseeker_oid}")
        return str(result.inserted_id)

    @guard_storage
    def list(self, jobseeker_id: str) -> list:
        """Saved entries, newest first, each with a job summary."""
        jobseeker_oid = to_object_id(jobseeker_id, "user id")
        entries = list(
            self.saved_jobs.find({"jobseeker": jobseeker_oid})
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        )

        jobs = index_by_id(self.jobs.find({"_id": {"$in": [e["job"] for e in entries]}}))
        owners = index_by_id(self.users.find({"_id": {"$in": list({j["company"] for j in jobs.values()})}}))

        results = []
        for entry in entries:
            job = jobs.get(entry["job"])
            results.append({
                "id": str(entry["_id"]),
                "job_id": str(entry["job"]),
                "job": job_summary(job, owners.get(job["company"])) if job else None,
                "created_at": entry["created_at"]
            })
        return results

    @guard_storage
    def remove(self, jobseeker_id: str, job_id: str) -> None:
        """Delete a bookmark. A second removal is an error, not a no-op."""
        result = self.saved_jobs.delete_one({
            "jobseeker": to_object_id(jobseeker_id, "user id"),
            "job": to_object_id(job_id, "job id")
        })
        if result.deleted_count == 0:
            raise NotFound("Saved job not found")
        log.info(f"Saved job removed: job={job_id} jobseeker={jobseeker_id}")


def get_saved_job_service() -> SavedJobService:
    return SavedJobService()
