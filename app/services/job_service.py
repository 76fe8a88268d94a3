"""
Job Listing Service

Public search and employer-scoped management of job postings.

Read paths:
- search_jobs     : open jobs only (public_search_query)
- get_job         : open jobs only; closed ones are reported as not found
- list_own_jobs   : the employer's own jobs, open/closed/all

Write paths (owner only - job.company must equal the caller):
- create_job, update_job, delete_job, toggle_job_status
"""

import logging
import math
from datetime import datetime
from typing import Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from app.core.config import get_settings
from app.core.errors import Conflict, Forbidden, NotFound, ValidationError
from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import JobCreate, JobUpdate, UserRole
from app.services.filter_builder import owner_listing_query, public_search_query
from app.services.mongo_service import (
    company_summary, guard_storage, index_by_id, serialize_doc,
    to_object_id, validate_model
)

log = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]
EDITABLE_FIELDS = tuple(JobCreate.model_fields)


class JobService:
    """
    Handles job postings.
    Jobs reference their owning employer through `company`.
    """

    def __init__(self):
        self.jobs: Collection = get_collection(COLLECTIONS["jobs"])
        self.users: Collection = get_collection(COLLECTIONS["users"])
        self.applications: Collection = get_collection(COLLECTIONS["applications"])
        self.saved_jobs: Collection = get_collection(COLLECTIONS["saved_jobs"])
        self.settings = get_settings()

    # ------------------------------------------------------------
    # Create
    # ------------------------------------------------------------

    @guard_storage
    def create_job(self, owner_id: str, fields: dict) -> str:
        """
        Create a job owned by `owner_id`.

        Returns:
            New job id as string
        """
        owner_oid = to_object_id(owner_id, "user id")
        job = validate_model(JobCreate, fields or {})

        owner = self.users.find_one({"_id": owner_oid}, {"role": 1})
        if not owner or owner.get("role") != UserRole.employer.value:
            raise Forbidden("Only employers can post jobs")

        now = datetime.utcnow()
        doc = job.model_dump(mode="json")
        doc.update({
            "company": owner_oid,
            "is_closed": False,
            "created_at": now,
            "updated_at": now
        })
        result = self.jobs.insert_one(doc)
        log.info(f"Job created: id={result.inserted_id} company={owner_oid}")
        return str(result.inserted_id)

    # ------------------------------------------------------------
    # Read
    # ------------------------------------------------------------

    @guard_storage
    def search_jobs(self, criteria=None, page: int = 1, page_size: Optional[int] = None) -> dict:
        """Paginated public search, newest first. Closed jobs never appear."""
        return self._paginate(public_search_query(criteria), page, page_size)

    @guard_storage
    def get_job(self, job_id: str) -> dict:
        """Fetch an open job with its owner's public fields."""
        job = self.jobs.find_one({"_id": to_object_id(job_id, "job id"), "is_closed": False})
        if not job:
            raise NotFound("Job not found")
        return self._with_owners([job])[0]

    @guard_storage
    def list_own_jobs(
        self,
        owner_id: str,
        criteria=None,
        status: Optional[str] = "all",
        page: int = 1,
        page_size: Optional[int] = None
    ) -> dict:
        """An employer's own postings. `status` is open, closed or all."""
        owner_oid = to_object_id(owner_id, "user id")
        return self._paginate(owner_listing_query(owner_oid, criteria, status), page, page_size)

    # ------------------------------------------------------------
    # Owner-only mutations
    # ------------------------------------------------------------

    @guard_storage
    def update_job(self, owner_id: str, job_id: str, patch: dict) -> dict:
        """
        Apply a partial update. The patch is merged over the stored job and
        re-validated as a whole, so salary_max >= salary_min holds against
        stored values too. company and is_closed are not patchable here.
        """
        job = self._get_owned_job(owner_id, job_id)
        changes = validate_model(JobUpdate, patch or {}).model_dump(exclude_unset=True)

        merged = {field: job.get(field) for field in EDITABLE_FIELDS}
        merged.update(changes)
        validated = validate_model(JobCreate, merged).model_dump(mode="json")
        validated["updated_at"] = datetime.utcnow()

        self.jobs.update_one({"_id": job["_id"]}, {"$set": validated})
        log.info(f"Job updated: id={job['_id']} fields={sorted(changes)}")
        return self._with_owners([self.jobs.find_one({"_id": job["_id"]})])[0]

    @guard_storage
    def delete_job(self, owner_id: str, job_id: str) -> None:
        """
        Hard-delete a job and its saved-job bookmarks.
        Jobs that already received applications cannot be deleted - close them.
        """
        job = self._get_owned_job(owner_id, job_id)

        if self.applications.find_one({"job": job["_id"]}, {"_id": 1}):
            log.warning(f"Refused to delete job {job['_id']}: it has applications")
            raise Conflict("Job has applications and cannot be deleted. Close it instead.")

        self.jobs.delete_one({"_id": job["_id"]})
        removed = self.saved_jobs.delete_many({"job": job["_id"]}).deleted_count
        log.info(f"Job deleted: id={job['_id']} (removed {removed} saved entries)")

    @guard_storage
    def toggle_job_status(self, owner_id: str, job_id: str) -> bool:
        """Flip is_closed. Returns the new value."""
        job = self._get_owned_job(owner_id, job_id)
        is_closed = not job.get("is_closed", False)
        self.jobs.update_one(
            {"_id": job["_id"]},
            {"$set": {"is_closed": is_closed, "updated_at": datetime.utcnow()}}
        )
        log.info(f"Job {job['_id']} is now {'closed' if is_closed else 'open'}")
        return is_closed

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _get_owned_job(self, owner_id: str, job_id: str) -> dict:
        owner_oid = to_object_id(owner_id, "user id")
        job = self.jobs.find_one({"_id": to_object_id(job_id, "job id")})
        if not job:
            raise NotFound("Job not found")
        if job["company"] != owner_oid:
            log.warning(f"Ownership check failed: user {owner_oid} on job {job['_id']}")
            raise Forbidden("You are not allowed to modify this job")
        return job

    def _paginate(self, query: dict, page: int, page_size: Optional[int]) -> dict:
        if page_size is None:
            page_size = self.settings.default_page_size
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if page_size < 1 or page_size > self.settings.max_page_size:
            raise ValidationError(f"page_size must be between 1 and {self.settings.max_page_size}")

        total = self.jobs.count_documents(query)
        cursor = (
            self.jobs.find(query)
            .sort(NEWEST_FIRST)
            .skip((page - 1) * page_size)
            .limit(page_size)
        )
        return {
            "items": self._with_owners(list(cursor)),
            "total_count": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size)
        }

    def _with_owners(self, jobs: list) -> list:
        """Serialize jobs, replacing `company` with the owner's public fields."""
        owner_ids = list({job["company"] for job in jobs})
        owners = index_by_id(self.users.find({"_id": {"$in": owner_ids}})) if owner_ids else {}

        items = []
        for job in jobs:
            item = serialize_doc(job)
            owner = owners.get(job["company"])
            item["company"] = company_summary(owner) or {"id": str(job["company"])}
            items.append(item)
        return items


def get_job_service() -> JobService:
    return JobService()
