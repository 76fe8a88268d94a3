"""
Application Lifecycle Service

State machine:
    applied -> in-review -> accepted / rejected
Every status is reachable from every other (and from itself); there is no
terminal state. Only the employer owning the job may change a status.

Uniqueness:
    One application per (job, applicant). The existence check before insert
    only gives a friendly early error; the unique index on
    applications(job, applicant) is what actually prevents duplicates, and its
    DuplicateKeyError is reported as the same Conflict.
"""

import logging
from datetime import datetime

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.core.errors import Conflict, Forbidden, NotFound, ValidationError
from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import ApplicationStatus, UserRole
from app.services.mongo_service import (
    applicant_summary, guard_storage, index_by_id, job_summary, to_object_id
)

log = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]
ALREADY_APPLIED = "You have already applied for this job"
STATUS_VALUES = [s.value for s in ApplicationStatus]


def application_view(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "job_id": str(doc["job"]),
        "applicant_id": str(doc["applicant"]),
        "resume": doc.get("resume"),
        "status": doc["status"],
        "created_at": doc["created_at"],
        "updated_at": doc.get("updated_at")
    }


class ApplicationService:
    """
    Handles job applications.
    Applicants create and list their own; employers list and move
    applications for jobs they own.
    """

    def __init__(self):
        self.applications: Collection = get_collection(COLLECTIONS["applications"])
        self.jobs: Collection = get_collection(COLLECTIONS["jobs"])
        self.users: Collection = get_collection(COLLECTIONS["users"])

    @guard_storage
    def apply(self, applicant_id: str, job_id: str) -> dict:
        """
        Apply to an open job.

        Stores status=applied and a snapshot of the applicant's current
        resume reference (may be None).
        """
        applicant_oid = to_object_id(applicant_id, "user id")
        job_oid = to_object_id(job_id, "job id")

        job = self.jobs.find_one({"_id": job_oid}, {"is_closed": 1})
        if not job or job.get("is_closed"):
            raise NotFound("Job not available")

        applicant = self.users.find_one({"_id": applicant_oid})
        if not applicant or applicant.get("role") != UserRole.jobseeker.value:
            raise Forbidden("Only jobseekers can apply to jobs")

        if self.applications.find_one({"job": job_oid, "applicant": applicant_oid}, {"_id": 1}):
            raise Conflict(ALREADY_APPLIED)

        now = datetime.utcnow()
        doc = {
            "job": job_oid,
            "applicant": applicant_oid,
            "resume": applicant.get("resume"),
            "status": ApplicationStatus.applied.value,
            "created_at": now,
            "updated_at": now
        }
        try:
            self.applications.insert_one(doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent apply for the same pair
            log.warning(f"Duplicate application blocked by index: job={job_oid} applicant={applicant_oid}")
            raise Conflict(ALREADY_APPLIED)

        log.info(f"Application created: id={doc['_id']} job={job_oid} applicant={applicant_oid}")
        return application_view(doc)

    @guard_storage
    def list_my_applications(self, applicant_id: str) -> list:
        """All of an applicant's applications, newest first, with job summaries."""
        applicant_oid = to_object_id(applicant_id, "user id")
        apps = list(self.applications.find({"applicant": applicant_oid}).sort(NEWEST_FIRST))

        jobs = index_by_id(self.jobs.find({"_id": {"$in": [a["job"] for a in apps]}}))
        owner_ids = list({job["company"] for job in jobs.values()})
        owners = index_by_id(self.users.find({"_id": {"$in": owner_ids}}))

        results = []
        for app in apps:
            view = application_view(app)
            job = jobs.get(app["job"])
            # Job may have been removed since; the application stays visible
            view["job"] = job_summary(job, owners.get(job["company"])) if job else None
            results.append(view)
        return results

    @guard_storage
    def list_applications_for_job(self, employer_id: str, job_id: str) -> list:
        """Applications received for one job. Owner of the job only."""
        employer_oid = to_object_id(employer_id, "user id")
        job = self.jobs.find_one({"_id": to_object_id(job_id, "job id")})
        if not job:
            raise NotFound("Job not found")
        if job["company"] != employer_oid:
            log.warning(f"User {employer_oid} denied applications of job {job['_id']}")
            raise Forbidden("You are not allowed to view applications for this job")

        apps = list(self.applications.find({"job": job["_id"]}).sort(NEWEST_FIRST))
        applicants = index_by_id(self.users.find({"_id": {"$in": [a["applicant"] for a in apps]}}))

        results = []
        for app in apps:
            view = application_view(app)
            view["applicant"] = applicant_summary(applicants.get(app["applicant"]))
            results.append(view)
        return results

    @guard_storage
    def update_status(self, employer_id: str, application_id: str, new_status: str) -> str:
        """
        Move an application to `new_status`. Owner of the job only.

        Returns:
            The new status value
        """
        try:
            status = ApplicationStatus(new_status)
        except ValueError:
            raise ValidationError(f"Invalid status. Allowed: {', '.join(STATUS_VALUES)}")

        employer_oid = to_object_id(employer_id, "user id")
        app = self.applications.find_one({"_id": to_object_id(application_id, "application id")})
        if not app:
            raise NotFound("Application not found")

        job = self.jobs.find_one({"_id": app["job"]}, {"company": 1})
        if not job:
            raise NotFound("Job not found")
        if job["company"] != employer_oid:
            log.warning(f"User {employer_oid} denied status change on application {app['_id']}")
            raise Forbidden("You are not allowed to update this application")

        self.applications.update_one(
            {"_id": app["_id"]},
            {"$set": {"status": status.value, "updated_at": datetime.utcnow()}}
        )
        log.info(f"Application {app['_id']}: {app['status']} -> {status.value}")
        return status.value


def get_application_service() -> ApplicationService:
    return ApplicationService()
