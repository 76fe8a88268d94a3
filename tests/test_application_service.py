"""Tests for the application lifecycle: apply-once, ownership, status workflow."""

import pytest
from bson import ObjectId

from app.core.errors import Conflict, Forbidden, NotFound, ValidationError


class StaleReads:
    """Collection proxy whose existence checks miss a concurrent writer's insert."""

    def __init__(self, collection):
        self._collection = collection

    def find_one(self, *args, **kwargs):
        return None

    def __getattr__(self, name):
        return getattr(self._collection, name)


class TestApply:
    def test_apply_creates_applied_status_with_resume_snapshot(self, db, application_service, make_job, jobseeker):
        job_id = make_job()
        app = application_service.apply(jobseeker, job_id)

        assert app["status"] == "applied"
        assert app["job_id"] == job_id
        assert app["applicant_id"] == jobseeker
        assert app["resume"] == "/uploads/resumes/sam.pdf"
        assert db.applications.count_documents({}) == 1

    def test_resume_is_a_snapshot(self, db, application_service, user_service, make_job, jobseeker):
        job_id = make_job()
        application_service.apply(jobseeker, job_id)
        user_service.set_resume(jobseeker, "/uploads/resumes/sam-v2.pdf")

        stored = db.applications.find_one({})
        assert stored["resume"] == "/uploads/resumes/sam.pdf"

    def test_applicant_without_resume(self, application_service, make_job, make_user):
        seeker = make_user("jobseeker")
        assert application_service.apply(seeker, make_job())["resume"] is None

    def test_second_apply_conflicts(self, db, application_service, make_job, jobseeker):
        job_id = make_job()
        application_service.apply(jobseeker, job_id)
        with pytest.raises(Conflict, match="already applied"):
            application_service.apply(jobseeker, job_id)
        assert db.applications.count_documents({}) == 1

    def test_unique_index_catches_race(self, db, application_service, make_job, jobseeker):
        job_id = make_job()
        application_service.apply(jobseeker, job_id)

        # Both requests passed the existence check; the index must decide
        application_service.applications = StaleReads(application_service.applications)
        with pytest.raises(Conflict):
            application_service.apply(jobseeker, job_id)
        assert db.applications.count_documents({}) == 1

    def test_same_user_can_apply_to_different_jobs(self, application_service, make_job, jobseeker):
        application_service.apply(jobseeker, make_job(title="A"))
        application_service.apply(jobseeker, make_job(title="B"))
        assert len(application_service.list_my_applications(jobseeker)) == 2

    def test_missing_job(self, application_service, jobseeker):
        with pytest.raises(NotFound):
            application_service.apply(jobseeker, str(ObjectId()))

    def test_closed_job(self, application_service, job_service, make_job, employer, jobseeker):
        job_id = make_job()
        job_service.toggle_job_status(employer, job_id)
        with pytest.raises(NotFound):
            application_service.apply(jobseeker, job_id)

    def test_employer_cannot_apply(self, application_service, make_job, other_employer):
        with pytest.raises(Forbidden):
            application_service.apply(other_employer, make_job())

    def test_malformed_job_id(self, application_service, jobseeker):
        with pytest.raises(ValidationError):
            application_service.apply(jobseeker, "123")


class TestListings:
    def test_my_applications_newest_first_with_job_summary(self, application_service, make_job, jobseeker):
        first = make_job(title="First", salary_min=1000, salary_max=2000, job_type="remote")
        second = make_job(title="Second")
        application_service.apply(jobseeker, first)
        application_service.apply(jobseeker, second)

        apps = application_service.list_my_applications(jobseeker)
        assert [a["job"]["title"] for a in apps] == ["Second", "First"]
        summary = apps[1]["job"]
        assert summary["job_type"] == "remote"
        assert summary["salary_min"] == 1000
        assert summary["is_closed"] is False
        assert summary["company_name"] == "Acme Corp"

    def test_my_applications_survive_job_removal(self, db, application_service, make_job, jobseeker):
        job_id = make_job()
        application_service.apply(jobseeker, job_id)
        db.jobs.delete_one({"_id": ObjectId(job_id)})

        apps = application_service.list_my_applications(jobseeker)
        assert apps[0]["job"] is None
        assert apps[0]["job_id"] == job_id

    def test_only_own_applications_listed(self, application_service, make_job, make_user, jobseeker):
        job_id = make_job()
        application_service.apply(jobseeker, job_id)
        application_service.apply(make_user("jobseeker"), job_id)
        assert len(application_service.list_my_applications(jobseeker)) == 1

    def test_owner_lists_applications_for_job(self, application_service, make_job, employer, jobseeker, make_user):
        job_id = make_job()
        other = make_user("jobseeker", name="Second Seeker")
        application_service.apply(jobseeker, job_id)
        application_service.apply(other, job_id)

        apps = application_service.list_applications_for_job(employer, job_id)
        assert [a["applicant"]["name"] for a in apps] == ["Second Seeker", "Sam Seeker"]
        assert apps[1]["applicant"]["resume"] == "/uploads/resumes/sam.pdf"
        assert "password" not in apps[1]["applicant"]

    def test_non_owner_cannot_list_for_job(self, application_service, make_job, other_employer):
        with pytest.raises(Forbidden):
            application_service.list_applications_for_job(other_employer, make_job())

    def test_list_for_missing_job(self, application_service, employer):
        with pytest.raises(NotFound):
            application_service.list_applications_for_job(employer, str(ObjectId()))


class TestUpdateStatus:
    @pytest.fixture
    def application_id(self, application_service, make_job, jobseeker):
        return application_service.apply(jobseeker, make_job())["id"]

    def test_walk_through_every_state(self, db, application_service, employer, application_id):
        for status in ["in-review", "accepted", "rejected", "applied", "accepted", "accepted"]:
            assert application_service.update_status(employer, application_id, status) == status
            assert db.applications.find_one({"_id": ObjectId(application_id)})["status"] == status

    @pytest.mark.parametrize("status", ["hired", "Accepted", "", None])
    def test_invalid_status(self, application_service, employer, application_id, status):
        with pytest.raises(ValidationError):
            application_service.update_status(employer, application_id, status)

    def test_non_owner_forbidden_and_status_unchanged(self, db, application_service, other_employer, application_id):
        with pytest.raises(Forbidden):
            application_service.update_status(other_employer, application_id, "accepted")
        assert db.applications.find_one({"_id": ObjectId(application_id)})["status"] == "applied"

    def test_missing_application(self, application_service, employer):
        with pytest.raises(NotFound):
            application_service.update_status(employer, str(ObjectId()), "accepted")

    def test_application_whose_job_is_gone(self, db, application_service, employer, application_id):
        db.jobs.delete_many({})
        with pytest.raises(NotFound):
            application_service.update_status(employer, application_id, "accepted")
