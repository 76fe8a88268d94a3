"""Test configuration and fixtures."""

from datetime import datetime

import mongomock
import pytest
from bson import ObjectId

from app.db.mongodb import init_mongo_indexes, set_mongo_db
from app.services.analytics_service import AnalyticsService
from app.services.application_service import ApplicationService
from app.services.job_service import JobService
from app.services.saved_job_service import SavedJobService
from app.services.user_service import UserService


@pytest.fixture
def db():
    """Fresh in-memory database with the production indexes."""
    database = mongomock.MongoClient()["job_board_test"]
    set_mongo_db(database)
    init_mongo_indexes()
    yield database
    set_mongo_db(None)


@pytest.fixture
def make_user(db):
    """Insert a user directly (no password hashing) and return its id."""
    def _make(role="jobseeker", **fields):
        doc = {
            "name": f"Test {role}",
            "email": f"{role}-{ObjectId()}@example.com",
            "password": "not-a-real-hash",
            "role": role,
            "created_at": datetime.utcnow()
        }
        if role == "employer":
            doc["company_name"] = "Acme Corp"
        doc.update(fields)
        db.users.insert_one(doc)
        return str(doc["_id"])
    return _make


@pytest.fixture
def employer(make_user):
    return make_user("employer", name="Erin Employer", company_name="Acme Corp")


@pytest.fixture
def other_employer(make_user):
    return make_user("employer", name="Olga Other", company_name="Globex")


@pytest.fixture
def jobseeker(make_user):
    return make_user("jobseeker", name="Sam Seeker", resume="/uploads/resumes/sam.pdf")


@pytest.fixture
def job_service(db):
    return JobService()


@pytest.fixture
def application_service(db):
    return ApplicationService()


@pytest.fixture
def saved_job_service(db):
    return SavedJobService()


@pytest.fixture
def analytics_service(db):
    return AnalyticsService()


@pytest.fixture
def user_service(db):
    return UserService()


@pytest.fixture
def make_job(job_service, employer):
    """Create a job through the service; fields override the defaults."""
    def _make(owner=None, **fields):
        data = {
            "title": "Backend Engineer",
            "description": "Build APIs",
            "requirements": "Python",
            "location": "Berlin",
            "job_type": "full-time"
        }
        data.update(fields)
        return job_service.create_job(owner or employer, data)
    return _make
