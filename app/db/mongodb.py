"""
MongoDB Connection Utility

MongoDB stores every entity of the job board:
- users: jobseekers and employers
- jobs: employer-owned listings
- applications: one per (job, applicant)
- saved_jobs: one per (jobseeker, job)

The unique indexes created here are the authoritative guard against
duplicate applications, saves and registrations.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

log = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the job board database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_db(db: Database) -> None:
    """Swap the active database (tests use an in-memory one)."""
    global _db
    _db = db


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        log.error(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
    "applications": "applications",
    "saved_jobs": "saved_jobs"
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)

    # Listing queries: owner view and newest-first public search
    db[COLLECTIONS["jobs"]].create_index([("company", ASCENDING), ("created_at", DESCENDING)])
    db[COLLECTIONS["jobs"]].create_index([("is_closed", ASCENDING), ("created_at", DESCENDING)])

    # One application per job per user
    db[COLLECTIONS["applications"]].create_index([
        ("job", ASCENDING),
        ("applicant", ASCENDING)
    ], unique=True)
    db[COLLECTIONS["applications"]].create_index("applicant")
    db[COLLECTIONS["applications"]].create_index("status")
    db[COLLECTIONS["applications"]].create_index([("created_at", DESCENDING)])

    # One bookmark per jobseeker per job
    db[COLLECTIONS["saved_jobs"]].create_index([
        ("jobseeker", ASCENDING),
        ("job", ASCENDING)
    ], unique=True)

    log.info("MongoDB indexes created successfully")
