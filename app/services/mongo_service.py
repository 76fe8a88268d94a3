"""
MongoDB Service Helpers - shared by every entity service.

- ObjectId <-> string conversion for documents leaving the service layer
- Identifier parsing (malformed ids are a ValidationError, not a crash)
- Storage-failure wrapping (PyMongoError -> InternalError)
- Input validation through the Pydantic schemas
- Summary projections used when "joining" documents across collections
"""

import logging
from functools import wraps
from typing import Optional, Type

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from app.core.errors import InternalError, ValidationError

log = logging.getLogger(__name__)

# Fields holding references to other documents
REFERENCE_FIELDS = ("company", "job", "applicant", "jobseeker")


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict (`_id` becomes `id`)."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    doc.pop("password", None)
    for field in REFERENCE_FIELDS:
        if isinstance(doc.get(field), ObjectId):
            doc[field] = str(doc[field])
    return doc


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value, label: str = "id") -> ObjectId:
    """Parse a string identifier. Raises ValidationError("Invalid <label>")."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label}")


def guard_storage(func):
    """
    Wrap a service method so unexpected storage failures surface as
    InternalError. Domain errors (including Conflicts already mapped from
    DuplicateKeyError) pass through untouched.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PyMongoError as e:
            log.error(f"Storage failure in {func.__qualname__}: {e}", exc_info=True)
            raise InternalError("Internal server error")
    return wrapper


def validate_model(model: Type[BaseModel], data: dict) -> BaseModel:
    """Validate plain input with a schema, re-raising as a domain ValidationError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e))


def format_validation_errors(error: PydanticValidationError) -> str:
    messages = []
    for err in error.errors():
        msg = err["msg"]
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(messages)


# ============================================================
# SUMMARY PROJECTIONS
# ============================================================

def company_summary(user: Optional[dict]) -> Optional[dict]:
    """Owner's public fields shown alongside a job."""
    if not user:
        return None
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "company_name": user.get("company_name"),
        "company_description": user.get("company_description"),
        "company_logo": user.get("company_logo"),
        "avatar": user.get("avatar")
    }


def job_summary(job: Optional[dict], owner: Optional[dict] = None) -> Optional[dict]:
    if not job:
        return None
    return {
        "id": str(job["_id"]),
        "title": job["title"],
        "location": job.get("location"),
        "job_type": job["job_type"],
        "salary_min": job.get("salary_min"),
        "salary_max": job.get("salary_max"),
        "is_closed": job.get("is_closed", False),
        "company_name": owner.get("company_name") if owner else None
    }


def applicant_summary(user: Optional[dict]) -> Optional[dict]:
    if not user:
        return None
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "resume": user.get("resume"),
        "avatar": user.get("avatar")
    }


def index_by_id(docs) -> dict:
    """Map _id -> document, for joining a batch of references in one query."""
    return {doc["_id"]: doc for doc in docs}
