"""
User Service

Registration, login and profile management for jobseekers and employers.
Role is fixed at registration; there is no operation to change it.
Avatar and resume are references to files kept by an external store.
"""

import logging
from datetime import datetime

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.core.auth import hash_password, verify_password
from app.core.errors import AuthenticationError, Conflict, Forbidden, NotFound, ValidationError
from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import ProfileUpdate, RegisterRequest, UserRole
from app.services.mongo_service import guard_storage, to_object_id, validate_model

log = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "role", "avatar", "resume",
                  "company_name", "company_description", "company_logo")
EMPLOYER_FIELDS = ("company_name", "company_description", "company_logo")
PUBLIC_FIELDS = ("name", "role", "avatar", "company_name", "company_description")


def profile_view(user: dict) -> dict:
    view = {"id": str(user["_id"])}
    view.update({field: user.get(field) for field in PROFILE_FIELDS})
    return view


class UserService:

    def __init__(self):
        self.users: Collection = get_collection(COLLECTIONS["users"])

    @guard_storage
    def register(self, fields: dict) -> dict:
        data = validate_model(RegisterRequest, fields or {})

        if self.users.find_one({"email": data.email}, {"_id": 1}):
            raise Conflict("User already exists")

        now = datetime.utcnow()
        doc = {
            "name": data.name,
            "email": data.email,
            "password": hash_password(data.password),
            "role": data.role.value,
            "created_at": now,
            "updated_at": now
        }
        if data.role == UserRole.employer:
            doc["company_name"] = data.company_name
            doc["company_description"] = data.company_description

        try:
            self.users.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("User already exists")

        log.info(f"User registered: id={doc['_id']} role={doc['role']}")
        return profile_view(doc)

    @guard_storage
    def authenticate(self, email: str, password: str) -> dict:
        user = self.users.find_one({"email": (email or "").strip().lower()})
        if not user or not verify_password(password, user["password"]):
            raise AuthenticationError("Invalid email or password")
        return profile_view(user)

    @guard_storage
    def get_profile(self, user_id: str) -> dict:
        return profile_view(self._get_user(user_id))

    @guard_storage
    def update_profile(self, user_id: str, patch: dict) -> dict:
        """
        Update own profile. Company fields are only applied for employers
        and silently ignored for jobseekers.
        """
        user = self._get_user(user_id)
        changes = validate_model(ProfileUpdate, patch or {}).model_dump(exclude_unset=True)
        if user["role"] != UserRole.employer.value:
            for field in EMPLOYER_FIELDS:
                changes.pop(field, None)
        if not changes:
            raise ValidationError("No fields to update")

        changes["updated_at"] = datetime.utcnow()
        self.users.update_one({"_id": user["_id"]}, {"$set": changes})
        return profile_view(self.users.find_one({"_id": user["_id"]}))

    @guard_storage
    def set_avatar(self, user_id: str, reference: str) -> str:
        user = self._get_user(user_id)
        self.users.update_one(
            {"_id": user["_id"]},
            {"$set": {"avatar": reference, "updated_at": datetime.utcnow()}}
        )
        return reference

    @guard_storage
    def set_resume(self, user_id: str, reference: str) -> str:
        """Point the jobseeker's profile at a resume. Later applications snapshot it."""
        user = self._get_user(user_id)
        if user["role"] != UserRole.jobseeker.value:
            raise Forbidden("Only jobseekers can upload a resume")
        self.users.update_one(
            {"_id": user["_id"]},
            {"$set": {"resume": reference, "updated_at": datetime.utcnow()}}
        )
        log.info(f"Resume updated for user {user['_id']}")
        return reference

    @guard_storage
    def delete_resume(self, user_id: str) -> None:
        user = self._get_user(user_id)
        if not user.get("resume"):
            raise ValidationError("No resume to delete")
        self.users.update_one(
            {"_id": user["_id"]},
            {"$unset": {"resume": ""}, "$set": {"updated_at": datetime.utcnow()}}
        )

    @guard_storage
    def get_public_profile(self, user_id: str) -> dict:
        user = self._get_user(user_id)
        view = {"id": str(user["_id"])}
        view.update({field: user.get(field) for field in PUBLIC_FIELDS})
        return view

    def _get_user(self, user_id: str) -> dict:
        user = self.users.find_one({"_id": to_object_id(user_id, "user id")})
        if not user:
            raise NotFound("User not found")
        return user


def get_user_service() -> UserService:
    return UserService()
