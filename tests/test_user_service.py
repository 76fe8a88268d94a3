"""Tests for registration, login and profile management."""

import pytest

from app.core.errors import AuthenticationError, Conflict, Forbidden, NotFound, ValidationError


def seeker_fields(**overrides):
    fields = {"name": "Sam Seeker", "email": "Sam@Seeker.io", "password": "secret123", "role": "jobseeker"}
    fields.update(overrides)
    return fields


class TestRegister:
    def test_register_jobseeker(self, db, user_service):
        user = user_service.register(seeker_fields())
        assert user["role"] == "jobseeker"
        assert user["email"] == "sam@seeker.io"
        assert "password" not in user

        stored = db.users.find_one({"email": "sam@seeker.io"})
        assert stored["password"] != "secret123"

    def test_register_employer_requires_company(self, user_service):
        with pytest.raises(ValidationError, match="Company name is required"):
            user_service.register(seeker_fields(role="employer"))

        user = user_service.register(seeker_fields(role="employer", company_name="Acme Corp"))
        assert user["company_name"] == "Acme Corp"

    def test_jobseeker_cannot_carry_company(self, user_service):
        with pytest.raises(ValidationError):
            user_service.register(seeker_fields(company_name="Acme Corp"))

    def test_duplicate_email_conflicts(self, user_service):
        user_service.register(seeker_fields())
        with pytest.raises(Conflict, match="User already exists"):
            user_service.register(seeker_fields(email="sam@seeker.io", name="Another Sam"))

    @pytest.mark.parametrize("overrides", [
        {"name": "Al"},
        {"password": "123"},
        {"email": "not-an-email"},
        {"role": "admin"},
    ])
    def test_invalid_fields(self, user_service, overrides):
        with pytest.raises(ValidationError):
            user_service.register(seeker_fields(**overrides))


class TestAuthenticate:
    def test_login_with_any_email_case(self, user_service):
        registered = user_service.register(seeker_fields())
        user = user_service.authenticate("SAM@seeker.io ", "secret123")
        assert user["id"] == registered["id"]

    @pytest.mark.parametrize("email, password", [
        ("sam@seeker.io", "wrong-password"),
        ("nobody@seeker.io", "secret123"),
    ])
    def test_bad_credentials(self, user_service, email, password):
        user_service.register(seeker_fields())
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            user_service.authenticate(email, password)


class TestProfile:
    def test_employer_updates_company_fields(self, user_service, employer):
        profile = user_service.update_profile(employer, {"company_description": "We build rockets"})
        assert profile["company_description"] == "We build rockets"
        assert profile["company_name"] == "Acme Corp"

    def test_company_fields_ignored_for_jobseeker(self, user_service, jobseeker):
        profile = user_service.update_profile(jobseeker, {"name": "Samuel", "company_name": "Sneaky Ltd"})
        assert profile["name"] == "Samuel"
        assert profile["company_name"] is None

    def test_update_with_nothing_to_apply(self, user_service, jobseeker):
        with pytest.raises(ValidationError, match="No fields to update"):
            user_service.update_profile(jobseeker, {"company_logo": "/logo.png"})

    def test_unknown_user(self, user_service, db):
        with pytest.raises(NotFound):
            user_service.get_profile("5f1d7f0c2b3e4a0012345678")


class TestFileReferences:
    def test_set_avatar(self, user_service, employer):
        user_service.set_avatar(employer, "/uploads/avatars/erin.png")
        assert user_service.get_profile(employer)["avatar"] == "/uploads/avatars/erin.png"

    def test_resume_lifecycle(self, user_service, jobseeker):
        user_service.set_resume(jobseeker, "/uploads/resumes/sam-2.pdf")
        assert user_service.get_profile(jobseeker)["resume"] == "/uploads/resumes/sam-2.pdf"

        user_service.delete_resume(jobseeker)
        assert user_service.get_profile(jobseeker)["resume"] is None
        with pytest.raises(ValidationError, match="No resume to delete"):
            user_service.delete_resume(jobseeker)

    def test_employer_cannot_set_resume(self, user_service, employer):
        with pytest.raises(Forbidden):
            user_service.set_resume(employer, "/uploads/resumes/erin.pdf")


def test_public_profile_hides_private_fields(user_service, jobseeker):
    profile = user_service.get_public_profile(jobseeker)
    assert profile["name"] == "Sam Seeker"
    assert profile["role"] == "jobseeker"
    assert "email" not in profile
    assert "resume" not in profile
