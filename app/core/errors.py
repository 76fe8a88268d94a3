"""
Domain Errors

Every expected failure of a service call is one of these.
The API layer maps them to HTTP status codes (see app.main).
"""

from typing import Optional


class DomainError(Exception):
    """Base class for all expected, caller-facing failures."""

    status_code: int = 500
    headers: Optional[dict] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or missing input (bad enum value, salary_max < salary_min...)."""
    status_code = 400


class AuthenticationError(DomainError):
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(DomainError):
    """Caller lacks ownership or role for the requested operation."""
    status_code = 403


class NotFound(DomainError):
    """Referenced entity is absent, or deliberately hidden (closed jobs)."""
    status_code = 404


class Conflict(DomainError):
    """Uniqueness violation: duplicate application, save or registration."""
    status_code = 409


class InternalError(DomainError):
    """Unexpected storage failure. Message never carries storage details."""
    status_code = 500
