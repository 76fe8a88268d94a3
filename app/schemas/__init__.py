"""
Schemas module - Request/Response schemas for API endpoints.

Difference from services:
- Services: plain dicts in, plain dicts out
- Schemas: API contract (what client sends/receives) and input validators
"""

from app.schemas.schemas import (
    UserRole, JobType, ApplicationStatus, JobStatusFilter,
    JobCreate, JobUpdate, RegisterRequest, ProfileUpdate
)

__all__ = [
    "UserRole", "JobType", "ApplicationStatus", "JobStatusFilter",
    "JobCreate", "JobUpdate", "RegisterRequest", "ProfileUpdate"
]
